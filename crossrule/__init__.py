"""Convert AI coding-assistant rule files between editor dialects."""

from crossrule.converter import convert
from crossrule.dialects import (
    DIALECTS,
    display_names_for,
    resolve_dialect,
    resolve_dialect_by_display_name,
)
from crossrule.models import (
    ActivationType,
    CanonicalRule,
    ConversionOutcome,
    DetectionResult,
)
from crossrule.parsers import detect, detect_dialect

__all__ = [
    "DIALECTS",
    "ActivationType",
    "CanonicalRule",
    "ConversionOutcome",
    "DetectionResult",
    "convert",
    "detect",
    "detect_dialect",
    "display_names_for",
    "resolve_dialect",
    "resolve_dialect_by_display_name",
]

__version__ = "1.0.0"
