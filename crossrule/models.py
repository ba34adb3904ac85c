"""Dialect-neutral data structures shared by parsers, serializers and the orchestrator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional


class ActivationType(str, Enum):
    """When a rule is supplied to the assistant."""

    ALWAYS = "always"
    PATTERN = "pattern-matched"
    MANUAL = "manual"
    CONTEXT = "context-decided"


@dataclass(frozen=True)
class CanonicalRule:
    name: str
    body: str
    source: str
    activation: ActivationType = ActivationType.ALWAYS
    description: str = ""
    patterns: tuple[str, ...] = ()
    # Dialect-specific extras (file path, raw size, section name). Not part
    # of rule identity, so excluded from equality.
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.patterns, tuple):
            object.__setattr__(self, "patterns", tuple(self.patterns))
        if self.activation is ActivationType.PATTERN and not self.patterns:
            raise ValueError(f"rule '{self.name}' is pattern-matched but has no patterns")


@dataclass(frozen=True)
class ParseUnit:
    """One chunk of source text that yields at most one rule."""
    text: str
    path: Path
    name: Optional[str] = None


@dataclass(frozen=True)
class DetectionResult:
    dialect: str
    rules: tuple[CanonicalRule, ...] = ()
    location: Optional[Path] = None
    warnings: tuple[str, ...] = ()

    @property
    def rule_count(self) -> int:
        return len(self.rules)


@dataclass
class ConversionOutcome:
    success: bool = True
    converted: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    output_files: dict[str, list[Path]] = field(default_factory=dict)

    def all_files(self) -> list[Path]:
        """Flattened output paths in target order."""
        return [p for paths in self.output_files.values() for p in paths]
