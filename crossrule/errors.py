"""Exception types raised inside the conversion core."""

from __future__ import annotations

from typing import Optional


class CrossRuleError(Exception):
    """Base class for all crossrule errors."""


class UnknownDialectError(CrossRuleError, KeyError):
    """A dialect identifier or display name did not resolve."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown editor: {self.name}"


class FrontmatterError(CrossRuleError, ValueError):
    """A leading YAML block could not be parsed into a mapping."""


class SerializationError(CrossRuleError):
    """Rendering or writing one rule (or one shared file) failed."""

    def __init__(self, dialect: str, message: str, rule: Optional[str] = None) -> None:
        super().__init__(message)
        self.dialect = dialect
        self.rule = rule

    def __str__(self) -> str:
        what = f"rule '{self.rule}'" if self.rule else "rules"
        return f"Failed to convert {what} to {self.dialect}: {self.args[0]}"
