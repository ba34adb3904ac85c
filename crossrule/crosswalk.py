"""Bidirectional mapping between canonical activation types and dialect fields.

Decoding reads a parsed frontmatter mapping (plus the body, for dialects
that infer activation from prose) and returns a canonical activation type
with its patterns. Encoding goes the other way and is total: a type the
target cannot express is folded into hint lines at the top of the body and
the rule is tagged with the fallback type, which is always `always`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Optional

from crossrule.dialects import DialectProfile
from crossrule.frontmatter import join_patterns, normalize_patterns
from crossrule.models import ActivationType, CanonicalRule

A = ActivationType

FALLBACK = ActivationType.ALWAYS

TRIGGER_VALUES: dict[str, ActivationType] = {
    "always_on": A.ALWAYS,
    "glob": A.PATTERN,
    "manual": A.MANUAL,
    "model_decision": A.CONTEXT,
}
TRIGGER_FOR = {v: k for k, v in TRIGGER_VALUES.items()}

PATTERN_HINT = "Applies to files matching: {patterns}"
CONTEXT_HINT = "Context: {context}"
MANUAL_HINT = "Manual: apply only when explicitly requested."
DESCRIPTION_HINT = "Description: {description}"

# Qoder rules without frontmatter name their files in prose.
_PROSE_PATTERN_RE = re.compile(r"\*\*/\*\.[a-zA-Z]+|\*\.[a-zA-Z]+|src/\*+")


@dataclass(frozen=True)
class Encoding:
    activation: ActivationType
    fields: dict[str, Any]
    hints: tuple[str, ...] = ()

    @property
    def degraded(self) -> bool:
        return bool(self.hints)


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def _first_patterns(meta: dict[str, Any], fields: tuple[str, ...]) -> tuple[str, ...]:
    for key in fields:
        patterns = normalize_patterns(meta.get(key))
        if patterns:
            return patterns
    return ()


def _cursor_default(always_flag: Any, description: str, body: str) -> tuple[ActivationType, tuple[str, ...]]:
    if always_flag is False:
        return (A.CONTEXT if description else A.MANUAL), ()
    return A.ALWAYS, ()


def _trae_default(always_flag: Any, description: str, body: str) -> tuple[ActivationType, tuple[str, ...]]:
    if always_flag is False:
        return A.MANUAL, ()
    return A.ALWAYS, ()


def _qoder_default(always_flag: Any, description: str, body: str) -> tuple[ActivationType, tuple[str, ...]]:
    if always_flag is None and ("*." in body or "src/" in body):
        found = normalize_patterns(_PROSE_PATTERN_RE.findall(body))
        if found:
            return A.PATTERN, found
    return A.ALWAYS, ()


_DEFAULTS: dict[str, Callable[[Any, str, str], tuple[ActivationType, tuple[str, ...]]]] = {
    "cursor": _cursor_default,
    "trae": _trae_default,
    "qoder": _qoder_default,
}


def decode_activation(
    profile: DialectProfile,
    meta: dict[str, Any],
    description: str = "",
    body: str = "",
) -> tuple[ActivationType, tuple[str, ...], list[str]]:
    """Return (activation, patterns, warnings) for one parsed unit.

    Priority: explicit trigger, then a non-empty glob field, then the
    always-apply flag, then the dialect default. Patterns outrank every
    signal except manual and context-decided triggers.
    """
    warnings: list[str] = []

    explicit: Optional[ActivationType] = None
    if profile.trigger_field and meta.get(profile.trigger_field) is not None:
        raw = str(meta[profile.trigger_field]).strip().lower()
        explicit = TRIGGER_VALUES.get(raw)
        if explicit is None:
            warnings.append(f"unrecognized {profile.trigger_field} value '{raw}'")

    patterns = _first_patterns(meta, profile.pattern_fields)
    if profile.id == "vscode" and patterns == ("**",):
        patterns = ()
        explicit = explicit or A.ALWAYS

    always_flag = meta.get(profile.always_field) if profile.always_field else None

    if explicit in (A.MANUAL, A.CONTEXT):
        return explicit, patterns, warnings
    if patterns:
        return A.PATTERN, patterns, warnings
    if explicit is A.PATTERN:
        warnings.append("glob trigger without patterns, treating as always")
        return A.ALWAYS, (), warnings
    if explicit is A.ALWAYS or always_flag is True:
        return A.ALWAYS, (), warnings

    default = _DEFAULTS.get(profile.id)
    if default is None:
        return A.ALWAYS, (), warnings
    activation, found = default(always_flag, description, body)
    return activation, found, warnings


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def native_activation(activation: ActivationType, profile: DialectProfile) -> ActivationType:
    return activation if activation in profile.activation_types else FALLBACK


def degradation_hints(rule: CanonicalRule) -> tuple[str, ...]:
    """Hint lines that carry *rule*'s activation when the target cannot."""
    if rule.activation is A.PATTERN:
        return (PATTERN_HINT.format(patterns=", ".join(rule.patterns)),)
    if rule.activation is A.CONTEXT:
        return (CONTEXT_HINT.format(context=rule.description or rule.name),)
    if rule.activation is A.MANUAL:
        return (MANUAL_HINT,)
    return ()


def _with_description(rule: CanonicalRule) -> dict[str, Any]:
    return {"description": rule.description} if rule.description else {}


def _encode_cursor(rule: CanonicalRule, target: ActivationType) -> tuple[dict[str, Any], tuple[str, ...]]:
    if target is A.ALWAYS:
        return {**_with_description(rule), "alwaysApply": True}, ()
    if target is A.PATTERN:
        return {**_with_description(rule), "globs": list(rule.patterns), "alwaysApply": False}, ()
    if target is A.CONTEXT:
        return {"description": rule.description or rule.name, "alwaysApply": False}, ()
    # A description would turn a manual rule into an agent-requested one.
    hints = (DESCRIPTION_HINT.format(description=rule.description),) if rule.description else ()
    return {"alwaysApply": False}, hints


def _encode_windsurf(rule: CanonicalRule, target: ActivationType) -> tuple[dict[str, Any], tuple[str, ...]]:
    fields: dict[str, Any] = {"trigger": TRIGGER_FOR[target], **_with_description(rule)}
    if target is A.PATTERN:
        fields["globs"] = join_patterns(rule.patterns)
    return fields, ()


def _encode_qoder(rule: CanonicalRule, target: ActivationType) -> tuple[dict[str, Any], tuple[str, ...]]:
    fields: dict[str, Any] = {"trigger": TRIGGER_FOR[target], **_with_description(rule)}
    if target is A.ALWAYS:
        fields["alwaysApply"] = True
    if target is A.PATTERN:
        fields["glob"] = join_patterns(rule.patterns)
    return fields, ()


def _encode_trae(rule: CanonicalRule, target: ActivationType) -> tuple[dict[str, Any], tuple[str, ...]]:
    fields = _with_description(rule)
    if target is A.PATTERN:
        fields["globs"] = join_patterns(rule.patterns)
    fields["alwaysApply"] = target is A.ALWAYS
    return fields, ()


def _encode_vscode(rule: CanonicalRule, target: ActivationType) -> tuple[dict[str, Any], tuple[str, ...]]:
    apply_to = join_patterns(rule.patterns) if target is A.PATTERN else "**"
    return {**_with_description(rule), "applyTo": apply_to}, ()


def _encode_plain(rule: CanonicalRule, target: ActivationType) -> tuple[dict[str, Any], tuple[str, ...]]:
    return {}, ()


_ENCODERS: dict[str, Callable[[CanonicalRule, ActivationType], tuple[dict[str, Any], tuple[str, ...]]]] = {
    "cursor": _encode_cursor,
    "windsurf": _encode_windsurf,
    "cline": _encode_plain,
    "vscode": _encode_vscode,
    "codex": _encode_plain,
    "claude-code": _encode_plain,
    "qoder": _encode_qoder,
    "trae": _encode_trae,
    "qwencoder": _encode_plain,
}


def encode(rule: CanonicalRule, profile: DialectProfile) -> Encoding:
    """Native fields and body hints for *rule* in *profile*'s dialect."""
    target = native_activation(rule.activation, profile)
    hints = degradation_hints(rule) if target is not rule.activation else ()
    fields, extra = _ENCODERS[profile.id](rule, target)
    return Encoding(activation=target, fields=fields, hints=hints + extra)


def apply_hints(body: str, hints: tuple[str, ...]) -> str:
    if not hints:
        return body
    return "\n".join(hints) + "\n\n" + body
