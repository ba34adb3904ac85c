"""Parse dialect-specific rule sources into canonical rules, and detect them on disk."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Optional, Union

from crossrule.crosswalk import decode_activation
from crossrule.dialects import DIALECTS, DialectProfile, get_profile
from crossrule.errors import FrontmatterError
from crossrule.frontmatter import parse_frontmatter
from crossrule.locations import resolve_locations
from crossrule.models import CanonicalRule, DetectionResult, ParseUnit
from crossrule.scanner import scan_location

logger = logging.getLogger(__name__)

FALLBACK_NAME = "unnamed"

_HEADING_RE = re.compile(r"^#[ \t]+(.+?)[ \t]*$", re.MULTILINE)

# Dialects without frontmatter take their description from the first heading.
HEADING_DESCRIPTION = frozenset({"cline", "claude-code", "codex", "qwencoder"})


def first_heading(text: str) -> str:
    m = _HEADING_RE.search(text)
    return m.group(1).strip() if m else ""


def trim_blank_lines(text: str) -> str:
    """Drop leading and trailing whitespace-only lines, keep everything else."""
    lines = text.splitlines()
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    return "\n".join(lines)


def rule_name_for(unit: ParseUnit, profile: DialectProfile) -> str:
    if unit.name:
        return unit.name
    filename = unit.path.name
    for ext in sorted(profile.extensions, key=len, reverse=True):
        if filename.endswith(ext) and len(filename) > len(ext):
            filename = filename[: -len(ext)]
            break
    else:
        filename = unit.path.stem
    return filename.lstrip(".") or FALLBACK_NAME


def _known_fields(profile: DialectProfile) -> set[str]:
    known = {"description", *profile.pattern_fields}
    if profile.trigger_field:
        known.add(profile.trigger_field)
    if profile.always_field:
        known.add(profile.always_field)
    return known


def parse_unit(
    unit: ParseUnit, dialect: Union[str, DialectProfile]
) -> tuple[Optional[CanonicalRule], list[str]]:
    """Build at most one canonical rule from *unit*. Returns (rule, warnings)."""
    profile = dialect if isinstance(dialect, DialectProfile) else get_profile(dialect)
    warnings: list[str] = []
    meta: dict[str, Any] = {}
    body = unit.text

    if profile.frontmatter:
        try:
            meta, body = parse_frontmatter(unit.text)
        except FrontmatterError as exc:
            msg = f"Could not parse frontmatter in {unit.path}: {exc}"
            logger.warning(msg)
            warnings.append(msg)
            meta, body = {}, unit.text

    body = trim_blank_lines(body)
    name = rule_name_for(unit, profile)

    description = str(meta["description"]).strip() if meta.get("description") else ""
    if not description and profile.id in HEADING_DESCRIPTION:
        description = first_heading(body)

    activation, patterns, notes = decode_activation(profile, meta, description, body)
    warnings.extend(f"{unit.path} ({name}): {note}" for note in notes)

    if not body and not meta:
        msg = f"Skipping empty rule '{name}' in {unit.path}"
        logger.warning(msg)
        warnings.append(msg)
        return None, warnings

    metadata: dict[str, Any] = {"path": str(unit.path), "size": len(unit.text)}
    if unit.name:
        metadata["section"] = unit.name
    known = _known_fields(profile)
    extras = {k: v for k, v in meta.items() if k not in known}
    if extras:
        metadata["frontmatter"] = extras

    rule = CanonicalRule(
        name=name,
        description=description,
        body=body,
        activation=activation,
        patterns=patterns,
        source=profile.id,
        metadata=metadata,
    )
    return rule, warnings


# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------


def detect_dialect(dialect: str, project_root: Path) -> DetectionResult:
    """Scan every candidate location of one dialect. Missing locations are not errors."""
    profile = get_profile(dialect)
    rules: list[CanonicalRule] = []
    warnings: list[str] = []
    location: Optional[Path] = None

    for path in resolve_locations(profile, Path(project_root)):
        units, scan_warnings = scan_location(profile, path)
        warnings.extend(scan_warnings)
        found = 0
        for unit in units:
            rule, unit_warnings = parse_unit(unit, profile)
            warnings.extend(unit_warnings)
            if rule is not None:
                rules.append(rule)
                found += 1
        if found and location is None:
            location = path
        if found:
            logger.debug("%s: %d rule(s) at %s", profile.display_name, found, path)

    return DetectionResult(
        dialect=profile.id,
        rules=tuple(rules),
        location=location,
        warnings=tuple(warnings),
    )


def detect(project_root: Path = Path(".")) -> list[DetectionResult]:
    """Every dialect with at least one rule, most rules first."""
    results = [detect_dialect(d, project_root) for d in DIALECTS]
    found = [r for r in results if r.rule_count > 0]
    return sorted(found, key=lambda r: r.rule_count, reverse=True)
