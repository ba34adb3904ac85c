"""YAML frontmatter splitting/rendering and glob-field normalization."""

from __future__ import annotations

import re
from typing import Any

import yaml

from crossrule.errors import FrontmatterError

_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE
)

# Commas separate patterns except inside brace groups like *.{ts,tsx}
_PATTERN_SPLIT_RE = re.compile(r",(?![^{]*\})")


def parse_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Split a leading `---` block from *text*. Returns (metadata, body).

    No block at all gives ({}, text). A block that is not a YAML mapping
    raises FrontmatterError.
    """
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return {}, text
    try:
        meta = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        raise FrontmatterError(f"invalid YAML frontmatter: {exc}") from exc
    if meta is None:
        meta = {}
    if not isinstance(meta, dict):
        raise FrontmatterError(
            f"frontmatter must be a mapping, got {type(meta).__name__}"
        )
    return meta, text[match.end():]


def build_frontmatter(meta: dict[str, Any]) -> str:
    """Render *meta* between `---` lines, keys in insertion order."""
    if not meta:
        return "---\n---"
    dumped = yaml.safe_dump(
        meta, default_flow_style=False, sort_keys=False, allow_unicode=True, width=1000
    )
    return f"---\n{dumped.rstrip()}\n---"


def normalize_patterns(value: Any) -> tuple[str, ...]:
    """Accept a string, comma-separated string or list and return ordered patterns."""
    if value is None or value is False:
        return ()
    items = value if isinstance(value, (list, tuple)) else [value]
    patterns: list[str] = []
    for item in items:
        if item is None:
            continue
        for part in _PATTERN_SPLIT_RE.split(str(item)):
            part = part.strip()
            if part and part not in patterns:
                patterns.append(part)
    return tuple(patterns)


def join_patterns(patterns: tuple[str, ...]) -> str:
    return ",".join(patterns)
