"""Turn a resolved location into parse units."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional, Union

from crossrule.dialects import DialectProfile, Layout, get_profile
from crossrule.models import ParseUnit

logger = logging.getLogger(__name__)

SECTION_RE = re.compile(r"^---- (.+?) ----[ \t]*$", re.MULTILINE)


def split_sections(text: str) -> tuple[str, list[tuple[str, str]]]:
    """Split `---- name ----` delimited text into (preamble, [(name, content), ...]).

    Content is returned verbatim, delimiter line excluded.
    """
    parts = SECTION_RE.split(text)
    # parts[0] is preamble, then alternating (name, content)
    sections = []
    for i in range(1, len(parts), 2):
        name = parts[i].strip()
        content = parts[i + 1] if i + 1 < len(parts) else ""
        sections.append((name, content))
    return parts[0], sections


def _read(path: Path, warnings: list[str]) -> Optional[str]:
    try:
        return path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Could not read {path}: {exc}"
        logger.warning(msg)
        warnings.append(msg)
        return None


def _matching_files(directory: Path, extensions: tuple[str, ...]) -> list[Path]:
    found: set[Path] = set()
    for ext in extensions:
        found.update(p for p in directory.rglob(f"*{ext}") if p.is_file())
    return sorted(found)


def scan_location(
    dialect: Union[str, DialectProfile], path: Path
) -> tuple[list[ParseUnit], list[str]]:
    """Enumerate parse units at *path*. Returns (units, warnings).

    A missing path yields no units and no warning.
    """
    profile = dialect if isinstance(dialect, DialectProfile) else get_profile(dialect)
    units: list[ParseUnit] = []
    warnings: list[str] = []

    if path.is_dir():
        try:
            files = _matching_files(path, profile.extensions)
        except OSError as exc:
            msg = f"Could not list {path}: {exc}"
            logger.warning(msg)
            warnings.append(msg)
            return units, warnings
        for f in files:
            text = _read(f, warnings)
            if text is not None:
                units.append(ParseUnit(text=text, path=f))
        return units, warnings

    if not path.is_file():
        return units, warnings

    text = _read(path, warnings)
    if text is None:
        return units, warnings

    if profile.layout is Layout.MULTIPLEX:
        _, sections = split_sections(text)
        for name, content in sections:
            if not name or not content.strip():
                logger.debug("Skipping empty section %r in %s", name, path)
                continue
            units.append(ParseUnit(text=content, path=path, name=name))
    else:
        units.append(ParseUnit(text=text, path=path))
    return units, warnings
