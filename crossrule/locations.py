"""Candidate rule-source paths for a dialect inside a project."""

from __future__ import annotations

from pathlib import Path
from typing import Union

from crossrule.dialects import DialectProfile, get_profile


def resolve_locations(dialect: Union[str, DialectProfile], project_root: Path) -> list[Path]:
    """Primary locations, then legacy ones, in declared order. Never touches the disk."""
    profile = dialect if isinstance(dialect, DialectProfile) else get_profile(dialect)
    root = Path(project_root).expanduser().absolute()
    return [root / loc for loc in (*profile.locations, *profile.legacy_locations)]


def output_location(dialect: Union[str, DialectProfile], output_root: Path) -> Path:
    """Where a conversion writes: the first primary location."""
    profile = dialect if isinstance(dialect, DialectProfile) else get_profile(dialect)
    return Path(output_root).expanduser().absolute() / profile.locations[0]
