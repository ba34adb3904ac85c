"""Static table of per-editor rule dialects and display-name lookups."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from crossrule.errors import UnknownDialectError
from crossrule.models import ActivationType

A = ActivationType


class Layout(str, Enum):
    PER_FILE = "per-file"        # one rule per file inside a rules directory
    MULTIPLEX = "multiplex"      # one shared file, `---- name ----` sections
    NARRATIVE = "narrative"      # one shared file, heading-per-rule appended


@dataclass(frozen=True)
class DialectProfile:
    id: str
    display_names: tuple[str, ...]
    extensions: tuple[str, ...]
    locations: tuple[str, ...]
    activation_types: frozenset[ActivationType]
    layout: Layout = Layout.PER_FILE
    legacy_locations: tuple[str, ...] = ()
    frontmatter: bool = False
    # Frontmatter vocabulary, consulted by the crosswalk.
    trigger_field: Optional[str] = None
    pattern_fields: tuple[str, ...] = ()
    always_field: Optional[str] = None
    max_file_size: Optional[int] = None
    max_total_size: Optional[int] = None
    # Opening lines written when a shared file is created from scratch.
    header: tuple[str, ...] = ()

    @property
    def display_name(self) -> str:
        return self.display_names[0]

    @property
    def primary_extension(self) -> str:
        return self.extensions[0]

    @property
    def shared_file(self) -> bool:
        return self.layout is not Layout.PER_FILE


_AGENTS_MD_NAMES = ("Codex CLI", "OpenCode", "VSCode Agents", "AGENTS.md Compatible")


def agents_shared_description() -> str:
    """Compatibility line written under the AGENTS.md title."""
    return f"*AGENTS.md shared format - works with {', '.join(_AGENTS_MD_NAMES)}. Docs: https://agents.md*"


_PROFILES = (
    DialectProfile(
        id="cursor",
        display_names=("Cursor",),
        extensions=(".mdc",),
        locations=(".cursor/rules",),
        legacy_locations=(".cursorrules",),
        activation_types=frozenset({A.ALWAYS, A.PATTERN, A.MANUAL, A.CONTEXT}),
        frontmatter=True,
        pattern_fields=("globs",),
        always_field="alwaysApply",
        max_file_size=500 * 80,
    ),
    DialectProfile(
        id="windsurf",
        display_names=("Windsurf",),
        extensions=(".md",),
        locations=(".windsurf/rules",),
        legacy_locations=(".windsurfrules",),
        activation_types=frozenset({A.ALWAYS, A.PATTERN, A.MANUAL, A.CONTEXT}),
        frontmatter=True,
        trigger_field="trigger",
        pattern_fields=("globs", "filesToApplyRule"),
        always_field="alwaysApply",
        max_file_size=12000,
        max_total_size=12000,
    ),
    DialectProfile(
        id="cline",
        display_names=("Cline",),
        extensions=(".md",),
        locations=(".clinerules",),
        activation_types=frozenset({A.ALWAYS}),
    ),
    DialectProfile(
        id="vscode",
        display_names=("VSCode",),
        extensions=(".instructions.md", ".md"),
        locations=(".github/instructions",),
        legacy_locations=(".github/copilot-instructions.md",),
        activation_types=frozenset({A.ALWAYS, A.PATTERN}),
        frontmatter=True,
        pattern_fields=("applyTo",),
    ),
    DialectProfile(
        id="codex",
        display_names=_AGENTS_MD_NAMES,
        extensions=(".md",),
        locations=("AGENTS.md",),
        activation_types=frozenset({A.ALWAYS}),
        layout=Layout.MULTIPLEX,
        header=(
            "# Project Agent Rules",
            agents_shared_description(),
        ),
    ),
    DialectProfile(
        id="claude-code",
        display_names=("Claude Code",),
        extensions=(".md",),
        locations=("CLAUDE.md",),
        activation_types=frozenset({A.ALWAYS}),
        layout=Layout.NARRATIVE,
        header=(
            "# CLAUDE.md",
            "This file provides guidance to Claude Code when working with code in this repository.",
        ),
    ),
    DialectProfile(
        id="qoder",
        display_names=("Qoder",),
        extensions=(".md",),
        locations=(".qoder/rules",),
        activation_types=frozenset({A.ALWAYS, A.PATTERN, A.MANUAL, A.CONTEXT}),
        frontmatter=True,
        trigger_field="trigger",
        pattern_fields=("glob", "globs"),
        always_field="alwaysApply",
        max_total_size=100000,
    ),
    DialectProfile(
        id="trae",
        display_names=("Trae",),
        extensions=(".md",),
        locations=(".trae/rules",),
        legacy_locations=(".cursorrules",),
        activation_types=frozenset({A.ALWAYS, A.PATTERN, A.MANUAL}),
        frontmatter=True,
        pattern_fields=("globs",),
        always_field="alwaysApply",
    ),
    DialectProfile(
        id="qwencoder",
        display_names=("QwenCoder",),
        extensions=(".md",),
        locations=("QWEN.md",),
        activation_types=frozenset({A.ALWAYS}),
        layout=Layout.MULTIPLEX,
        header=("# Project Context Rules", "*AI coding assistant guidance*"),
    ),
)

DIALECTS: Mapping[str, DialectProfile] = MappingProxyType({p.id: p for p in _PROFILES})

_BY_DISPLAY_NAME: Mapping[str, str] = MappingProxyType(
    {name: p.id for p in _PROFILES for name in p.display_names}
)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def get_profile(dialect: str) -> DialectProfile:
    try:
        return DIALECTS[dialect]
    except KeyError as exc:
        raise UnknownDialectError(dialect) from exc


def resolve_dialect_by_display_name(name: str) -> Optional[str]:
    """Map a display name or alias back to its dialect identifier."""
    return _BY_DISPLAY_NAME.get(name)


def resolve_dialect(name: str) -> Optional[str]:
    """Accept either an identifier or any display name."""
    if name in DIALECTS:
        return name
    return resolve_dialect_by_display_name(name)


def display_names_for(dialect: str) -> list[str]:
    profile = DIALECTS.get(dialect)
    return list(profile.display_names) if profile else []


def all_display_names() -> list[str]:
    """Every selectable name in registry order, without duplicates."""
    names: list[str] = []
    for profile in DIALECTS.values():
        for name in profile.display_names:
            if name not in names:
                names.append(name)
    return names

