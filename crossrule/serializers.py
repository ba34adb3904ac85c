"""Render canonical rules into each dialect's on-disk form and write them."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Union

from crossrule.crosswalk import Encoding, apply_hints, encode
from crossrule.dialects import DialectProfile, Layout, get_profile
from crossrule.errors import SerializationError
from crossrule.frontmatter import build_frontmatter
from crossrule.fsio import ensure_dir, shared_file, write_file
from crossrule.locations import output_location
from crossrule.models import CanonicalRule
from crossrule.parsers import first_heading, trim_blank_lines
from crossrule.scanner import SECTION_RE, split_sections

logger = logging.getLogger(__name__)

FALLBACK_SLUG = "rule"


@dataclass
class TargetReport:
    """What one dialect's serializer did with a batch."""
    dialect: str
    files: list[Path] = field(default_factory=list)
    converted: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-") or FALLBACK_SLUG


def file_name_for(rule: CanonicalRule, profile: DialectProfile) -> str:
    return f"{slugify(rule.name)}{profile.primary_extension}"


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _with_heading(rule: CanonicalRule) -> str:
    """Body with the description as its first heading, for dialects that derive it."""
    body = rule.body
    if rule.description and first_heading(body) != rule.description:
        heading = f"# {rule.description}"
        body = f"{heading}\n\n{body}" if body else heading
    return body


def _frontmatter_fields(rule: CanonicalRule, profile: DialectProfile, enc: Encoding) -> dict:
    fields = dict(enc.fields)
    extras = rule.metadata.get("frontmatter") if rule.source == profile.id else None
    if extras:
        for key, value in extras.items():
            fields.setdefault(key, value)
    return fields


def render_rule(rule: CanonicalRule, profile: DialectProfile) -> str:
    """Full file text for a one-rule-per-file dialect."""
    enc = encode(rule, profile)
    if profile.frontmatter:
        body = apply_hints(rule.body, enc.hints)
        fm = build_frontmatter(_frontmatter_fields(rule, profile, enc))
        return f"{fm}\n\n{body}\n"
    return apply_hints(_with_heading(rule), enc.hints) + "\n"


def render_section(rule: CanonicalRule, profile: DialectProfile) -> str:
    """Section content (without delimiter) for a multiplexing dialect."""
    enc = encode(rule, profile)
    return apply_hints(_with_heading(rule), enc.hints)


def escape_delimiters(content: str) -> tuple[str, int]:
    """Indent lines that would read back as section delimiters. Returns (text, count)."""
    return SECTION_RE.subn(lambda m: " " + m.group(0), content)


def render_narrative(rule: CanonicalRule, profile: DialectProfile) -> str:
    """Heading-plus-body block appended to a running guidance document."""
    enc = encode(rule, profile)
    parts = [f"## {rule.name}"]
    if rule.description and rule.description != rule.name and first_heading(rule.body) != rule.description:
        parts.append(f"*{rule.description}*")
    body = apply_hints(rule.body, enc.hints)
    if body:
        parts.append(body)
    return "\n\n".join(parts)


def _header(profile: DialectProfile) -> str:
    return "\n\n".join(profile.header)


def merge_sections(existing: Optional[str], sections: list[tuple[str, str]], profile: DialectProfile) -> str:
    """Replace same-named sections in place and append new ones after the rest."""
    if existing is None:
        preamble, current = _header(profile), []
    else:
        preamble, current = split_sections(existing)

    contents: dict[str, str] = {}
    for name, content in current:
        contents[name] = content
    for name, content in sections:
        contents[name] = content

    parts = [preamble.rstrip()] if preamble.strip() else []
    for name, content in contents.items():
        block = trim_blank_lines(content)
        parts.append(f"---- {name} ----\n\n{block}" if block else f"---- {name} ----")
    return "\n\n".join(parts) + "\n"


def _check_size(report: TargetReport, profile: DialectProfile, label: str, size: int,
                limit: Optional[int]) -> None:
    if limit and size > limit:
        msg = f"{label} exceeds the {profile.display_name} limit ({size} > {limit} characters)"
        logger.warning(msg)
        report.warnings.append(msg)


# ---------------------------------------------------------------------------
# Writers
# ---------------------------------------------------------------------------


def _write_per_file(rules: list[CanonicalRule], profile: DialectProfile, output_root: Path,
                    dry_run: bool) -> TargetReport:
    report = TargetReport(dialect=profile.id)
    out_dir = output_location(profile, output_root)
    try:
        ensure_dir(out_dir, dry_run)
    except OSError as exc:
        raise SerializationError(profile.display_name, f"cannot create {out_dir}: {exc}") from exc

    written: dict[Path, str] = {}
    total = 0
    for rule in rules:
        path = out_dir / file_name_for(rule, profile)
        try:
            content = render_rule(rule, profile)
            write_file(path, content, dry_run)
        except OSError as exc:
            report.errors.append(str(SerializationError(profile.display_name, str(exc), rule.name)))
            report.skipped += 1
            continue
        if path in written:
            report.warnings.append(
                f"'{rule.name}' overwrote '{written[path]}' in {path} ({profile.display_name})"
            )
        else:
            report.files.append(path)
        written[path] = rule.name
        report.converted += 1
        total += len(content)
        _check_size(report, profile, f"'{rule.name}'", len(content), profile.max_file_size)

    _check_size(report, profile, "Converted rules", total, profile.max_total_size)
    return report


def _write_multiplex(rules: list[CanonicalRule], profile: DialectProfile, output_root: Path,
                     dry_run: bool) -> TargetReport:
    report = TargetReport(dialect=profile.id)
    path = output_location(profile, output_root)
    sections: list[tuple[str, str]] = []
    seen: set[str] = set()
    for rule in rules:
        name = rule.name.strip()
        if name in seen:
            report.warnings.append(f"Duplicate section '{name}' in {path}, the later rule wins")
        seen.add(name)
        content, escaped = escape_delimiters(render_section(rule, profile))
        if escaped:
            msg = f"'{name}' has {escaped} delimiter-like line(s), indented in {path}"
            logger.warning(msg)
            report.warnings.append(msg)
        sections.append((name, content))

    try:
        with shared_file(path, dry_run) as buf:
            buf.text = merge_sections(buf.original, sections, profile)
    except (OSError, UnicodeDecodeError) as exc:
        raise SerializationError(profile.display_name, f"{path}: {exc}") from exc

    report.files.append(path)
    report.converted = len(rules)
    _check_size(report, profile, path.name, len(buf.text), profile.max_file_size or profile.max_total_size)
    return report


def _write_narrative(rules: list[CanonicalRule], profile: DialectProfile, output_root: Path,
                     dry_run: bool) -> TargetReport:
    report = TargetReport(dialect=profile.id)
    path = output_location(profile, output_root)
    try:
        with shared_file(path, dry_run) as buf:
            text = buf.original if buf.original is not None else _header(profile)
            for rule in rules:
                text = text.rstrip("\n") + "\n\n" + render_narrative(rule, profile)
            buf.text = text + "\n"
    except (OSError, UnicodeDecodeError) as exc:
        raise SerializationError(profile.display_name, f"{path}: {exc}") from exc

    report.files.append(path)
    report.converted = len(rules)
    _check_size(report, profile, path.name, len(buf.text), profile.max_file_size or profile.max_total_size)
    return report


_WRITERS: dict[Layout, Callable[[list[CanonicalRule], DialectProfile, Path, bool], TargetReport]] = {
    Layout.PER_FILE: _write_per_file,
    Layout.MULTIPLEX: _write_multiplex,
    Layout.NARRATIVE: _write_narrative,
}


def write_rules(
    rules: list[CanonicalRule],
    dialect: Union[str, DialectProfile],
    output_root: Path,
    dry_run: bool = False,
) -> TargetReport:
    """Serialize *rules* for one dialect under *output_root*.

    Per-rule failures land in the report; a failure that affects the whole
    target (directory or shared file) raises SerializationError.
    """
    profile = dialect if isinstance(dialect, DialectProfile) else get_profile(dialect)
    return _WRITERS[profile.layout](list(rules), profile, Path(output_root), dry_run)
