"""Tests for rendering and writing rules in every dialect."""

import pytest

from crossrule.dialects import DIALECTS, Layout, agents_shared_description, get_profile
from crossrule.errors import SerializationError
from crossrule.models import ActivationType
from crossrule.parsers import detect_dialect
from crossrule.serializers import (
    escape_delimiters,
    file_name_for,
    merge_sections,
    render_narrative,
    render_rule,
    slugify,
    write_rules,
)
from tests.conftest import make_rule, semantics, write

A = ActivationType

ROUND_TRIP_DIALECTS = [d for d, p in DIALECTS.items() if p.layout is not Layout.NARRATIVE]


def round_trip_rule(dialect, activation):
    """A rule shaped so that every field it carries is native to *dialect*."""
    profile = get_profile(dialect)
    if not profile.frontmatter:
        return make_rule(description="Style guide", body="# Style guide\n\nUse tabs.")
    return make_rule(
        source=dialect,
        activation=activation,
        description="" if activation is A.MANUAL else "Style guide",
        patterns=("*.ts", "src/*.{ts,tsx}") if activation is A.PATTERN else (),
    )


# ---------------------------------------------------------------------------
# Naming and rendering
# ---------------------------------------------------------------------------


class TestNaming:
    def test_slugify(self):
        assert slugify("My Rule!") == "my-rule"
        assert slugify("--api_v2--") == "api-v2"
        assert slugify("!!!") == "rule"

    def test_file_name_uses_primary_extension(self):
        rule = make_rule(name="Python Style")
        assert file_name_for(rule, get_profile("vscode")) == "python-style.instructions.md"
        assert file_name_for(rule, get_profile("cursor")) == "python-style.mdc"


class TestRenderRule:
    def test_cursor_always(self):
        rule = make_rule(description="TS rules", body="# TS\n- rule")
        assert render_rule(rule, get_profile("cursor")) == (
            "---\ndescription: TS rules\nalwaysApply: true\n---\n\n# TS\n- rule\n"
        )

    def test_windsurf_pattern(self):
        rule = make_rule(activation=A.PATTERN, patterns=("*.ts",))
        assert render_rule(rule, get_profile("windsurf")) == (
            "---\ntrigger: glob\nglobs: '*.ts'\n---\n\nUse tabs.\n"
        )

    def test_cline_pattern_hint(self):
        rule = make_rule(activation=A.PATTERN, patterns=("src/**/*.ts",))
        text = render_rule(rule, get_profile("cline"))
        assert text.startswith("Applies to files matching: src/**/*.ts\n\n")
        assert text == "Applies to files matching: src/**/*.ts\n\nUse tabs.\n"

    def test_cline_description_becomes_heading(self):
        rule = make_rule(description="Coding Style")
        assert render_rule(rule, get_profile("cline")) == "# Coding Style\n\nUse tabs.\n"

    def test_cline_heading_not_repeated(self):
        rule = make_rule(description="Coding Style", body="# Coding Style\n\nUse tabs.")
        assert render_rule(rule, get_profile("cline")) == "# Coding Style\n\nUse tabs.\n"

    def test_extra_fields_only_for_same_dialect(self):
        same = make_rule(source="cursor", metadata={"frontmatter": {"author": "me"}})
        other = make_rule(source="windsurf", metadata={"frontmatter": {"author": "me"}})
        assert "author: me" in render_rule(same, get_profile("cursor"))
        assert "author" not in render_rule(other, get_profile("cursor"))

    def test_narrative_block(self):
        rule = make_rule(description="Style guide")
        assert render_narrative(rule, get_profile("claude-code")) == "## style\n\n*Style guide*\n\nUse tabs."

    def test_narrative_block_with_hint(self):
        rule = make_rule(activation=A.MANUAL)
        assert render_narrative(rule, get_profile("claude-code")) == (
            "## style\n\nManual: apply only when explicitly requested.\n\nUse tabs."
        )


class TestEscapeDelimiters:
    def test_delimiter_lines_indented(self):
        text, count = escape_delimiters("A\n---- x ----\nB\n---- y ----")
        assert count == 2
        assert text == "A\n ---- x ----\nB\n ---- y ----"

    def test_plain_content_untouched(self):
        assert escape_delimiters("A ---- x ---- B") == ("A ---- x ---- B", 0)


class TestMergeSections:
    def test_fresh_file_gets_header(self):
        text = merge_sections(None, [("typescript", "# TS\n- rule")], get_profile("codex"))
        assert text == (
            f"# Project Agent Rules\n\n{agents_shared_description()}\n\n"
            "---- typescript ----\n\n# TS\n- rule\n"
        )

    def test_replace_in_place_and_append(self):
        existing = "# H\n\n---- a ----\nold a\n\n---- b ----\nold b\n"
        text = merge_sections(existing, [("a", "new a"), ("c", "new c")], get_profile("codex"))
        assert text == (
            "# H\n\n---- a ----\n\nnew a\n\n---- b ----\n\nold b\n\n---- c ----\n\nnew c\n"
        )

    def test_merge_is_stable(self):
        profile = get_profile("qwencoder")
        once = merge_sections(None, [("a", "A"), ("b", "B")], profile)
        assert merge_sections(once, [("a", "A"), ("b", "B")], profile) == once


# ---------------------------------------------------------------------------
# Writers
# ---------------------------------------------------------------------------


class TestWritePerFile:
    def test_writes_one_file_per_rule(self, project):
        rules = [make_rule(name="a"), make_rule(name="b")]
        report = write_rules(rules, "cursor", project)
        assert report.files == [project / ".cursor/rules/a.mdc", project / ".cursor/rules/b.mdc"]
        assert report.converted == 2
        assert all(p.is_file() for p in report.files)

    def test_slug_collision_warns(self, project):
        report = write_rules([make_rule(name="My Rule"), make_rule(name="my-rule")], "cline", project)
        assert len(report.files) == 1
        assert report.converted == 2
        assert "'my-rule' overwrote 'My Rule'" in report.warnings[0]

    def test_size_limit_warns(self, project):
        report = write_rules([make_rule(body="x" * 13000)], "windsurf", project)
        assert report.converted == 1
        assert any("exceeds the Windsurf limit" in w for w in report.warnings)

    def test_per_rule_failure_is_recorded(self, project, monkeypatch):
        import crossrule.serializers as serializers

        real_write = serializers.write_file

        def failing_write(path, content, dry_run=False):
            if path.name.startswith("bad"):
                raise OSError("disk full")
            real_write(path, content, dry_run)

        monkeypatch.setattr(serializers, "write_file", failing_write)
        report = write_rules([make_rule(name="bad"), make_rule(name="good")], "cursor", project)
        assert report.converted == 1
        assert report.skipped == 1
        assert report.errors == ["Failed to convert rule 'bad' to Cursor: disk full"]
        assert report.files == [project / ".cursor/rules/good.mdc"]

    def test_unwritable_directory_raises(self, project):
        write(project, ".cursor", "not a directory")
        with pytest.raises(SerializationError):
            write_rules([make_rule()], "cursor", project)

    def test_dry_run_writes_nothing(self, project):
        report = write_rules([make_rule()], "cursor", project, dry_run=True)
        assert report.files == [project / ".cursor/rules/style.mdc"]
        assert not (project / ".cursor").exists()


class TestWriteShared:
    def test_multiplex_keeps_other_sections(self, project):
        write(project, "AGENTS.md", "# Mine\n\n---- keep ----\nkept\n")
        report = write_rules([make_rule()], "codex", project)
        assert report.files == [project / "AGENTS.md"]
        text = (project / "AGENTS.md").read_text()
        assert text == "# Mine\n\n---- keep ----\n\nkept\n\n---- style ----\n\nUse tabs.\n"

    def test_multiplex_duplicate_names_warn(self, project):
        report = write_rules([make_rule(body="one"), make_rule(body="two")], "qwencoder", project)
        assert report.warnings == [f"Duplicate section 'style' in {project / 'QWEN.md'}, the later rule wins"]
        text = (project / "QWEN.md").read_text()
        assert "two" in text and "one" not in text

    def test_multiplex_unreadable_file_raises(self, project):
        (project / "AGENTS.md").mkdir()
        with pytest.raises(SerializationError, match="Codex CLI"):
            write_rules([make_rule()], "codex", project)

    def test_narrative_fresh_file(self, project):
        write_rules([make_rule()], "claude-code", project)
        assert (project / "CLAUDE.md").read_text() == (
            "# CLAUDE.md\n\n"
            "This file provides guidance to Claude Code when working with code in this repository.\n\n"
            "## style\n\nUse tabs.\n"
        )

    def test_narrative_appends_to_existing(self, project):
        write(project, "CLAUDE.md", "# Mine\n")
        write_rules([make_rule(), make_rule(name="tests", body="Run pytest.")], "claude-code", project)
        assert (project / "CLAUDE.md").read_text() == (
            "# Mine\n\n## style\n\nUse tabs.\n\n## tests\n\nRun pytest.\n"
        )

    def test_shared_dry_run(self, project):
        report = write_rules([make_rule()], "qwencoder", project, dry_run=True)
        assert report.files == [project / "QWEN.md"]
        assert not (project / "QWEN.md").exists()


# ---------------------------------------------------------------------------
# Round trips and degradation
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("dialect", ROUND_TRIP_DIALECTS)
@pytest.mark.parametrize("activation", list(ActivationType))
def test_native_round_trip(project, dialect, activation):
    if activation not in get_profile(dialect).activation_types:
        pytest.skip(f"{dialect} has no native {activation.value}")
    rule = round_trip_rule(dialect, activation)
    write_rules([rule], dialect, project)
    result = detect_dialect(dialect, project)
    assert result.warnings == ()
    assert [semantics(r) for r in result.rules] == [semantics(rule)]


@pytest.mark.parametrize("dialect", list(DIALECTS))
@pytest.mark.parametrize("activation", [A.PATTERN, A.MANUAL, A.CONTEXT])
def test_unsupported_activation_degrades_to_hint(project, dialect, activation):
    profile = get_profile(dialect)
    if activation in profile.activation_types:
        pytest.skip(f"{dialect} supports {activation.value}")
    rule = make_rule(
        activation=activation,
        description="Database access",
        patterns=("src/**/*.sql",) if activation is A.PATTERN else (),
    )
    expected_hint = {
        A.PATTERN: "Applies to files matching: src/**/*.sql",
        A.MANUAL: "Manual: apply only when explicitly requested.",
        A.CONTEXT: "Context: Database access",
    }[activation]

    report = write_rules([rule], dialect, project)
    assert report.converted == 1
    assert report.errors == []
    assert expected_hint in report.files[0].read_text()

    if profile.layout is not Layout.NARRATIVE:
        parsed = detect_dialect(dialect, project).rules
        assert [r.activation for r in parsed] == [A.ALWAYS]
        assert expected_hint in parsed[0].body
