"""Shared fixtures for crossrule tests."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any

import pytest

from crossrule.models import ActivationType, CanonicalRule

TYPESCRIPT_MDC = "---\nalwaysApply: true\n---\n# TS\n- rule\n"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def write(root: Path, rel: str, text: str) -> Path:
    """Create *rel* under *root* with *text*, making parent directories."""
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def make_rule(**overrides: Any) -> CanonicalRule:
    """A canonical rule with sensible test defaults."""
    defaults: dict[str, Any] = {
        "name": "style",
        "body": "Use tabs.",
        "source": "cursor",
        "activation": ActivationType.ALWAYS,
        "description": "",
        "patterns": (),
    }
    defaults.update(overrides)
    return CanonicalRule(**defaults)


def make_args(**overrides: Any) -> argparse.Namespace:
    defaults: dict[str, Any] = {"verbose": False, "dry_run": False}
    defaults.update(overrides)
    return argparse.Namespace(**defaults)


def semantics(rule: CanonicalRule) -> tuple:
    """The parts of a rule that must survive a native round trip."""
    return (rule.name, rule.description, rule.body.strip(), rule.activation, rule.patterns)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def cursor_project(project: Path) -> Path:
    """Project with a single always-apply Cursor rule."""
    write(project, ".cursor/rules/typescript.mdc", TYPESCRIPT_MDC)
    return project
