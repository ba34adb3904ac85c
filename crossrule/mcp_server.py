"""MCP server exposing rule detection and conversion as structured tools."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from mcp.server.fastmcp import FastMCP

from crossrule.converter import convert
from crossrule.dialects import DIALECTS, get_profile, resolve_dialect
from crossrule.models import CanonicalRule, DetectionResult
from crossrule.parsers import detect, detect_dialect

mcp = FastMCP(
    "crossrule",
    instructions="Detect and convert AI editor rule files between Cursor, Windsurf, Cline, "
                 "VSCode, Codex CLI, Claude Code, Qoder, Trae and QwenCoder formats.",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _rule_dict(rule: CanonicalRule) -> dict[str, Any]:
    return {
        "name": rule.name,
        "description": rule.description,
        "activation": rule.activation.value,
        "patterns": list(rule.patterns),
        "path": rule.metadata.get("path", ""),
        "lines": len(rule.body.splitlines()),
    }


def _detection_dict(result: DetectionResult) -> dict[str, Any]:
    return {
        "editor": result.dialect,
        "display_name": get_profile(result.dialect).display_name,
        "location": str(result.location) if result.location else "",
        "rule_count": result.rule_count,
        "rules": [_rule_dict(r) for r in result.rules],
        "warnings": list(result.warnings),
    }


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


@mcp.tool()
def crossrule_dialects() -> dict[str, Any]:
    """List supported editors with their identifiers, display names and activation types."""
    return {
        "editors": [
            {
                "id": p.id,
                "display_names": list(p.display_names),
                "activation_types": sorted(t.value for t in p.activation_types),
                "locations": list(p.locations),
            }
            for p in DIALECTS.values()
        ]
    }


@mcp.tool()
def crossrule_detect(project_root: str = ".") -> dict[str, Any]:
    """Find rule files for every supported editor in a project.

    Args:
        project_root: Directory to scan.
    """
    return {"detections": [_detection_dict(r) for r in detect(Path(project_root))]}


@mcp.tool()
def crossrule_convert(
    source: str,
    targets: list[str],
    project_root: str = ".",
    output_root: Optional[str] = None,
    dry_run: bool = False,
) -> dict[str, Any]:
    """Convert one editor's rules into other editors' formats.

    Args:
        source: Source editor identifier or display name (e.g. "cursor", "Cursor").
        targets: Target editors (e.g. ["Codex CLI", "windsurf"]).
        project_root: Directory the source rules are read from.
        output_root: Directory to write into; defaults to project_root.
        dry_run: Report the files that would be written without writing them.
    """
    dialect = resolve_dialect(source)
    if dialect is None:
        return {"success": False, "errors": [f"Unknown editor: {source}"]}

    detection = detect_dialect(dialect, Path(project_root))
    outcome = convert(
        detection.rules, targets, Path(output_root or project_root), dry_run=dry_run
    )
    return {
        "success": outcome.success,
        "converted": outcome.converted,
        "skipped": outcome.skipped,
        "errors": outcome.errors,
        "warnings": list(detection.warnings) + outcome.warnings,
        "output_files": {k: [str(p) for p in v] for k, v in outcome.output_files.items()},
    }


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
