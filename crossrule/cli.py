"""Non-interactive command line wrapper around detect() and convert()."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from crossrule.console import C, error, log, log_verbose, section_header, summary_line, warn
from crossrule.converter import convert
from crossrule.dialects import DIALECTS, all_display_names, get_profile, resolve_dialect
from crossrule.models import DetectionResult
from crossrule.parsers import detect, detect_dialect


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crossrule",
        description="Convert AI editor rules between different formats.",
    )
    parser.add_argument("--verbose", action="store_true", help="Detailed output")

    sub = parser.add_subparsers(dest="command")
    sub.add_parser("dialects", help="List supported editors and their names")

    det = sub.add_parser("detect", help="Find existing rules in a project")
    det.add_argument("--root", default=".", help="Project root (default: .)")

    conv = sub.add_parser("convert", help="Convert detected rules to other editors")
    conv.add_argument("--from", dest="source", required=True, metavar="EDITOR",
                      help="Source editor (identifier or display name)")
    conv.add_argument("--to", dest="targets", required=True, action="append", metavar="EDITOR",
                      help="Target editor; repeat or comma-separate for several")
    conv.add_argument("--root", default=".", help="Project root to read from (default: .)")
    conv.add_argument("--output", default=None, help="Where to write (default: --root)")
    conv.add_argument("--dry-run", action="store_true", help="Preview without writing")

    return parser


def _split_targets(raw: list[str]) -> list[str]:
    return [t.strip() for item in raw for t in item.split(",") if t.strip()]


def _print_detection(result: DetectionResult, verbose: bool) -> None:
    profile = get_profile(result.dialect)
    section_header(profile.display_name)
    log(f"{C.DIM}Location:{C.RESET} {result.location or '(none)'}")
    summary_line("Rules", result.rule_count)
    for rule in result.rules:
        patterns = f"  {C.DIM}{', '.join(rule.patterns)}{C.RESET}" if rule.patterns else ""
        log(f"  {C.BOLD}{rule.name:30s}{C.RESET} [{rule.activation.value}]{patterns}")
        log_verbose(f"{rule.metadata.get('path', '')}", verbose)
    for w in result.warnings:
        warn(w)


def cmd_dialects(args: argparse.Namespace) -> int:
    section_header(f"Editors ({len(DIALECTS)})")
    for profile in DIALECTS.values():
        names = ", ".join(profile.display_names)
        types = ", ".join(sorted(t.value for t in profile.activation_types))
        print(f"  {C.BOLD}{profile.id:12s}{C.RESET} {names}")
        log_verbose(f"{profile.layout.value}: {', '.join(profile.locations)}  [{types}]", args.verbose)
    print()
    return 0


def cmd_detect(args: argparse.Namespace) -> int:
    results = detect(Path(args.root))
    if not results:
        print(f"\n  {C.YELLOW}No existing AI editor rules found{C.RESET} in {Path(args.root).absolute()}")
        return 0
    for result in results:
        _print_detection(result, args.verbose)
    print()
    return 0


def cmd_convert(args: argparse.Namespace) -> int:
    source = resolve_dialect(args.source)
    if source is None:
        error(f"unknown editor '{args.source}'. Options: {', '.join(all_display_names())}")
        return 1

    detection = detect_dialect(source, Path(args.root))
    for w in detection.warnings:
        warn(w)
    if not detection.rule_count:
        error(f"no {get_profile(source).display_name} rules found under {Path(args.root).absolute()}")
        return 1

    targets = [t for t in _split_targets(args.targets) if resolve_dialect(t) != source]
    output = Path(args.output) if args.output else Path(args.root)
    outcome = convert(detection.rules, targets, output, dry_run=args.dry_run)

    section_header("Output")
    for dialect, files in outcome.output_files.items():
        summary_line(get_profile(dialect).display_name, len(files), "files")
        for f in files:
            log_verbose(str(f), args.verbose)
    for w in outcome.warnings:
        warn(w)

    section_header("Summary")
    dry = f" {C.MAGENTA}(dry-run){C.RESET}" if args.dry_run else ""
    print(f"  {C.BOLD}{outcome.converted}{C.RESET} converted, "
          f"{C.BOLD}{outcome.skipped}{C.RESET} skipped.{dry}")
    for e in outcome.errors:
        print(f"  {C.RED}- {e}{C.RESET}")
    print()
    return 0 if outcome.success else 1


COMMANDS = {
    "dialects": cmd_dialects,
    "detect": cmd_detect,
    "convert": cmd_convert,
}


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.ERROR,
        format="  [%(levelname)s] %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        sys.exit(0)

    sys.exit(COMMANDS[args.command](args))


if __name__ == "__main__":
    main()
