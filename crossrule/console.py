"""Terminal output helpers (respects NO_COLOR and non-TTY)."""

from __future__ import annotations

import os
import sys


def _use_color() -> bool:
    return (
        sys.stdout.isatty()
        and os.environ.get("NO_COLOR") is None
        and os.environ.get("TERM") != "dumb"
    )


_USE_COLOR = _use_color()


def _ansi(code: str) -> str:
    return f"\033[{code}m" if _USE_COLOR else ""


class C:
    """ANSI escape sequences, empty strings when color is disabled."""
    RESET = _ansi("0")
    BOLD = _ansi("1")
    DIM = _ansi("2")
    RED = _ansi("31")
    GREEN = _ansi("32")
    YELLOW = _ansi("33")
    CYAN = _ansi("36")
    MAGENTA = _ansi("35")
    BOLD_RED = _ansi("1;31")
    BOLD_GREEN = _ansi("1;32")
    BOLD_YELLOW = _ansi("1;33")
    BOLD_CYAN = _ansi("1;36")


def section_header(title: str) -> None:
    width = 50
    rule = "─" * max(1, width - len(title) - 5)
    print(f"\n{C.BOLD_CYAN}─── {title} {rule}{C.RESET}")


def summary_line(label: str, count: int, detail: str = "") -> None:
    extra = f"  {C.DIM}({detail}){C.RESET}" if detail else ""
    print(f"  {label:15s} {C.BOLD}{count}{C.RESET}{extra}")


def log(msg: str) -> None:
    print(f"  {msg}")


def log_verbose(msg: str, verbose: bool) -> None:
    if verbose:
        print(f"  {C.DIM}[verbose] {msg}{C.RESET}")


def warn(msg: str) -> None:
    print(f"  {C.BOLD_YELLOW}Warning:{C.RESET} {msg}")


def error(msg: str) -> None:
    print(f"{C.BOLD_RED}Error:{C.RESET} {msg}")
