"""Small read/write helpers used by the serializers."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

logger = logging.getLogger(__name__)


def read_existing(path: Path) -> Optional[str]:
    """Current contents of *path*, or None when it does not exist."""
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8-sig")


def ensure_dir(path: Path, dry_run: bool = False) -> None:
    if dry_run:
        logger.debug("[dry-run] Would create %s", path)
        return
    path.mkdir(parents=True, exist_ok=True)


def write_file(path: Path, content: str, dry_run: bool = False) -> None:
    if dry_run:
        logger.debug("[dry-run] Would write %s (%d bytes)", path, len(content))
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    logger.debug("Wrote %s", path)


@dataclass
class SharedBuffer:
    path: Path
    original: Optional[str]
    text: str = ""


@contextmanager
def shared_file(path: Path, dry_run: bool = False) -> Iterator[SharedBuffer]:
    """Read-modify-write one shared file; written exactly once, only if the block succeeds."""
    buf = SharedBuffer(path=path, original=read_existing(path))
    buf.text = buf.original or ""
    yield buf
    write_file(path, buf.text, dry_run)
