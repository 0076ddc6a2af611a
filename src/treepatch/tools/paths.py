"""Confine patch targets to the tree they are applied to."""

from __future__ import annotations

import os
from pathlib import Path

from ..errors import PathTraversal
from ..schema import NO_FILE


def is_within(root: Path, candidate: Path) -> bool:
    """Return True when ``candidate`` lies strictly beneath ``root``."""
    if candidate == root:
        return False
    try:
        candidate.relative_to(root)
    except ValueError:
        return False
    return True


def resolve_within(root: Path | str, relative: str) -> Path | None:
    """Join ``relative`` onto ``root`` and reject anything escaping it.

    Both the lexically normalised path and its symlink-resolved form must stay
    beneath the root. The normalised path is returned so that file operations
    act on a symlink itself rather than on what it points to. The
    ``/dev/null`` sentinel is never resolved and yields ``None``.
    """

    if relative == NO_FILE:
        return None
    base = Path(root).resolve()
    joined = Path(os.path.normpath(base / relative))
    if not is_within(base, joined) or not is_within(base, joined.resolve()):
        raise PathTraversal(f"Blocked path traversal attempt: {relative}", path=relative)
    return joined
