"""Line streams, binary detection and tree enumeration."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from ..schema import FileEntry, FileRole

LOGGER = logging.getLogger(__name__)

DEFAULT_BINARY_PROBE_BYTES = 8192


@dataclass(slots=True)
class LineStream:
    """File content as logical lines, or a marker that the file is binary."""

    lines: list[str] = field(default_factory=list)
    binary: bool = False


def split_lines(text: str) -> list[str]:
    """Split ``text`` on ``\\n`` dropping the empty tail left by a final newline."""
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def join_lines(lines: list[str]) -> str:
    """Inverse of :func:`split_lines`; always ends non-empty output with a newline."""
    if not lines:
        return ""
    return "\n".join(lines) + "\n"


def is_binary(path: Path, *, probe_bytes: int = DEFAULT_BINARY_PROBE_BYTES) -> bool:
    """Return True when the first ``probe_bytes`` of ``path`` hold a NUL byte."""
    with path.open("rb") as handle:
        return b"\0" in handle.read(probe_bytes)


def read_line_stream(path: Path, *, probe_bytes: int = DEFAULT_BINARY_PROBE_BYTES) -> LineStream:
    """Read ``path`` once, classifying it as binary or decoding its lines.

    Undecodable or unreadable files are treated as binary so they stay out of
    the line-level comparison.
    """

    try:
        if is_binary(path, probe_bytes=probe_bytes):
            return LineStream(binary=True)
        text = path.read_bytes().decode("utf-8")
    except UnicodeDecodeError:
        LOGGER.debug("Treating non UTF-8 file as binary: %s", path)
        return LineStream(binary=True)
    except OSError as error:
        LOGGER.debug("Treating unreadable file as binary: %s (%s)", path, error)
        return LineStream(binary=True)
    return LineStream(lines=split_lines(text))


def read_lines(path: Path) -> list[str]:
    """Read a text file that must exist into logical lines."""
    return split_lines(path.read_bytes().decode("utf-8"))


def write_lines(path: Path, lines: list[str]) -> None:
    """Write ``lines`` to ``path`` with a single trailing newline, creating parents."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(join_lines(lines).encode("utf-8"))


def collect_files(root: Path | str, *, follow_symlinks: bool = False) -> dict[str, Path]:
    """Map forward-slash relative paths to absolute file locations under ``root``."""
    base = Path(root)
    files: dict[str, Path] = {}
    if not base.is_dir():
        return files
    visited: set[str] = set()
    for current, dirnames, filenames in os.walk(base, followlinks=follow_symlinks):
        current_path = Path(current)
        if follow_symlinks:
            real = os.path.realpath(current)
            if real in visited:
                dirnames[:] = []
                continue
            visited.add(real)
        dirnames.sort()
        for name in filenames:
            candidate = current_path / name
            if candidate.is_symlink() and not follow_symlinks:
                continue
            if not candidate.is_file():
                continue
            relative = candidate.relative_to(base).as_posix()
            files[relative] = candidate
    return files


def classify_paths(
    base_files: Mapping[str, Path],
    target_files: Mapping[str, Path],
) -> list[FileEntry]:
    """Union both sides' relative paths, sorted, with the role of each."""
    entries: list[FileEntry] = []
    for relative in sorted(set(base_files) | set(target_files)):
        if relative not in target_files:
            role = FileRole.BASE_ONLY
        elif relative not in base_files:
            role = FileRole.TARGET_ONLY
        else:
            role = FileRole.BOTH
        entries.append(FileEntry(path=relative, role=role))
    return entries
