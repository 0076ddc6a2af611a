"""Unified diff generation between two directory trees."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from ..config import EngineConfig
from ..schema import NO_FILE, EditOp, FileDiff, FileRole, Hunk, LineKind, PatchDocument
from .files import classify_paths, collect_files, read_line_stream
from .telemetry import emit_event

LOGGER = logging.getLogger(__name__)


def compute_edit_script(
    original: Sequence[str],
    modified: Sequence[str],
    *,
    max_lcs_lines: int = 5000,
) -> list[EditOp]:
    """Return the LCS edit script turning ``original`` into ``modified``.

    Inputs longer than ``max_lcs_lines`` on either side are emitted as a full
    replacement instead of building the quadratic table.
    """

    m = len(original)
    n = len(modified)
    if m > max_lcs_lines or n > max_lcs_lines:
        LOGGER.debug("Falling back to full replacement for %d/%d lines", m, n)
        return [EditOp(LineKind.DELETE, line) for line in original] + [
            EditOp(LineKind.INSERT, line) for line in modified
        ]

    # A shared tail is always consumed as context by the backtrack below.
    suffix: list[EditOp] = []
    while m and n and original[m - 1] == modified[n - 1]:
        suffix.append(EditOp(LineKind.CONTEXT, original[m - 1]))
        m -= 1
        n -= 1

    table = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(1, m + 1):
        row = table[i]
        above = table[i - 1]
        left_line = original[i - 1]
        for j in range(1, n + 1):
            if left_line == modified[j - 1]:
                row[j] = above[j - 1] + 1
            elif above[j] > row[j - 1]:
                row[j] = above[j]
            else:
                row[j] = row[j - 1]

    ops = suffix
    i, j = m, n
    while i > 0 or j > 0:
        if i > 0 and j > 0 and original[i - 1] == modified[j - 1]:
            ops.append(EditOp(LineKind.CONTEXT, original[i - 1]))
            i -= 1
            j -= 1
        elif j > 0 and (i == 0 or table[i][j - 1] >= table[i - 1][j]):
            ops.append(EditOp(LineKind.INSERT, modified[j - 1]))
            j -= 1
        else:
            ops.append(EditOp(LineKind.DELETE, original[i - 1]))
            i -= 1
    ops.reverse()
    return ops


def build_hunks(ops: Sequence[EditOp], *, context_lines: int = 3) -> list[Hunk]:
    """Group an edit script into hunks carrying ``context_lines`` of context."""
    change_indices = [index for index, op in enumerate(ops) if op.kind is not LineKind.CONTEXT]
    if not change_indices:
        return []

    ranges: list[tuple[int, int]] = []
    start = end = change_indices[0]
    for index in change_indices[1:]:
        if index - end - 1 <= context_lines * 2:
            end = index
        else:
            ranges.append((start, end))
            start = end = index
    ranges.append((start, end))

    hunks: list[Hunk] = []
    for first, last in ranges:
        window_start = max(first - context_lines, 0)
        window_end = min(last + context_lines + 1, len(ops))

        original_start = 1
        modified_start = 1
        for op in ops[:window_start]:
            if op.kind is not LineKind.INSERT:
                original_start += 1
            if op.kind is not LineKind.DELETE:
                modified_start += 1

        window = list(ops[window_start:window_end])
        hunks.append(
            Hunk(
                original_start=original_start,
                original_count=sum(1 for op in window if op.kind is not LineKind.INSERT),
                modified_start=modified_start,
                modified_count=sum(1 for op in window if op.kind is not LineKind.DELETE),
                ops=window,
            )
        )
    return hunks


def creation_diff(relative: str, lines: Sequence[str]) -> FileDiff:
    """Diff describing ``relative`` being created with ``lines``."""
    hunk = Hunk(0, 0, 1, len(lines), [EditOp(LineKind.INSERT, line) for line in lines])
    return FileDiff(original_path=NO_FILE, modified_path=relative, hunks=[hunk])


def deletion_diff(relative: str, lines: Sequence[str]) -> FileDiff:
    """Diff describing ``relative`` being removed while holding ``lines``."""
    hunk = Hunk(1, len(lines), 0, 0, [EditOp(LineKind.DELETE, line) for line in lines])
    return FileDiff(original_path=relative, modified_path=NO_FILE, hunks=[hunk])


def diff_lines(
    relative: str,
    original: Sequence[str],
    modified: Sequence[str],
    *,
    config: EngineConfig | None = None,
) -> FileDiff | None:
    """Diff two line sequences of the same file; ``None`` when identical."""
    settings = config or EngineConfig()
    if list(original) == list(modified):
        return None
    ops = compute_edit_script(original, modified, max_lcs_lines=settings.max_lcs_lines)
    hunks = build_hunks(ops, context_lines=settings.context_lines)
    if not hunks:
        return None
    return FileDiff(original_path=relative, modified_path=relative, hunks=hunks)


def diff_directories(
    base_dir: Path | str,
    target_dir: Path | str,
    *,
    config: EngineConfig | None = None,
) -> PatchDocument:
    """Compare two trees file by file in sorted relative-path order."""
    settings = config or EngineConfig()
    base_files = collect_files(base_dir, follow_symlinks=settings.follow_symlinks)
    target_files = collect_files(target_dir, follow_symlinks=settings.follow_symlinks)

    document = PatchDocument()
    skipped_binary: list[str] = []
    for entry in classify_paths(base_files, target_files):
        base_stream = (
            read_line_stream(base_files[entry.path], probe_bytes=settings.binary_probe_bytes)
            if entry.role is not FileRole.TARGET_ONLY
            else None
        )
        target_stream = (
            read_line_stream(target_files[entry.path], probe_bytes=settings.binary_probe_bytes)
            if entry.role is not FileRole.BASE_ONLY
            else None
        )
        if (base_stream and base_stream.binary) or (target_stream and target_stream.binary):
            skipped_binary.append(entry.path)
            continue

        base_lines = base_stream.lines if base_stream else []
        target_lines = target_stream.lines if target_stream else []
        if base_lines == target_lines:
            continue

        if entry.role is FileRole.TARGET_ONLY:
            document.files.append(creation_diff(entry.path, target_lines))
        elif entry.role is FileRole.BASE_ONLY:
            document.files.append(deletion_diff(entry.path, base_lines))
        else:
            file_diff = diff_lines(entry.path, base_lines, target_lines, config=settings)
            if file_diff is not None:
                document.files.append(file_diff)

    if skipped_binary:
        LOGGER.debug("Skipped %d binary file(s): %s", len(skipped_binary), ", ".join(skipped_binary))
    emit_event(
        "diff_generated",
        base=Path(base_dir),
        target=Path(target_dir),
        files=[file_diff.display_path for file_diff in document],
        skipped_binary=skipped_binary,
    )
    return document


def generate(
    base_dir: Path | str,
    target_dir: Path | str,
    *,
    config: EngineConfig | None = None,
) -> str:
    """Return the unified diff turning ``base_dir`` into ``target_dir``."""
    return diff_directories(base_dir, target_dir, config=config).render()
