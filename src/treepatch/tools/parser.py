"""Tolerant parser turning unified-diff text into a :class:`PatchDocument`."""

from __future__ import annotations

import logging
import re

from ..schema import NO_FILE, EditOp, FileDiff, Hunk, LineKind, PatchDocument

LOGGER = logging.getLogger(__name__)

_HUNK_HEADER = re.compile(
    r"^@@ -(?P<old_start>\d+)(?:,(?P<old_count>\d+))? "
    r"\+(?P<new_start>\d+)(?:,(?P<new_count>\d+))? @@"
)


def _default_count(value: str | None) -> int:
    """Return the number of lines represented in a hunk header."""
    return int(value) if value is not None else 1


def extract_path(line: str, prefix: str) -> str:
    """Strip the ``---``/``+++`` prefix, any tab suffix and an ``a/``/``b/`` prefix."""
    path = line[len(prefix):]
    path = path.split("\t", 1)[0]
    if path == NO_FILE:
        return path
    if path.startswith(("a/", "b/")):
        path = path[2:]
    return path


def _classify(line: str) -> EditOp | None:
    """Map a hunk body line to its op; ``None`` for ``\\`` marker lines."""
    if line.startswith("\\"):
        return None
    if line.startswith("-"):
        return EditOp(LineKind.DELETE, line[1:])
    if line.startswith("+"):
        return EditOp(LineKind.INSERT, line[1:])
    if line.startswith(" "):
        return EditOp(LineKind.CONTEXT, line[1:])
    return EditOp(LineKind.CONTEXT, line)


def _parse_hunk_body(lines: list[str], index: int, hunk: Hunk) -> int:
    """Consume body lines for ``hunk`` starting at ``index``; return the next index."""
    original_seen = 0
    modified_seen = 0

    while index < len(lines) and original_seen < hunk.original_count and modified_seen < hunk.modified_count:
        op = _classify(lines[index])
        index += 1
        if op is None:
            continue
        hunk.ops.append(op)
        if op.kind is not LineKind.INSERT:
            original_seen += 1
        if op.kind is not LineKind.DELETE:
            modified_seen += 1

    # Tail of pure additions once the original side is exhausted.
    while index < len(lines) and modified_seen < hunk.modified_count:
        line = lines[index]
        if line.startswith("+"):
            hunk.ops.append(EditOp(LineKind.INSERT, line[1:]))
            modified_seen += 1
        elif not line.startswith("\\"):
            break
        index += 1

    # Tail of pure removals once the modified side is exhausted.
    while index < len(lines) and original_seen < hunk.original_count:
        line = lines[index]
        if line.startswith("-"):
            hunk.ops.append(EditOp(LineKind.DELETE, line[1:]))
            original_seen += 1
        elif not line.startswith("\\"):
            break
        index += 1

    return index


def parse_patch(text: str) -> PatchDocument:
    """Parse unified-diff ``text``; garbage between sections is skipped."""
    document = PatchDocument()
    lines = (text or "").split("\n")

    index = 0
    while index < len(lines):
        if not lines[index].startswith("--- "):
            index += 1
            continue

        original_path = extract_path(lines[index], "--- ")
        index += 1
        if index >= len(lines) or not lines[index].startswith("+++ "):
            LOGGER.debug("Discarding section without '+++' header for %s", original_path)
            continue
        modified_path = extract_path(lines[index], "+++ ")
        index += 1

        file_diff = FileDiff(original_path=original_path, modified_path=modified_path)
        while index < len(lines) and lines[index].startswith("@@ "):
            match = _HUNK_HEADER.match(lines[index])
            index += 1
            if not match:
                LOGGER.debug("Skipping malformed hunk header in %s", modified_path)
                continue
            hunk = Hunk(
                original_start=int(match.group("old_start")),
                original_count=_default_count(match.group("old_count")),
                modified_start=int(match.group("new_start")),
                modified_count=_default_count(match.group("new_count")),
            )
            index = _parse_hunk_body(lines, index, hunk)
            file_diff.hunks.append(hunk)

        document.files.append(file_diff)

    return document
