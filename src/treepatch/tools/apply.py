"""Replay unified diffs against a directory tree, forwards or in reverse."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Sequence

from ..config import EngineConfig
from ..errors import (
    ContentMismatch,
    FileAlreadyExists,
    HunkApplicationFailed,
    NoHunksFound,
    PatchError,
    PatchFileNotFound,
    PathTraversal,
)
from ..schema import NO_FILE, FileDiff, Hunk, LineKind, PatchDocument
from .files import read_lines, write_lines
from .parser import parse_patch
from .paths import resolve_within
from .telemetry import emit_event

LOGGER = logging.getLogger(__name__)


class PatchStatus(str, Enum):
    """Result of reconciling a patch with a tree."""

    APPLIED = "APPLIED"
    ALREADY_APPLIED = "ALREADY_APPLIED"
    NOT_APPLICABLE = "NOT_APPLICABLE"
    FAILED = "FAILED"


@dataclass(slots=True)
class PatchRunResult:
    """Outcome of one pass of the patch engine over a document."""

    reverse: bool
    dry_run: bool
    processed: list[str] = field(default_factory=list)
    failures: list[PatchError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def error(self) -> str | None:
        """Message of the first failure, or ``None`` on success."""
        return str(self.failures[0]) if self.failures else None


@dataclass(slots=True)
class PatchOutcome:
    """What :func:`reconcile` did with a patch."""

    status: PatchStatus
    error: str | None = None
    paths: tuple[str, ...] = ()

    @property
    def succeeded(self) -> bool:
        return self.status in {PatchStatus.APPLIED, PatchStatus.ALREADY_APPLIED}


def _coerce_document(patch: str | PatchDocument) -> PatchDocument:
    if isinstance(patch, PatchDocument):
        return patch
    return parse_patch(patch)


def _direction_kinds(reverse: bool) -> tuple[tuple[LineKind, ...], tuple[LineKind, ...]]:
    """Return the (expected, replacement) line kinds for a direction."""
    if reverse:
        return (LineKind.CONTEXT, LineKind.INSERT), (LineKind.CONTEXT, LineKind.DELETE)
    return (LineKind.CONTEXT, LineKind.DELETE), (LineKind.CONTEXT, LineKind.INSERT)


def apply_hunks(
    lines: Sequence[str],
    hunks: Sequence[Hunk],
    *,
    reverse: bool = False,
    path: str = "<memory>",
) -> list[str]:
    """Apply ``hunks`` to ``lines`` in order, tracking length drift between hunks.

    Each hunk's start line is relative to the pre-image; ``offset`` carries the
    growth or shrinkage introduced by the hunks already applied.
    """

    expected_kinds, replacement_kinds = _direction_kinds(reverse)
    result = list(lines)
    offset = 0

    for number, hunk in enumerate(hunks, start=1):
        anchor = hunk.modified_start if reverse else hunk.original_start
        start = anchor - 1 + offset
        expected = hunk.lines_of(*expected_kinds)
        replacement = hunk.lines_of(*replacement_kinds)

        details = {"hunk": number, "line": start + 1, "offset": offset}
        if start < 0 or start + len(expected) > len(result):
            raise HunkApplicationFailed(
                f"Hunk failed for {path} (hunk #{number} out of range at line {start + 1})",
                path=path,
                details=details,
            )
        for position, line in enumerate(expected):
            if result[start + position] != line:
                details["mismatch_line"] = start + position + 1
                raise HunkApplicationFailed(
                    f"Hunk failed for {path} (hunk #{number} mismatch at line {start + position + 1})",
                    path=path,
                    details=details,
                )

        result[start:start + len(expected)] = replacement
        offset += len(replacement) - len(expected)

    return result


def _collect_lines(file_diff: FileDiff, kind: LineKind) -> list[str]:
    lines: list[str] = []
    for hunk in file_diff.hunks:
        lines.extend(hunk.lines_of(kind))
    return lines


def _process_file(root: Path, file_diff: FileDiff, *, reverse: bool, dry_run: bool) -> str | None:
    """Validate and (unless ``dry_run``) perform one file's change.

    Returns the relative path that was handled, or ``None`` when the diff
    names no file on either side.
    """

    source = file_diff.modified_path if reverse else file_diff.original_path
    target = file_diff.original_path if reverse else file_diff.modified_path

    if target == NO_FILE:
        file_path = resolve_within(root, source)
        if file_path is None:
            return None
        if not file_path.is_file():
            raise PatchFileNotFound(f"File not found: {source}", path=source)
        if reverse:
            expected = _collect_lines(file_diff, LineKind.INSERT)
            if read_lines(file_path) != expected:
                raise ContentMismatch(f"Content mismatch in {source} for reverse check.", path=source)
        if not dry_run:
            file_path.unlink()
        return source

    if source == NO_FILE:
        file_path = resolve_within(root, target)
        if file_path is None:
            return None
        if file_path.exists():
            raise FileAlreadyExists(f"File already exists: {target}", path=target)
        content = _collect_lines(file_diff, LineKind.DELETE if reverse else LineKind.INSERT)
        if not dry_run:
            write_lines(file_path, content)
        return target

    file_path = resolve_within(root, target)
    if file_path is None:
        return None
    if not file_path.is_file():
        raise PatchFileNotFound(f"File not found: {target}", path=target)
    updated = apply_hunks(read_lines(file_path), file_diff.hunks, reverse=reverse, path=target)
    if not dry_run:
        write_lines(file_path, updated)
    return target


def run_patch(
    target_dir: Path | str,
    patch: str | PatchDocument,
    *,
    reverse: bool,
    dry_run: bool,
    config: EngineConfig | None = None,
) -> PatchRunResult:
    """Execution core shared by :func:`apply`, :func:`is_applicable` and :func:`is_applied`."""
    settings = config or EngineConfig()
    root = Path(target_dir)
    document = _coerce_document(patch)
    result = PatchRunResult(reverse=reverse, dry_run=dry_run)

    if not len(document):
        result.failures.append(NoHunksFound("No valid hunks found in patch."))
        return result

    for file_diff in document:
        try:
            try:
                handled = _process_file(root, file_diff, reverse=reverse, dry_run=dry_run)
            except (OSError, UnicodeDecodeError) as error:
                raise PatchError(
                    f"Cannot process {file_diff.display_path}: {error}",
                    path=file_diff.display_path,
                ) from error
        except PatchError as error:
            result.failures.append(error)
            emit_event(
                "patch_failed",
                path=error.path or file_diff.display_path,
                reason=type(error).__name__,
                message=str(error),
                reverse=reverse,
                dry_run=dry_run,
                details=error.details,
            )
            # Traversal aborts the run regardless of stop_on_error.
            if settings.stop_on_error or isinstance(error, PathTraversal):
                break
            continue
        if handled is not None:
            result.processed.append(handled)
            emit_event("patch_file_processed", path=handled, reverse=reverse, dry_run=dry_run)

    emit_event(
        "patch_run",
        target=root,
        reverse=reverse,
        dry_run=dry_run,
        processed=result.processed,
        failures=len(result.failures),
    )
    return result


def apply(
    target_dir: Path | str,
    patch: str | PatchDocument,
    *,
    config: EngineConfig | None = None,
) -> str | None:
    """Apply ``patch`` to ``target_dir``; return an error message or ``None``.

    Files handled before a failure stay modified; there is no rollback.
    """

    result = run_patch(target_dir, patch, reverse=False, dry_run=False, config=config)
    if not result.ok:
        LOGGER.debug("Patch failed for %s: %s", target_dir, result.error)
    return result.error


def is_applicable(
    target_dir: Path | str,
    patch: str | PatchDocument,
    *,
    config: EngineConfig | None = None,
) -> bool:
    """Return True when ``patch`` would apply cleanly (forward dry run)."""
    return run_patch(target_dir, patch, reverse=False, dry_run=True, config=config).ok


def is_applied(
    target_dir: Path | str,
    patch: str | PatchDocument,
    *,
    config: EngineConfig | None = None,
) -> bool:
    """Return True when ``patch`` is already present (reverse dry run)."""
    return run_patch(target_dir, patch, reverse=True, dry_run=True, config=config).ok


def reconcile(
    target_dir: Path | str,
    patch: str | PatchDocument,
    *,
    config: EngineConfig | None = None,
) -> PatchOutcome:
    """Skip an applied patch, refuse an inapplicable one, otherwise apply it."""
    document = _coerce_document(patch)

    if is_applied(target_dir, document, config=config):
        return PatchOutcome(status=PatchStatus.ALREADY_APPLIED)

    check = run_patch(target_dir, document, reverse=False, dry_run=True, config=config)
    if not check.ok:
        return PatchOutcome(status=PatchStatus.NOT_APPLICABLE, error=check.error)

    result = run_patch(target_dir, document, reverse=False, dry_run=False, config=config)
    if not result.ok:
        return PatchOutcome(
            status=PatchStatus.FAILED,
            error=result.error,
            paths=tuple(result.processed),
        )
    return PatchOutcome(status=PatchStatus.APPLIED, paths=tuple(result.processed))
