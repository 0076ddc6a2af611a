"""Diff generation, parsing and patch application tools."""

from .apply import (
    PatchOutcome,
    PatchRunResult,
    PatchStatus,
    apply,
    apply_hunks,
    is_applicable,
    is_applied,
    reconcile,
    run_patch,
)
from .diff import build_hunks, compute_edit_script, diff_directories, diff_lines, generate
from .files import LineStream, collect_files, read_line_stream
from .normalize import normalize_diff_paths
from .parser import parse_patch
from .paths import resolve_within

__all__ = [
    "LineStream",
    "PatchOutcome",
    "PatchRunResult",
    "PatchStatus",
    "apply",
    "apply_hunks",
    "build_hunks",
    "collect_files",
    "compute_edit_script",
    "diff_directories",
    "diff_lines",
    "generate",
    "is_applicable",
    "is_applied",
    "normalize_diff_paths",
    "parse_patch",
    "read_line_stream",
    "reconcile",
    "resolve_within",
    "run_patch",
]
