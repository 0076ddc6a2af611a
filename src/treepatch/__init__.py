"""Unified diff generation and application for directory trees."""

from .config import EngineConfig, load_config
from .errors import (
    ConfigError,
    ContentMismatch,
    FileAlreadyExists,
    HunkApplicationFailed,
    NoHunksFound,
    PatchError,
    PatchFileNotFound,
    PathTraversal,
)
from .schema import NO_FILE, EditOp, FileDiff, Hunk, LineKind, PatchDocument
from .tools import (
    PatchOutcome,
    PatchStatus,
    apply,
    diff_directories,
    generate,
    is_applicable,
    is_applied,
    normalize_diff_paths,
    parse_patch,
    reconcile,
)

__version__ = "0.1.0"

__all__ = [
    "NO_FILE",
    "ConfigError",
    "ContentMismatch",
    "EditOp",
    "EngineConfig",
    "FileAlreadyExists",
    "FileDiff",
    "Hunk",
    "HunkApplicationFailed",
    "LineKind",
    "NoHunksFound",
    "PatchDocument",
    "PatchError",
    "PatchFileNotFound",
    "PatchOutcome",
    "PatchStatus",
    "PathTraversal",
    "apply",
    "diff_directories",
    "generate",
    "is_applicable",
    "is_applied",
    "load_config",
    "normalize_diff_paths",
    "parse_patch",
    "reconcile",
]
