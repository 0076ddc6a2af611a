"""Exception hierarchy raised by the diff and patch engine."""

from __future__ import annotations

from typing import Any, Mapping


class PatchError(RuntimeError):
    """Raised when a patch fails validation or application."""

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.details: dict[str, Any] = dict(details or {})


class NoHunksFound(PatchError):
    """The patch text contains no parsable file sections."""


class PathTraversal(PatchError):
    """A patch path resolves outside the target root."""


class PatchFileNotFound(PatchError):
    """A modification or deletion target is missing on disk."""


class FileAlreadyExists(PatchError):
    """A creation target is already present on disk."""


class ContentMismatch(PatchError):
    """A file's content disagrees with the content a patch expects."""


class HunkApplicationFailed(PatchError):
    """A hunk's expected window is out of range or does not match."""


class ConfigError(ValueError):
    """Raised when engine configuration cannot be loaded or validated."""
