"""Typed records shared by the diff generator and the patch engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

NO_FILE = "/dev/null"


class LineKind(str, Enum):
    """Role of a single line inside a hunk; the value is its diff prefix."""

    CONTEXT = " "
    DELETE = "-"
    INSERT = "+"


class FileRole(str, Enum):
    """Where a relative path was found when comparing two trees."""

    BASE_ONLY = "present-in-base-only"
    TARGET_ONLY = "present-in-target-only"
    BOTH = "present-in-both"


@dataclass(slots=True, frozen=True)
class FileEntry:
    """Relative path discovered while walking a pair of trees."""

    path: str
    role: FileRole


@dataclass(slots=True, frozen=True)
class EditOp:
    """One line of an edit script."""

    kind: LineKind
    text: str

    def render(self) -> str:
        return f"{self.kind.value}{self.text}"


@dataclass(slots=True)
class Hunk:
    """Contiguous change region with its surrounding context lines."""

    original_start: int
    original_count: int
    modified_start: int
    modified_count: int
    ops: list[EditOp] = field(default_factory=list)

    def header(self) -> str:
        return (
            f"@@ -{self.original_start},{self.original_count} "
            f"+{self.modified_start},{self.modified_count} @@"
        )

    def lines_of(self, *kinds: LineKind) -> list[str]:
        """Return the text of every op whose kind is one of ``kinds``."""
        return [op.text for op in self.ops if op.kind in kinds]

    def render_lines(self) -> list[str]:
        return [self.header(), *(op.render() for op in self.ops)]


@dataclass(slots=True)
class FileDiff:
    """All hunks describing the change to a single file."""

    original_path: str
    modified_path: str
    hunks: list[Hunk] = field(default_factory=list)

    @property
    def is_creation(self) -> bool:
        return self.original_path == NO_FILE

    @property
    def is_deletion(self) -> bool:
        return self.modified_path == NO_FILE

    @property
    def display_path(self) -> str:
        """Path used when reporting on this file."""
        return self.original_path if self.is_deletion else self.modified_path

    def render_lines(self) -> list[str]:
        original = NO_FILE if self.is_creation else f"a/{self.original_path}"
        modified = NO_FILE if self.is_deletion else f"b/{self.modified_path}"
        marker_path = self.display_path
        lines = [
            f"diff -ruN a/{marker_path} b/{marker_path}",
            f"--- {original}",
            f"+++ {modified}",
        ]
        for hunk in self.hunks:
            lines.extend(hunk.render_lines())
        return lines


@dataclass(slots=True)
class PatchDocument:
    """Ordered collection of file diffs parsed from or rendered to text."""

    files: list[FileDiff] = field(default_factory=list)

    def __iter__(self) -> Iterator[FileDiff]:
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)

    def render(self) -> str:
        """Serialise the document as unified-diff text (empty when no files)."""
        lines: list[str] = []
        for file_diff in self.files:
            lines.extend(file_diff.render_lines())
        if not lines:
            return ""
        return "\n".join(lines) + "\n"
