"""Rewrite machine-specific paths in diff headers into portable ones."""

from __future__ import annotations

from pathlib import Path


def _ensure_trailing_slash(path: Path | str) -> str:
    text = Path(path).as_posix() if isinstance(path, Path) else str(path).replace("\\", "/")
    return text if text.endswith("/") else f"{text}/"


def _replace_header_path(prefix: str, line: str, base: str, replacement: str) -> str:
    """Rewrite the path portion of a ``---``/``+++`` line, keeping any tab suffix."""
    operand = line[len(prefix):]
    path, tab, rest = operand.partition("\t")
    return prefix + path.replace(base, replacement, 1) + tab + rest


def normalize_diff_paths(
    diff_text: str,
    original_base: Path | str,
    modified_base: Path | str,
) -> str:
    """Replace absolute snapshot/tree prefixes in headers with ``a/`` and ``b/``.

    Only ``diff -``, ``---`` and ``+++`` lines are touched; hunk bodies are
    returned unchanged.
    """

    original_prefix = _ensure_trailing_slash(original_base)
    modified_prefix = _ensure_trailing_slash(modified_base)

    normalised: list[str] = []
    for line in diff_text.split("\n"):
        if line.startswith("diff -"):
            line = line.replace(original_prefix, "a/").replace(modified_prefix, "b/")
        elif line.startswith("--- "):
            line = _replace_header_path("--- ", line, original_prefix, "a/")
        elif line.startswith("+++ "):
            line = _replace_header_path("+++ ", line, modified_prefix, "b/")
        normalised.append(line)
    return "\n".join(normalised)
