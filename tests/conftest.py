from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Mapping

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def write_tree(root: Path, files: Mapping[str, str | bytes]) -> Path:
    """Materialise ``files`` (relative path -> content) beneath ``root``."""

    root.mkdir(parents=True, exist_ok=True)
    for relative, content in files.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            target.write_bytes(content)
        else:
            target.write_bytes(content.encode("utf-8"))
    return root


def read_tree(root: Path) -> dict[str, str]:
    """Return every file beneath ``root`` keyed by forward-slash relative path."""

    return {
        path.relative_to(root).as_posix(): path.read_bytes().decode("utf-8")
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


@pytest.fixture()
def make_tree(tmp_path: Path) -> Callable[[str, Mapping[str, str | bytes]], Path]:
    """Factory creating named trees inside the test's temporary directory."""

    def factory(name: str, files: Mapping[str, str | bytes]) -> Path:
        return write_tree(tmp_path / name, files)

    return factory


@pytest.fixture()
def snapshot_tree() -> Callable[[Path], dict[str, str]]:
    """Expose :func:`read_tree` to tests comparing whole trees."""

    return read_tree
