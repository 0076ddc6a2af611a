from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from treepatch.config import EngineConfig, load_config
from treepatch.errors import ConfigError


def test_defaults_without_file_or_env() -> None:
    config = load_config(None, env={})

    assert config == EngineConfig()
    assert config.context_lines == 3
    assert config.max_lcs_lines == 5000
    assert config.binary_probe_bytes == 8192
    assert config.stop_on_error is True


def test_missing_file_falls_back_to_defaults(tmp_path: Path) -> None:
    assert load_config(tmp_path / "absent.yaml", env={}) == EngineConfig()


def test_engine_section_is_read(tmp_path: Path) -> None:
    path = tmp_path / "treepatch.yaml"
    path.write_text(
        textwrap.dedent(
            """
            engine:
              context_lines: 1
              max_lcs_lines: 100
              stop_on_error: false
            """
        ).lstrip(),
        encoding="utf-8",
    )

    config = load_config(path, env={})

    assert config.context_lines == 1
    assert config.max_lcs_lines == 100
    assert config.stop_on_error is False


def test_environment_overrides_file(tmp_path: Path) -> None:
    path = tmp_path / "treepatch.yaml"
    path.write_text("context_lines: 1\n", encoding="utf-8")

    config = load_config(path, env={"TREEPATCH_CONTEXT_LINES": "5", "TREEPATCH_MAX_LCS_LINES": "oops"})

    assert config.context_lines == 5
    assert config.max_lcs_lines == 5000


def test_unknown_keys_are_rejected(tmp_path: Path) -> None:
    path = tmp_path / "treepatch.yaml"
    path.write_text("engine:\n  contxt_lines: 2\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(path, env={})


def test_invalid_values_are_rejected(tmp_path: Path) -> None:
    path = tmp_path / "treepatch.yaml"
    path.write_text("context_lines: -1\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(path, env={})


def test_unparsable_yaml_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "treepatch.yaml"
    path.write_text("engine: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(path, env={})
