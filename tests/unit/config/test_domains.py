from __future__ import annotations

from pathlib import Path

import pytest

from helpers.io_utils import write_yaml

from adoc_reducer.core.config.domains import LoggingConfig, ReducerConfig
from adoc_reducer.core.document.safe_mode import SafeMode


def _write_reducer(repo: Path, data) -> None:
    write_yaml(repo / ".adoc-reducer" / "config" / "reducer.yaml", {"reducer": data})


class TestReducerConfig:
    def test_defaults(self, tmp_path: Path):
        config = ReducerConfig(repo_root=tmp_path)

        assert config.safe is SafeMode.UNSAFE
        assert config.sourcemap is False
        assert config.preserve_conditionals is False
        assert config.include_map is False
        assert config.max_include_depth == 64
        assert config.attributes == {"max-include-depth": "64"}

    def test_project_values(self, tmp_path: Path):
        _write_reducer(
            tmp_path,
            {
                "safe": "secure",
                "preserveConditionals": True,
                "includeMap": True,
                "maxIncludeDepth": 3,
            },
        )

        config = ReducerConfig(repo_root=tmp_path)

        assert config.safe is SafeMode.SECURE
        assert config.preserve_conditionals is True
        assert config.include_map is True
        assert config.attributes["max-include-depth"] == "3"

    def test_attribute_values_are_normalized(self, tmp_path: Path):
        _write_reducer(tmp_path, {"attributes": {"draft": True, "hidden": False, "gone": None, "count": 2}})

        attributes = ReducerConfig(repo_root=tmp_path).attributes

        assert attributes["draft"] == ""
        assert attributes["hidden"] is None
        assert attributes["gone"] is None
        assert attributes["count"] == "2"

    def test_explicit_max_include_depth_attribute_wins(self, tmp_path: Path):
        _write_reducer(tmp_path, {"maxIncludeDepth": 3, "attributes": {"max-include-depth": 1}})

        assert ReducerConfig(repo_root=tmp_path).attributes["max-include-depth"] == "1"

    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("ADOC_REDUCER_REDUCER__SAFE", "server")

        assert ReducerConfig(repo_root=tmp_path).safe is SafeMode.SERVER


class TestLoggingConfig:
    def test_defaults(self, tmp_path: Path):
        config = LoggingConfig(repo_root=tmp_path)

        assert config.level == "warn"
        assert config.format == "adoc-reducer: %(levelname)s: %(message)s"

    def test_project_level(self, tmp_path: Path):
        write_yaml(tmp_path / ".adoc-reducer" / "config" / "logging.yaml", {"logging": {"level": "debug"}})

        assert LoggingConfig(repo_root=tmp_path).level == "debug"
