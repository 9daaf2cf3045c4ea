"""Tests for configuration loading."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from nativedeps.config.loader import (
    ConfigError,
    dict_to_config,
    expand_env_vars,
    find_project_config,
    get_default_config,
    load_config,
    load_yaml_file,
    merge_configs,
)
from nativedeps.core.models import DependencyGroup
from nativedeps.validation.aggregator import DEFAULT_MAX_WORKERS


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path):
    """Point NATIVEDEPS_HOME at an empty directory so no global config leaks in."""
    home = tmp_path / "nativedeps-home"
    with patch.dict(os.environ, {"NATIVEDEPS_HOME": str(home)}):
        yield home


def _write_global(home: Path, content: str) -> None:
    config_dir = home / "config"
    config_dir.mkdir(parents=True)
    (config_dir / "config.yml").write_text(content)


class TestDefaults:
    def test_default_config(self) -> None:
        config = get_default_config()
        assert config.validation.directories == []
        assert config.validation.sdk_language == "python"
        assert config.validation.max_workers == DEFAULT_MAX_WORKERS
        assert config.install.groups == list(DependencyGroup)
        assert config.catalog.path is None

    def test_load_without_files(self, tmp_path: Path) -> None:
        project = tmp_path / "project"
        project.mkdir()
        config = load_config(project)
        assert config.install.groups == list(DependencyGroup)
        assert config._config_sources == []


class TestFindProjectConfig:
    def test_first_name_wins(self, tmp_path: Path) -> None:
        (tmp_path / "nativedeps.yml").write_text("")
        (tmp_path / ".nativedeps.yml").write_text("")
        assert find_project_config(tmp_path) == tmp_path / ".nativedeps.yml"

    def test_none(self, tmp_path: Path) -> None:
        assert find_project_config(tmp_path) is None


class TestLoadConfig:
    """Tests for layered loading."""

    def test_project_config(self, tmp_path: Path) -> None:
        (tmp_path / ".nativedeps.yml").write_text(
            "validation:\n"
            "  directories: [browsers/chromium]\n"
            "  dlopen_libraries: [libx264.so]\n"
            "  max_workers: 4\n"
            "install:\n"
            "  groups: [chromium, tools]\n"
            "catalog:\n"
            "  path: deps.yml\n"
            "  host_platform: ubuntu22.04\n"
        )
        config = load_config(tmp_path)

        assert config.validation.directories == [str(tmp_path / "browsers/chromium")]
        assert config.validation.dlopen_libraries == ["libx264.so"]
        assert config.validation.max_workers == 4
        assert config.install.groups == [DependencyGroup.CHROMIUM, DependencyGroup.TOOLS]
        assert config.catalog.path == tmp_path / "deps.yml"
        assert config.catalog.host_platform == "ubuntu22.04"
        assert config._config_sources == [f"project:{tmp_path / '.nativedeps.yml'}"]

    def test_precedence(self, tmp_path: Path, isolated_home: Path) -> None:
        _write_global(isolated_home, "validation:\n  max_workers: 2\n  sdk_language: java\n")
        (tmp_path / ".nativedeps.yml").write_text("validation:\n  max_workers: 6\n")

        config = load_config(tmp_path, cli_overrides={"validation": {"sdk_language": "csharp"}})

        assert config.validation.max_workers == 6
        assert config.validation.sdk_language == "csharp"
        assert [s.split(":")[0] for s in config._config_sources] == ["global", "project", "cli"]

    def test_custom_config_replaces_project(self, tmp_path: Path) -> None:
        (tmp_path / ".nativedeps.yml").write_text("validation:\n  max_workers: 6\n")
        custom = tmp_path / "ci.yml"
        custom.write_text("validation:\n  max_workers: 1\n")

        config = load_config(tmp_path, cli_config_path=custom)

        assert config.validation.max_workers == 1

    def test_missing_custom_config(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Config file not found"):
            load_config(tmp_path, cli_config_path=tmp_path / "absent.yml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        (tmp_path / ".nativedeps.yml").write_text("validation: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(tmp_path)

    def test_validation_error(self, tmp_path: Path) -> None:
        (tmp_path / ".nativedeps.yml").write_text("install:\n  groups: [opera]\n")
        with pytest.raises(ConfigError, match="Unknown dependency group 'opera'"):
            load_config(tmp_path)

    def test_unknown_key_only_warns(self, tmp_path: Path) -> None:
        (tmp_path / ".nativedeps.yml").write_text("validaton:\n  max_workers: 3\n")
        config = load_config(tmp_path)
        assert config.validation.max_workers == DEFAULT_MAX_WORKERS

    def test_broken_global_config_is_skipped(self, tmp_path: Path, isolated_home: Path) -> None:
        _write_global(isolated_home, "validation: [unclosed\n")
        config = load_config(tmp_path)
        assert config._config_sources == []

    def test_cli_group_names_parsed(self, tmp_path: Path) -> None:
        config = load_config(tmp_path, cli_overrides={"install": {"groups": ["WebKit"]}})
        assert config.install.groups == [DependencyGroup.WEBKIT]

    def test_cli_unknown_group(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="Unknown dependency group"):
            load_config(tmp_path, cli_overrides={"install": {"groups": ["opera"]}})


class TestEnvExpansion:
    def test_expands_variables(self) -> None:
        with patch.dict(os.environ, {"BROWSERS": "/opt/browsers"}):
            assert expand_env_vars({"d": ["${BROWSERS}/chromium"]}) == {"d": ["/opt/browsers/chromium"]}

    def test_default_value(self) -> None:
        env = {k: v for k, v in os.environ.items() if k != "NATIVEDEPS_UNSET"}
        with patch.dict(os.environ, env, clear=True):
            assert expand_env_vars("${NATIVEDEPS_UNSET:-ubuntu22.04}") == "ubuntu22.04"
            assert expand_env_vars("${NATIVEDEPS_UNSET}") == ""

    def test_non_strings_untouched(self) -> None:
        assert expand_env_vars({"n": 4, "b": True}) == {"n": 4, "b": True}

    def test_load_yaml_file_expands(self, tmp_path: Path) -> None:
        path = tmp_path / "c.yml"
        path.write_text("catalog:\n  host_platform: ${HOST_ID}\n")
        with patch.dict(os.environ, {"HOST_ID": "debian12"}):
            assert load_yaml_file(path) == {"catalog": {"host_platform": "debian12"}}

    def test_load_yaml_file_requires_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "c.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="must be a YAML mapping"):
            load_yaml_file(path)


class TestMergeConfigs:
    def test_dicts_merge_lists_replace(self) -> None:
        base = {"validation": {"directories": ["a"], "max_workers": 2}}
        overlay = {"validation": {"directories": ["b"]}}
        assert merge_configs(base, overlay) == {"validation": {"directories": ["b"], "max_workers": 2}}

    def test_base_not_mutated(self) -> None:
        base = {"install": {"groups": ["tools"]}}
        merge_configs(base, {"install": {"groups": ["webkit"]}})
        assert base == {"install": {"groups": ["tools"]}}


def test_dict_to_config_empty() -> None:
    config = dict_to_config({})
    assert config.install.groups == list(DependencyGroup)
