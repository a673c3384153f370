"""
Tests for the configuration loader and config check use case.
"""

import textwrap
from pathlib import Path

import pytest

from armvm.core.config.loader import (
    ConfigError,
    config_base_dir,
    find_config_file,
    load_config,
)
from armvm.core.use_cases.config_check import check_config


def _write(path: Path, text: str) -> Path:
    path.write_text(textwrap.dedent(text))
    return path


class TestFindConfigFile:
    def test_in_start_dir(self, tmp_path: Path):
        config = _write(tmp_path / "armvm.yml", "memory: 4096\n")
        assert find_config_file(tmp_path) == config.resolve()

    def test_walks_up(self, tmp_path: Path):
        config = _write(tmp_path / "armvm.yml", "memory: 4096\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == config.resolve()

    def test_not_found(self, tmp_path: Path):
        assert find_config_file(tmp_path) is None


class TestLoadConfig:
    def test_flat_mapping(self, tmp_path: Path):
        config = _write(tmp_path / "armvm.yml", """\
            name: lab
            memory: 4096
            cpus: 4
        """)
        cfg = load_config(config)
        assert cfg.name == "lab"
        assert cfg.project_dir == "lab-project"
        assert cfg.memory == 4096

    def test_nested_under_vm(self, tmp_path: Path):
        config = _write(tmp_path / "armvm.yml", """\
            vm:
              box: acme/jammy-arm64
              faster_vm: false
        """)
        cfg = load_config(config)
        assert cfg.box == "acme/jammy-arm64"
        assert cfg.faster_vm is False

    def test_empty_file_means_defaults(self, tmp_path: Path):
        config = _write(tmp_path / "armvm.yml", "")
        assert load_config(config).name == "ubuntu-arm64"

    def test_no_file_means_defaults(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        cfg = load_config()
        assert cfg.project_dir == "ubuntu-arm64-project"

    def test_overrides_win(self, tmp_path: Path):
        config = _write(tmp_path / "armvm.yml", "memory: 4096\ncpus: 4\n")
        cfg = load_config(config, overrides={"memory": 8192, "cpus": None})
        assert cfg.memory == 8192
        assert cfg.cpus == 4

    def test_missing_explicit_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="Config file not found"):
            load_config(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        config = _write(tmp_path / "armvm.yml", "memory: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(config)

    def test_not_a_mapping(self, tmp_path: Path):
        config = _write(tmp_path / "armvm.yml", "- a\n- b\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_config(config)

    def test_invalid_values(self, tmp_path: Path):
        config = _write(tmp_path / "armvm.yml", "cpus: 0\n")
        with pytest.raises(ConfigError, match="Invalid VM configuration"):
            load_config(config)

    def test_invalid_override(self):
        with pytest.raises(ConfigError, match="command line"):
            load_config(None, overrides={"name": "bad name"}, search=False)

    def test_base_dir(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert config_base_dir(None) == Path.cwd()
        assert config_base_dir(tmp_path / "x" / "armvm.yml") == (tmp_path / "x").resolve()


class TestCheckConfig:
    def test_defaults_warn_only(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = check_config()
        assert result.valid
        assert any("No armvm.yml" in w for w in result.warnings)

    def test_unknown_keys_warned(self, tmp_path: Path):
        config = _write(tmp_path / "armvm.yml", "memory: 4096\ncolour: blue\n")
        result = check_config(config)
        assert result.valid
        assert any("colour" in w for w in result.warnings)

    def test_low_memory_warned(self, tmp_path: Path):
        config = _write(tmp_path / "armvm.yml", "memory: 512\n")
        result = check_config(config)
        assert any("below 1GB" in w for w in result.warnings)

    def test_invalid(self, tmp_path: Path):
        config = _write(tmp_path / "armvm.yml", "memory: -1\n")
        result = check_config(config)
        assert not result.valid
        assert result.errors
        assert result.to_dict()["config"] is None

    def test_dotted_name_rejected(self, tmp_path: Path):
        config = _write(tmp_path / "armvm.yml", "name: my.vm\n")
        result = check_config(config)
        assert not result.valid
        assert any("invalid name" in e for e in result.errors)

    def test_existing_vagrantfile_warned(self, tmp_path: Path):
        config = _write(tmp_path / "armvm.yml", "name: lab\n")
        vm_dir = tmp_path / "lab-project" / "output"
        vm_dir.mkdir(parents=True)
        (vm_dir / "Vagrantfile").write_text("")
        result = check_config(config)
        assert any("already exists" in w for w in result.warnings)
