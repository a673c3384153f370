"""
Shared test fixtures and configuration.
"""

import os
import stat
from pathlib import Path

import pytest

from armvm.adapters.mock import MockAdapter
from armvm.adapters.registry import AdapterRegistry
from armvm.adapters.shell.filesystem import FilesystemAdapter
from armvm.core.models.vm import VMConfig


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def stock_dir(fixtures_dir: Path) -> Path:
    """Files exactly as the stock shell scaffolder produces them."""
    return fixtures_dir / "stock"


@pytest.fixture
def default_cfg() -> VMConfig:
    return VMConfig()


@pytest.fixture
def mock_registry() -> tuple[AdapterRegistry, MockAdapter]:
    """Real filesystem, mocked everything else."""
    mock = MockAdapter(adapter_name="mock")
    registry = AdapterRegistry(live={"filesystem"})
    registry.register(FilesystemAdapter())
    registry.set_mock_mode(True, mock_adapter=mock)
    return registry, mock


def _write_tool(bin_dir: Path, name: str, body: str) -> Path:
    path = bin_dir / name
    path.write_text(f"#!/bin/sh\n{body}\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def fake_bin(tmp_path: Path, monkeypatch) -> Path:
    """An empty directory prepended to PATH; use ``make_tool`` to fill it."""
    bin_dir = tmp_path / "fake-bin"
    bin_dir.mkdir()
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
    return bin_dir


@pytest.fixture
def make_tool(fake_bin: Path):
    """Create a fake executable that logs its argv to ``calls.log``."""

    def _make(name: str, exit_code: int = 0, stdout: str = "") -> Path:
        body = f'echo "{name} $*" >> "{fake_bin}/calls.log"\n'
        if stdout:
            body += f"printf '%s\\n' '{stdout}'\n"
        body += f"exit {exit_code}"
        return _write_tool(fake_bin, name, body)

    return _make


@pytest.fixture
def no_tools_path(tmp_path: Path, monkeypatch) -> Path:
    """PATH pointing only at an empty directory: no packer, no vagrant."""
    empty = tmp_path / "empty-bin"
    empty.mkdir()
    monkeypatch.setenv("PATH", str(empty))
    return empty
