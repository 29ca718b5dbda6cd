import logging
import stat
from pathlib import Path

import pytest

from whiskywine.config import RESOURCES_ENV_VAR, InstallerConfig
from whiskywine.runtime.installer import WhiskyWineInstaller


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    monkeypatch.delenv(RESOURCES_ENV_VAR, raising=False)


@pytest.fixture
def resource_dir(tmp_path) -> Path:
    path = tmp_path / "Whisky.app" / "Contents" / "Resources"
    path.mkdir(parents=True)
    return path.resolve()


@pytest.fixture
def library_dir(resource_dir) -> Path:
    path = resource_dir / "Libraries"
    path.mkdir()
    return path


@pytest.fixture
def test_logger() -> logging.Logger:
    return logging.getLogger("whiskywine.tests")


@pytest.fixture
def make_installer(resource_dir, test_logger):
    def _make(**overrides) -> WhiskyWineInstaller:
        config = InstallerConfig(resource_dir=resource_dir, **overrides)
        return WhiskyWineInstaller(config, logger=test_logger)

    return _make


@pytest.fixture
def installer(make_installer) -> WhiskyWineInstaller:
    return make_installer()


@pytest.fixture
def fake_xattr(tmp_path):
    """Shell script standing in for /usr/bin/xattr.

    Records its arguments in ``calls.txt`` and exits with ``exit_code``.
    """

    def _make(exit_code: int = 0) -> Path:
        record = tmp_path / "calls.txt"
        script = tmp_path / "xattr"
        lines = ["#!/bin/sh", f'echo "$@" >> "{record}"']
        if exit_code != 0:
            lines.append("echo \"xattr: simulated failure\" >&2")
        lines.append(f"exit {exit_code}")
        script.write_text("\n".join(lines) + "\n")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _make
