"""
Configuration and resources directory resolution tests
"""

import sys
from pathlib import Path

import pytest

from whiskywine.config import (
    RESOURCES_ENV_VAR,
    InstallerConfig,
    load_config,
    resolve_resource_dir,
)
from whiskywine.errors import ConfigError, ResourceDirectoryError


class TestInstallerConfig:
    """InstallerConfig validation"""

    def test_defaults(self, resource_dir):
        config = InstallerConfig(resource_dir=resource_dir)

        assert config.resource_dir == resource_dir
        assert config.xattr_executable == Path("/usr/bin/xattr")
        assert config.quarantine_attribute == "com.apple.quarantine"

    def test_missing_resource_dir(self, tmp_path):
        with pytest.raises(ResourceDirectoryError):
            InstallerConfig(resource_dir=tmp_path / "missing")

    def test_resource_dir_is_file(self, tmp_path):
        path = tmp_path / "Resources"
        path.write_text("")

        with pytest.raises(ResourceDirectoryError):
            InstallerConfig(resource_dir=path)

    def test_empty_quarantine_attribute(self, resource_dir):
        with pytest.raises(ConfigError):
            InstallerConfig(resource_dir=resource_dir, quarantine_attribute="  ")

    def test_resource_dir_error_exit_code(self):
        assert ResourceDirectoryError.exit_code == 3
        assert ConfigError.exit_code == 2


class TestResolveResourceDir:
    """resolve_resource_dir lookup order"""

    def test_explicit_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv(RESOURCES_ENV_VAR, str(tmp_path / "from-env"))

        assert resolve_resource_dir(tmp_path / "explicit") == tmp_path / "explicit"

    def test_environment_variable(self, tmp_path, monkeypatch):
        monkeypatch.setenv(RESOURCES_ENV_VAR, str(tmp_path / "from-env"))

        assert resolve_resource_dir() == tmp_path / "from-env"

    def test_frozen_app_bundle(self, tmp_path, monkeypatch):
        executable = tmp_path / "Whisky.app" / "Contents" / "MacOS" / "Whisky"
        monkeypatch.setattr(sys, "frozen", True, raising=False)
        monkeypatch.setattr(sys, "executable", str(executable))

        expected = executable.resolve().parent.parent / "Resources"
        assert resolve_resource_dir() == expected

    def test_frozen_outside_app_bundle(self, tmp_path, monkeypatch):
        monkeypatch.setattr(sys, "frozen", True, raising=False)
        monkeypatch.setattr(sys, "executable", str(tmp_path / "bin" / "whisky"))

        with pytest.raises(ResourceDirectoryError):
            resolve_resource_dir()

    def test_unresolvable(self):
        with pytest.raises(ResourceDirectoryError, match="Unable to locate app Resources"):
            resolve_resource_dir()


class TestLoadConfig:
    """load_config"""

    def test_load_from_explicit(self, resource_dir):
        config = load_config(resource_dir)
        assert config.resource_dir == resource_dir

    def test_load_from_environment(self, resource_dir, monkeypatch):
        monkeypatch.setenv(RESOURCES_ENV_VAR, str(resource_dir))
        assert load_config().resource_dir == resource_dir

    def test_xattr_override(self, resource_dir, tmp_path):
        config = load_config(resource_dir, xattr_executable=tmp_path / "xattr")
        assert config.xattr_executable == tmp_path / "xattr"

    def test_missing_directory_is_fatal(self, tmp_path):
        with pytest.raises(ResourceDirectoryError):
            load_config(tmp_path / "nope")
