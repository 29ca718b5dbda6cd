import os
import sys
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from whiskywine.errors import ConfigError, ResourceDirectoryError

RESOURCES_ENV_VAR = "WHISKYWINE_RESOURCES"


class InstallerConfig(BaseModel):
    resource_dir: Path = Field(
        ...,
        description="Resources directory of the application bundle (Contents/Resources)",
    )

    xattr_executable: Path = Field(
        default=Path("/usr/bin/xattr"),
        description="Extended attribute utility used to clear the quarantine flag",
    )

    quarantine_attribute: str = Field(
        default="com.apple.quarantine",
        description="Extended attribute removed from the bundled libraries",
    )

    @field_validator("resource_dir")
    @classmethod
    def validate_resource_dir(cls, value: Path) -> Path:
        if not value.exists():
            raise ResourceDirectoryError(
                f"Application resources directory does not exist: {value}"
            )
        if not value.is_dir():
            raise ResourceDirectoryError(
                f"Application resources path is not a directory: {value}"
            )
        return value.resolve()

    @field_validator("quarantine_attribute")
    @classmethod
    def validate_quarantine_attribute(cls, value: str) -> str:
        if not value.strip():
            raise ConfigError("Quarantine attribute name cannot be empty")
        return value

    class Config:
        frozen = True


def resolve_resource_dir(explicit: Optional[Path] = None) -> Path:
    """Locate the application's resources directory.

    Checked in order: an explicit path, ``$WHISKYWINE_RESOURCES``, then the
    ``Contents/Resources`` folder of the frozen ``.app`` bundle we are
    running from. Failing all three is a packaging defect and raises
    :class:`ResourceDirectoryError`.
    """
    if explicit is not None:
        return explicit

    from_env = os.environ.get(RESOURCES_ENV_VAR)
    if from_env:
        return Path(from_env)

    bundled = _bundle_resources_dir()
    if bundled is not None:
        return bundled

    raise ResourceDirectoryError(
        "Unable to locate app Resources directory "
        f"(pass --resources or set {RESOURCES_ENV_VAR})"
    )


def load_config(
    resources: Optional[Path] = None,
    *,
    xattr_executable: Optional[Path] = None,
) -> InstallerConfig:
    values = {"resource_dir": resolve_resource_dir(resources)}
    if xattr_executable is not None:
        values["xattr_executable"] = xattr_executable
    return InstallerConfig(**values)


def _bundle_resources_dir() -> Optional[Path]:
    if not getattr(sys, "frozen", False):
        return None

    # <App>.app/Contents/MacOS/<executable>
    executable = Path(sys.executable).resolve()
    macos_dir = executable.parent
    if macos_dir.name != "MacOS" or macos_dir.parent.name != "Contents":
        return None

    return macos_dir.parent / "Resources"
