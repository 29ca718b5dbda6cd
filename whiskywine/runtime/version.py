import plistlib
import re
from pathlib import Path
from typing import Optional, Tuple, Union

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from whiskywine.errors import VersionError
from whiskywine.utils.fs import atomic_write, ensure_dir

VERSION_PLIST_NAME = "WhiskyWineVersion.plist"

_NUMERIC = r"(?:0|[1-9][0-9]*)"
_IDENTIFIER = r"(?:0|[1-9][0-9]*|[0-9]*[a-zA-Z-][0-9a-zA-Z-]*)"
_PRERELEASE = rf"{_IDENTIFIER}(?:\.{_IDENTIFIER})*"
_BUILD = r"[0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*"

# SemVer 2.0.0, https://semver.org/#is-there-a-suggested-regular-expression-regex-to-check-a-semver-string
_SEMVER_PATTERN = re.compile(
    rf"({_NUMERIC})\.({_NUMERIC})\.({_NUMERIC})"
    rf"(?:-({_PRERELEASE}))?"
    rf"(?:\+({_BUILD}))?"
)
_PRERELEASE_PATTERN = re.compile(_PRERELEASE)
_BUILD_PATTERN = re.compile(_BUILD)


class SemanticVersion(BaseModel):
    """A SemVer 2.0.0 version.

    Accepts either the canonical string form (``"1.2.3-rc.1+build.7"``) or
    the individual fields. Comparison operators follow SemVer precedence, so
    build metadata never affects ordering; ``==`` still compares every field.
    """

    major: int = Field(..., ge=0, description="Major version")
    minor: int = Field(..., ge=0, description="Minor version")
    patch: int = Field(..., ge=0, description="Patch version")

    prerelease: Optional[str] = Field(
        default=None,
        description="Dot-separated pre-release identifiers (e.g. rc.1)",
    )

    build: Optional[str] = Field(
        default=None,
        description="Dot-separated build metadata (e.g. 20240101.sha)",
    )

    @model_validator(mode="before")
    @classmethod
    def split_version_string(cls, value):
        if not isinstance(value, str):
            return value

        match = _SEMVER_PATTERN.fullmatch(value.strip())
        if not match:
            raise ValueError(f"Not a semantic version: {value!r}")

        major, minor, patch, prerelease, build = match.groups()
        return {
            "major": int(major),
            "minor": int(minor),
            "patch": int(patch),
            "prerelease": prerelease,
            "build": build,
        }

    @field_validator("prerelease")
    @classmethod
    def validate_prerelease(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not _PRERELEASE_PATTERN.fullmatch(value):
            raise ValueError(f"Invalid pre-release identifiers: {value!r}")
        return value

    @field_validator("build")
    @classmethod
    def validate_build(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not _BUILD_PATTERN.fullmatch(value):
            raise ValueError(f"Invalid build metadata: {value!r}")
        return value

    @classmethod
    def parse(cls, text: str) -> "SemanticVersion":
        try:
            return cls.model_validate(text)
        except ValidationError as exc:
            raise VersionError(
                f"Invalid semantic version: {text!r}"
            ) from exc

    @property
    def is_prerelease(self) -> bool:
        return self.prerelease is not None

    def same_precedence(self, other: "SemanticVersion") -> bool:
        return self._precedence_key() == other._precedence_key()

    def _precedence_key(self) -> Tuple:
        if self.prerelease is None:
            # a release outranks any of its pre-releases
            return (self.major, self.minor, self.patch, (1,))

        identifiers = tuple(
            (0, int(part), "") if part.isdigit() else (1, 0, part)
            for part in self.prerelease.split(".")
        )
        return (self.major, self.minor, self.patch, (0, identifiers))

    def __lt__(self, other: "SemanticVersion") -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._precedence_key() < other._precedence_key()

    def __le__(self, other: "SemanticVersion") -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._precedence_key() <= other._precedence_key()

    def __gt__(self, other: "SemanticVersion") -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._precedence_key() > other._precedence_key()

    def __ge__(self, other: "SemanticVersion") -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._precedence_key() >= other._precedence_key()

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.build:
            text += f"+{self.build}"
        return text

    class Config:
        frozen = True


ZERO_VERSION = SemanticVersion(major=0, minor=0, patch=0)


class WhiskyWineVersion(BaseModel):
    version: SemanticVersion = Field(
        ...,
        description="Version of the Wine build bundled in Libraries/",
    )

    class Config:
        frozen = True


def read_version_plist(path: Path) -> WhiskyWineVersion:
    try:
        with path.open("rb") as fp:
            payload = plistlib.load(fp)
    except Exception as exc:
        # plistlib surfaces corrupt input as assorted exception types
        raise VersionError(
            f"Failed to read version plist {path}: {exc}"
        ) from exc

    try:
        return WhiskyWineVersion.model_validate(payload)
    except ValidationError as exc:
        raise VersionError(
            f"Invalid version plist {path}: {exc}"
        ) from exc


def write_version_plist(
    path: Path,
    version: Union[SemanticVersion, str],
) -> WhiskyWineVersion:
    if isinstance(version, str):
        version = SemanticVersion.parse(version)

    info = WhiskyWineVersion(version=version)

    ensure_dir(path.parent)
    atomic_write(
        path,
        plistlib.dumps({"version": str(info.version)}, fmt=plistlib.FMT_XML),
    )
    return info
