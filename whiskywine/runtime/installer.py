import logging
from pathlib import Path
from typing import Any, Optional, Tuple

from whiskywine.config import InstallerConfig
from whiskywine.errors import VersionError
from whiskywine.runtime.version import (
    VERSION_PLIST_NAME,
    ZERO_VERSION,
    SemanticVersion,
    read_version_plist,
)
from whiskywine.utils.subprocess import SubprocessError, run_command


class WhiskyWineInstaller:
    """Status accessor for the Wine build shipped inside the app bundle.

    Wine is copied into ``Contents/Resources/Libraries`` at build time, so
    nothing here downloads or deletes anything. ``install`` only clears the
    quarantine flag, ``uninstall`` is a no-op and updates are never offered.
    Paths and the version file are re-read on every call.
    """

    def __init__(
        self,
        config: InstallerConfig,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

    @property
    def library_folder(self) -> Path:
        return self.config.resource_dir / "Libraries"

    @property
    def bin_folder(self) -> Path:
        return self.library_folder / "Wine" / "bin"

    @property
    def version_plist(self) -> Path:
        return self.library_folder / VERSION_PLIST_NAME

    def is_whisky_wine_installed(self) -> bool:
        return self.bin_folder.exists()

    def install(self, source: Any = None) -> None:
        # source is accepted for API compatibility; the runtime is already bundled
        self._remove_quarantine_attribute()

    def uninstall(self) -> None:
        self.logger.info("Bundled Wine cannot be uninstalled")

    def should_update_whisky_wine(self) -> Tuple[bool, SemanticVersion]:
        version = self.whisky_wine_version() or ZERO_VERSION
        return False, version

    async def should_update_whisky_wine_async(self) -> Tuple[bool, SemanticVersion]:
        return self.should_update_whisky_wine()

    def whisky_wine_version(self) -> Optional[SemanticVersion]:
        plist = self.version_plist

        if not plist.exists():
            return None

        try:
            info = read_version_plist(plist)
        except VersionError as exc:
            self.logger.error("Failed to read WhiskyWineVersion plist: %s", exc)
            return None

        return info.version

    def _remove_quarantine_attribute(self) -> None:
        command = [
            str(self.config.xattr_executable),
            "-dr",
            self.config.quarantine_attribute,
            str(self.library_folder),
        ]

        try:
            result = run_command(command, check=False)
        except SubprocessError as exc:
            self.logger.error("Failed to remove quarantine attribute: %s", exc)
            return

        if result.returncode == 0:
            self.logger.info(
                "Successfully removed quarantine attribute from bundled Wine"
            )
            return

        self.logger.warning("xattr exited with code %d", result.returncode)
        if result.stderr:
            self.logger.debug("xattr stderr: %s", result.stderr.strip())
