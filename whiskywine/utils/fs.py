import os
from pathlib import Path

from whiskywine.errors import WhiskyWineError


class FilesystemError(WhiskyWineError):
    exit_code = 12

def ensure_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FilesystemError(
            f"Failed to create directory: {path}"
        ) from exc


def atomic_write(path: Path, data: bytes) -> None:
    tmp_path = path.with_suffix(path.suffix + ".tmp")

    try:
        with tmp_path.open("wb") as f:
            f.write(data)
        os.replace(tmp_path, path)
    except OSError as exc:
        tmp_path.unlink(missing_ok=True)
        raise FilesystemError(
            f"Failed to write file atomically: {path}"
        ) from exc
