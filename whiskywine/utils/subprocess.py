import subprocess
from typing import List

from whiskywine.errors import WhiskyWineError


class SubprocessError(WhiskyWineError):
    exit_code = 13

def run_command(
    command: List[str],
    *,
    check: bool = True,
) -> subprocess.CompletedProcess:
    """Run ``command`` to completion, capturing its output as text.

    Launch failures always raise :class:`SubprocessError`; a non-zero exit
    raises only when ``check`` is set.
    """
    try:
        result = subprocess.run(
            command,
            check=False,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as exc:
        raise SubprocessError(
            f"Command not found: {command[0]}"
        ) from exc
    except PermissionError as exc:
        raise SubprocessError(
            f"Permission denied executing: {command[0]}"
        ) from exc
    except OSError as exc:
        raise SubprocessError(
            f"Failed to launch {command[0]}: {exc}"
        ) from exc

    if check and result.returncode != 0:
        raise SubprocessError(
            _format_failure(command, result)
        )

    return result

def _format_failure(
    command: List[str],
    result: subprocess.CompletedProcess,
) -> str:
    lines = [
        f"{command[0]} exited with code {result.returncode}",
        f"arguments: {' '.join(command[1:])}",
    ]

    if result.stderr:
        lines.append(f"stderr: {result.stderr.strip()}")

    return "\n".join(lines)
