class WhiskyWineError(Exception):
    """Base error; ``exit_code`` is what the CLI exits with."""

    exit_code: int = 1

class ConfigError(WhiskyWineError):
    exit_code = 2


class ResourceDirectoryError(WhiskyWineError):
    exit_code = 3


class VersionError(WhiskyWineError):
    exit_code = 4
