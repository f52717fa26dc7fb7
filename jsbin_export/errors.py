"""Error kinds raised by the export pipeline, each mapped to an exit code."""


class ExportError(Exception):
    """Base class for expected export failures."""

    exit_code: int = 1


class ConfigurationError(ExportError):
    """Required settings are missing or malformed."""

    exit_code = 2


class NetworkError(ExportError):
    """HTTP transport failure or non-success status."""

    exit_code = 3


class AuthenticationError(ExportError):
    """The login handshake could not be completed."""

    exit_code = 4


class FilesystemError(ExportError):
    """The output folder or one of its files could not be written."""

    exit_code = 5


class TemplateError(ExportError):
    """The index template could not be loaded or rendered."""

    exit_code = 6


def exit_code_for(error: BaseException | None) -> int:
    """Map an exception (or its absence) to a process exit code."""
    if error is None:
        return 0
    if isinstance(error, ExportError):
        return error.exit_code
    return 1
