from typing import Optional


class SnapshotError(Exception):
    """
    Base error for a failed snapshot.

    Carries the path and the boundary operation that failed so callers can
    tell a failure four levels deep from one at the root.
    """

    def __init__(self, message: str, path: Optional[str] = None, operation: Optional[str] = None):
        super().__init__(message)
        self.path = path
        self.operation = operation


class NotFoundError(SnapshotError):
    pass


class PermissionDeniedError(SnapshotError):
    pass


class IOFailure(SnapshotError):
    pass


class ConfigError(SnapshotError):
    pass


def translate_os_error(exc: OSError, path: str, operation: str) -> SnapshotError:
    """
    Map an OSError raised by a boundary call onto the snapshot taxonomy.
    """
    reason = exc.strerror or str(exc)
    message = f"{operation} failed for {path}: {reason}"

    if isinstance(exc, (FileNotFoundError, NotADirectoryError)):
        return NotFoundError(message, path=path, operation=operation)
    if isinstance(exc, PermissionError):
        return PermissionDeniedError(message, path=path, operation=operation)
    return IOFailure(message, path=path, operation=operation)
