"""Custom exceptions for the fsobserver package."""


class ObserverError(Exception):
    """Base exception for all observer errors."""
    pass


class InvalidArgumentError(ObserverError, ValueError):
    """A required path argument was empty."""
    pass


class DifferentRootError(ObserverError, ValueError):
    """Two paths do not share a filesystem root."""
    pass


class RootNotFoundError(ObserverError):
    """Observed path does not exist or is not a directory."""
    pass


class ObserverClosedError(ObserverError):
    """Observer was used after it was closed."""
    pass
