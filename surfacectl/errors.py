"""Exceptions raised by the control-surface components."""


class ControlSurfaceError(Exception):
    """Base class for every error raised by this package."""


class NotReadyError(ControlSurfaceError):
    """A device backing a component reported that it is not ready."""


class NotInitializedError(ControlSurfaceError):
    """A component was used before it was successfully initialized."""


class InvalidArgumentError(ControlSurfaceError, ValueError):
    """An index, channel or value is outside the accepted range."""


class TransferError(ControlSurfaceError):
    """A transfer completed only partially."""


class StorageError(ControlSurfaceError):
    """Persistent storage cannot hold or accept the requested data."""