from __future__ import annotations


class TrackWorkError(Exception):
    """Base class for failures reported to the user with a non-zero exit."""

    exit_code = 1


class ConfigError(TrackWorkError):
    """The storage path cannot be resolved or prepared."""


class StateError(TrackWorkError):
    """The requested transition does not fit the current open/closed state."""


class StorageError(TrackWorkError):
    """The storage file cannot be read, written or parsed."""
