class DefaultsError(Exception):
    """Base class for pydefaults errors."""


class UnsupportedValueError(DefaultsError, TypeError):
    """Raised when a value has no native representation in the store."""


class StoreLoadError(DefaultsError):
    """Raised when a store fails to parse its file."""


class StoreWriteError(DefaultsError):
    """Raised when a store fails to persist its contents."""


class ArchiveError(DefaultsError):
    """Raised when an object cannot be archived or unarchived."""
