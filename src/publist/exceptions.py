"""Custom exception types for publist operations."""


class PublistError(Exception):
    """Base exception for all publist operations."""


class FileOperationError(PublistError):
    """Raised when file I/O operations fail."""


class InvalidDataError(PublistError):
    """Raised when source or configuration data is invalid."""
