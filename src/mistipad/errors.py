"""Exception types shared across Mistipad."""


class MistipadError(Exception):
    """Base class for Mistipad errors."""


class StorageError(MistipadError):
    """A blob or file backend failed to read or write."""

    def __init__(self, message: str, name: str = ""):
        super().__init__(message)
        self.name = name
