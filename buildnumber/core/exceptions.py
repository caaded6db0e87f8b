"""
Exceptions raised by simple-buildnumber.

Every error is fatal to the current goal execution. The host build step is
expected to abort with the exception's message.
"""


class BuildNumberError(Exception):
    """Base class for all simple-buildnumber errors."""


class ConfigurationError(BuildNumberError):
    """A required setting is absent or has an invalid value."""


class ParseError(BuildNumberError):
    """Stored counter or descriptor version text does not have the expected shape."""


class StorageError(BuildNumberError):
    """A file could not be created, read or written."""

    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.path = path
