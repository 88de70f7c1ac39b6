"""
Exception types for Accio.

Per-directory enumeration failures are never raised to callers; they are
absorbed by the walker and reported through ``SearchResults.errors``.
"""

from pathlib import Path
from typing import Union


class FinderError(Exception):
    """Base class for all errors raised by Accio."""
    pass


class InvalidRootError(FinderError):
    """Raised when the search root does not exist or is not a directory."""

    def __init__(self, path: Union[str, Path]):
        self.path = str(path)
        super().__init__(f"The path '{self.path}' is not a valid directory.")


class ConfigurationError(FinderError):
    """Raised when configuration parsing or validation fails."""
    pass
