"""Exception types raised while resolving component dependencies."""

from pathlib import Path
from typing import List, Optional, Sequence, Union


class DependencyError(Exception):
    """
    Base class for all dependency resolution errors.

    Carries the (best-effort) path of the file being processed so callers
    can report which file failed.
    """

    def __init__(self, message: str, file_path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.message = message
        self.file_path = file_path


class InvalidInputError(DependencyError):
    """A required argument is missing, empty, or malformed."""


class ConfigError(InvalidInputError):
    """An alias configuration could not be read or understood."""


class NotFoundError(DependencyError):
    """A file or resolved path does not exist."""


class ParseError(DependencyError):
    """A component file has malformed section boundaries."""

    def __init__(self, file_path: Union[str, Path], messages: Sequence[str]):
        self.messages: List[str] = list(messages)
        detail = ", ".join(self.messages) or "unknown parse error"
        super().__init__(f"Component parse error ({file_path}): {detail}", file_path)


class InternalError(DependencyError):
    """An unexpected failure during extraction or resolution."""
