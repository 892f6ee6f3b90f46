"""Error codes and exception handling for known-folders.

This module defines the ErrorCode enum and the KnownFoldersError exception
class. A folder that has no location on the current system is reported as
``None`` by the resolver, not as an error.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Library-wide error code enumeration.

    Categories:
        Resolution: OUT_OF_MEMORY, PARSE_ERROR
        Configuration: CONFIG_INVALID, CONFIG_LOCKED
        CLI-only: FOLDER_UNAVAILABLE, UNKNOWN_ERROR
    """

    OUT_OF_MEMORY = "OUT_OF_MEMORY"
    PARSE_ERROR = "PARSE_ERROR"
    CONFIG_INVALID = "CONFIG_INVALID"
    CONFIG_LOCKED = "CONFIG_LOCKED"
    FOLDER_UNAVAILABLE = "FOLDER_UNAVAILABLE"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class KnownFoldersError(Exception):
    """Base exception for known-folders errors.

    Wraps an ErrorCode with a human-readable message and optional structured
    details for machine-parseable error responses.

    Attributes:
        code: The ErrorCode enum value for this error.
        message: Human-readable error description.
        details: Optional dictionary of additional structured context.

    Example:
        >>> error = KnownFoldersError(
        ...     code=ErrorCode.CONFIG_INVALID,
        ...     message="Unknown folder: trash",
        ...     details={"valid_folders": ["home", "desktop"]}
        ... )
        >>> error.code
        <ErrorCode.CONFIG_INVALID: 'CONFIG_INVALID'>
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details
        super().__init__(message)

    def __repr__(self) -> str:
        return f"KnownFoldersError(code={self.code.value!r}, message={self.message!r}, details={self.details!r})"


class KnownFoldersOutOfMemoryError(KnownFoldersError, MemoryError):
    """Allocation failure reported by the platform.

    Catchable both as KnownFoldersError (code OUT_OF_MEMORY) and as the
    builtin MemoryError.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            code=ErrorCode.OUT_OF_MEMORY, message=message, details=details or {}
        )
