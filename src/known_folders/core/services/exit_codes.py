"""Exit code mapping for the known-folders CLI."""

from __future__ import annotations

import os

from known_folders.core.services.error_codes import ErrorCode

EX_SUCCESS = 0
EX_UNAVAILABLE_FOLDER = 1
EX_USAGE = getattr(os, "EX_USAGE", 64)
EX_DATAERR = getattr(os, "EX_DATAERR", 65)
EX_SOFTWARE = getattr(os, "EX_SOFTWARE", 70)
EX_OSERR = getattr(os, "EX_OSERR", 71)
EX_CONFIG = getattr(os, "EX_CONFIG", 78)


def exit_code_for_error(error_code: ErrorCode) -> int:
    """Map ErrorCode to a process exit status."""
    mapping = {
        ErrorCode.FOLDER_UNAVAILABLE: EX_UNAVAILABLE_FOLDER,
        ErrorCode.CONFIG_INVALID: EX_CONFIG,
        ErrorCode.CONFIG_LOCKED: EX_USAGE,
        ErrorCode.PARSE_ERROR: EX_DATAERR,
        ErrorCode.OUT_OF_MEMORY: EX_OSERR,
        ErrorCode.UNKNOWN_ERROR: EX_SOFTWARE,
    }
    return mapping.get(error_code, EX_SOFTWARE)
