"""Resolve platform known folders (home, desktop, cache, ...) to paths.

    >>> from known_folders import KnownFolder, get_path
    >>> get_path(KnownFolder.DOWNLOADS)  # doctest: +SKIP
    '/home/jane/Downloads'

A folder that has no location on the current system resolves to ``None``.
"""

from known_folders.core.domain.entities import KnownFolder, Platform
from known_folders.core.services.environment import (
    FORBIDDEN,
    Environment,
    OsEnvironment,
    StaticEnvironment,
    UndeclaredEnvironmentAccess,
)
from known_folders.core.services.error_codes import (
    ErrorCode,
    KnownFoldersError,
    KnownFoldersOutOfMemoryError,
)
from known_folders.core.services.settings import (
    Config,
    configure,
    get_default_config,
    load_config_file,
)
from known_folders.core.use_cases.open_folder import FolderHandle, open_folder
from known_folders.core.use_cases.resolve_folder import get_path, get_paths

__all__ = [
    "Config",
    "Environment",
    "ErrorCode",
    "FORBIDDEN",
    "FolderHandle",
    "KnownFolder",
    "KnownFoldersError",
    "KnownFoldersOutOfMemoryError",
    "OsEnvironment",
    "Platform",
    "StaticEnvironment",
    "UndeclaredEnvironmentAccess",
    "configure",
    "get_default_config",
    "get_path",
    "get_paths",
    "load_config_file",
    "open_folder",
]
