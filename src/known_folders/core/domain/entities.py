from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from known_folders.core.services.error_codes import ErrorCode, KnownFoldersError


class KnownFolder(str, Enum):
    HOME = "home"
    DOCUMENTS = "documents"
    PICTURES = "pictures"
    MUSIC = "music"
    VIDEOS = "videos"
    TEMPLATES = "templates"
    DESKTOP = "desktop"
    DOWNLOADS = "downloads"
    PUBLIC = "public"
    FONTS = "fonts"
    APP_MENU = "app-menu"
    CACHE = "cache"
    ROAMING_CONFIGURATION = "roaming-configuration"
    LOCAL_CONFIGURATION = "local-configuration"
    GLOBAL_CONFIGURATION = "global-configuration"
    DATA = "data"
    LOGS = "logs"
    RUNTIME = "runtime"
    EXECUTABLE_DIR = "executable-dir"

    @classmethod
    def parse(cls, text: str) -> "KnownFolder":
        """Accept 'app-menu', 'app_menu' or 'APP_MENU' alike."""
        needle = str(text).strip().lower().replace("_", "-")
        for folder in cls:
            if folder.value == needle:
                return folder
        raise KnownFoldersError(
            code=ErrorCode.CONFIG_INVALID,
            message=f"Unknown folder: {text}",
            details={"valid_folders": [f.value for f in cls]},
        )


class Platform(str, Enum):
    WINDOWS = "windows"
    MACOS = "macos"
    XDG = "xdg"

    @classmethod
    def current(cls) -> "Platform":
        if sys.platform == "win32":
            return cls.WINDOWS
        if sys.platform == "darwin":
            return cls.MACOS
        return cls.XDG


@dataclass(frozen=True)
class ByIdentifier:
    """Windows known-folder GUID, e.g. '{B4BFCC3A-DB2C-424C-B029-7FE99A87C641}'."""

    guid: str


@dataclass(frozen=True)
class ByEnvironment:
    name: str
    subdir: Optional[str] = None


@dataclass(frozen=True)
class ByFixedSuffix:
    """Path below $HOME; a suffix starting with '/' is an absolute path."""

    suffix: str


@dataclass(frozen=True)
class XdgFolder:
    """XDG lookup rule.

    Attributes:
        env: Variable holding the folder (XDG_*_HOME, XDG_*_DIR or HOME).
        user_dir: True when the variable may also be set in user-dirs.dirs.
        suffix: Appended to a value found in the environment or user-dirs.dirs.
        default: Fallback; a leading '~' stands for $HOME.
    """

    env: str
    user_dir: bool = False
    suffix: Optional[str] = None
    default: Optional[str] = None


FolderSpec = Union[ByIdentifier, ByEnvironment, ByFixedSuffix, XdgFolder]
