"""Where each known folder lives on each platform.

``None`` means the folder has no location on that platform. EXECUTABLE_DIR is
resolved without a table and is absent from all of them.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional

from known_folders.core.domain.entities import (
    ByEnvironment,
    ByFixedSuffix,
    ByIdentifier,
    FolderSpec,
    KnownFolder,
    Platform,
    XdgFolder,
)

# https://learn.microsoft.com/windows/win32/shell/knownfolderid
WINDOWS_FOLDERS: Dict[KnownFolder, Optional[FolderSpec]] = {
    KnownFolder.HOME: ByIdentifier("{5E6C858F-0E22-4760-9AFE-EA3317B67173}"),  # FOLDERID_Profile
    KnownFolder.DOCUMENTS: ByIdentifier("{FDD39AD0-238F-46AF-ADB4-6C85480369C7}"),
    KnownFolder.PICTURES: ByIdentifier("{33E28130-4E1E-4676-835A-98395C3BC3BB}"),
    KnownFolder.MUSIC: ByIdentifier("{4BD8D571-6D19-48D3-BE97-422220080E43}"),
    KnownFolder.VIDEOS: ByIdentifier("{18989B1D-99B5-455B-841C-AB7C74E4DDFC}"),
    KnownFolder.TEMPLATES: ByIdentifier("{A63293E8-664E-48DB-A079-DF759E0509F7}"),
    KnownFolder.DESKTOP: ByIdentifier("{B4BFCC3A-DB2C-424C-B029-7FE99A87C641}"),
    KnownFolder.DOWNLOADS: ByIdentifier("{374DE290-123F-4565-9164-39C4925E467B}"),
    KnownFolder.PUBLIC: ByIdentifier("{DFDF76A2-C82A-4D63-906A-5644AC457385}"),
    KnownFolder.FONTS: ByIdentifier("{FD228CB7-AE11-4AE3-864C-16F3910AB8FE}"),
    KnownFolder.APP_MENU: ByIdentifier("{625B53C3-AB48-4EC1-BA1F-A1EF4146FC19}"),  # FOLDERID_StartMenu
    KnownFolder.CACHE: ByEnvironment("LOCALAPPDATA", "Temp"),
    KnownFolder.ROAMING_CONFIGURATION: ByIdentifier("{3EB685DB-65F9-4CF6-A03A-E3EF65729F3D}"),
    KnownFolder.LOCAL_CONFIGURATION: ByIdentifier("{F1B32785-6FBA-4FCF-9D55-7B8E7F157091}"),
    KnownFolder.GLOBAL_CONFIGURATION: ByIdentifier("{62AB5D82-FDC1-4DC3-A9DD-070D1D495D97}"),  # FOLDERID_ProgramData
    KnownFolder.DATA: ByEnvironment("APPDATA"),
    KnownFolder.LOGS: ByEnvironment("LOCALAPPDATA", "Temp"),
    KnownFolder.RUNTIME: None,
}

MACOS_FOLDERS: Dict[KnownFolder, Optional[FolderSpec]] = {
    KnownFolder.HOME: ByFixedSuffix(""),
    KnownFolder.DOCUMENTS: ByFixedSuffix("Documents"),
    KnownFolder.PICTURES: ByFixedSuffix("Pictures"),
    KnownFolder.MUSIC: ByFixedSuffix("Music"),
    KnownFolder.VIDEOS: ByFixedSuffix("Movies"),
    KnownFolder.TEMPLATES: None,
    KnownFolder.DESKTOP: ByFixedSuffix("Desktop"),
    KnownFolder.DOWNLOADS: ByFixedSuffix("Downloads"),
    KnownFolder.PUBLIC: ByFixedSuffix("Public"),
    KnownFolder.FONTS: ByFixedSuffix("Library/Fonts"),
    KnownFolder.APP_MENU: ByFixedSuffix("Applications"),
    KnownFolder.CACHE: ByFixedSuffix("Library/Caches"),
    KnownFolder.ROAMING_CONFIGURATION: ByFixedSuffix("Library/Preferences"),
    KnownFolder.LOCAL_CONFIGURATION: ByFixedSuffix("Library/Application Support"),
    KnownFolder.GLOBAL_CONFIGURATION: ByFixedSuffix("/Library/Preferences"),
    KnownFolder.DATA: ByFixedSuffix("Library/Application Support"),
    KnownFolder.LOGS: ByFixedSuffix("Library/Logs"),
    KnownFolder.RUNTIME: ByFixedSuffix("Library/Application Support"),
}

XDG_FOLDERS: Dict[KnownFolder, Optional[FolderSpec]] = {
    KnownFolder.HOME: XdgFolder("HOME"),
    KnownFolder.DOCUMENTS: XdgFolder("XDG_DOCUMENTS_DIR", user_dir=True, default="~/Documents"),
    KnownFolder.PICTURES: XdgFolder("XDG_PICTURES_DIR", user_dir=True, default="~/Pictures"),
    KnownFolder.MUSIC: XdgFolder("XDG_MUSIC_DIR", user_dir=True, default="~/Music"),
    KnownFolder.VIDEOS: XdgFolder("XDG_VIDEOS_DIR", user_dir=True, default="~/Videos"),
    KnownFolder.TEMPLATES: XdgFolder("XDG_TEMPLATES_DIR", user_dir=True, default="~/Templates"),
    KnownFolder.DESKTOP: XdgFolder("XDG_DESKTOP_DIR", user_dir=True, default="~/Desktop"),
    KnownFolder.DOWNLOADS: XdgFolder("XDG_DOWNLOAD_DIR", user_dir=True, default="~/Downloads"),
    KnownFolder.PUBLIC: XdgFolder("XDG_PUBLICSHARE_DIR", user_dir=True, default="~/Public"),
    KnownFolder.FONTS: XdgFolder("XDG_DATA_HOME", suffix="/fonts", default="~/.local/share/fonts"),
    KnownFolder.APP_MENU: XdgFolder(
        "XDG_DATA_HOME", suffix="/applications", default="~/.local/share/applications"
    ),
    KnownFolder.CACHE: XdgFolder("XDG_CACHE_HOME", default="~/.cache"),
    KnownFolder.ROAMING_CONFIGURATION: XdgFolder("XDG_CONFIG_HOME", default="~/.config"),
    KnownFolder.LOCAL_CONFIGURATION: XdgFolder("XDG_CONFIG_HOME", default="~/.config"),
    KnownFolder.GLOBAL_CONFIGURATION: XdgFolder("XDG_CONFIG_DIRS", default="/etc"),
    KnownFolder.DATA: XdgFolder("XDG_DATA_HOME", default="~/.local/share"),
    KnownFolder.LOGS: XdgFolder("XDG_STATE_HOME", default="~/.local/state"),
    KnownFolder.RUNTIME: XdgFolder("XDG_RUNTIME_DIR"),
}

PLATFORM_FOLDERS: Mapping[Platform, Mapping[KnownFolder, Optional[FolderSpec]]] = {
    Platform.WINDOWS: WINDOWS_FOLDERS,
    Platform.MACOS: MACOS_FOLDERS,
    Platform.XDG: XDG_FOLDERS,
}

TABLE_FOLDERS = frozenset(f for f in KnownFolder if f is not KnownFolder.EXECUTABLE_DIR)


def _check_complete() -> None:
    for platform, table in PLATFORM_FOLDERS.items():
        missing = TABLE_FOLDERS - set(table)
        extra = set(table) - TABLE_FOLDERS
        if missing or extra:
            raise RuntimeError(
                f"{platform.value} folder table is inconsistent: "
                f"missing={sorted(f.value for f in missing)} extra={sorted(f.value for f in extra)}"
            )


_check_complete()


def folder_spec(platform: Platform, folder: KnownFolder) -> Optional[FolderSpec]:
    return PLATFORM_FOLDERS[platform][folder]
