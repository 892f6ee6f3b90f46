import sys

import pytest

from known_folders.core.domain.entities import ByEnvironment, KnownFolder, Platform, XdgFolder
from known_folders.core.services.error_codes import ErrorCode, KnownFoldersError


@pytest.mark.parametrize("text", ["app-menu", "app_menu", "APP_MENU", " App-Menu "])
def test_known_folder_parse_spellings(text):
    assert KnownFolder.parse(text) is KnownFolder.APP_MENU


def test_known_folder_parse_unknown():
    with pytest.raises(KnownFoldersError) as exc_info:
        KnownFolder.parse("trash")
    assert exc_info.value.code == ErrorCode.CONFIG_INVALID
    assert "home" in exc_info.value.details["valid_folders"]


def test_known_folder_members():
    assert len(KnownFolder) == 19
    assert KnownFolder("executable-dir") is KnownFolder.EXECUTABLE_DIR


@pytest.mark.parametrize(
    "sys_platform, expected",
    [("win32", Platform.WINDOWS), ("darwin", Platform.MACOS), ("linux", Platform.XDG), ("freebsd14", Platform.XDG)],
)
def test_platform_current(monkeypatch, sys_platform, expected):
    monkeypatch.setattr(sys, "platform", sys_platform)
    assert Platform.current() is expected


def test_specs_are_frozen():
    spec = XdgFolder("XDG_CACHE_HOME", default="~/.cache")
    with pytest.raises(AttributeError):
        spec.default = "/tmp"  # type: ignore[misc]
    assert ByEnvironment("APPDATA").subdir is None
