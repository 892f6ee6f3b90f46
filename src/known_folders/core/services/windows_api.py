"""ctypes binding for SHGetKnownFolderPath.

Only usable on Windows; elsewhere every lookup reports "no such folder".
"""

from __future__ import annotations

import ctypes
import sys
from typing import Optional

from known_folders.core.services.error_codes import KnownFoldersOutOfMemoryError
from known_folders.core.services.observability import log_debug

S_OK = 0
E_OUTOFMEMORY = 0x8007000E
KF_FLAG_DEFAULT = 0


class GUID(ctypes.Structure):
    _fields_ = [
        ("Data1", ctypes.c_uint32),
        ("Data2", ctypes.c_uint16),
        ("Data3", ctypes.c_uint16),
        ("Data4", ctypes.c_ubyte * 8),
    ]


if sys.platform == "win32":
    _shell32 = ctypes.WinDLL("shell32", use_last_error=True)
    _shell32.SHGetKnownFolderPath.argtypes = [
        ctypes.POINTER(GUID),  # REFKNOWNFOLDERID rfid
        ctypes.c_uint32,  # DWORD dwFlags
        ctypes.c_void_p,  # HANDLE hToken
        ctypes.POINTER(ctypes.c_void_p),  # PWSTR *ppszPath
    ]
    _shell32.SHGetKnownFolderPath.restype = ctypes.c_long

    _ole32 = ctypes.WinDLL("ole32", use_last_error=True)
    _ole32.CLSIDFromString.argtypes = [ctypes.c_wchar_p, ctypes.POINTER(GUID)]
    _ole32.CLSIDFromString.restype = ctypes.c_long
    _ole32.CoTaskMemFree.argtypes = [ctypes.c_void_p]
    _ole32.CoTaskMemFree.restype = None
else:
    _shell32 = None
    _ole32 = None


def _hresult(value: int) -> int:
    return value & 0xFFFFFFFF


def transcode_wide(value: str) -> Optional[str]:
    """Return ``value`` if it is valid UTF-16 text, None if it holds lone surrogates."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return None
    return value


def check_hresult(hresult: int, guid: str) -> bool:
    """True on success, False for "no such folder"; raises on out-of-memory."""
    code = _hresult(hresult)
    if code == S_OK:
        return True
    if code == E_OUTOFMEMORY:
        raise KnownFoldersOutOfMemoryError(
            message="SHGetKnownFolderPath ran out of memory",
            details={"guid": guid},
        )
    log_debug("known_folder_api_failed", {"guid": guid, "hresult": f"0x{code:08X}"})
    return False


def get_known_folder_path(guid: str) -> Optional[str]:
    """Resolve a known-folder GUID through the shell, or None."""
    if _shell32 is None or _ole32 is None:
        return None

    folder_id = GUID()
    if not check_hresult(_ole32.CLSIDFromString(guid, ctypes.byref(folder_id)), guid):
        return None

    buffer = ctypes.c_void_p()
    hresult = _shell32.SHGetKnownFolderPath(
        ctypes.byref(folder_id), KF_FLAG_DEFAULT, None, ctypes.byref(buffer)
    )
    try:
        if not check_hresult(hresult, guid):
            return None
        return transcode_wide(ctypes.wstring_at(buffer.value))
    finally:
        # the shell may allocate even on failure
        _ole32.CoTaskMemFree(buffer)
