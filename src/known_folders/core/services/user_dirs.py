"""Reader for the freedesktop.org ``user-dirs.dirs`` file.

The file is a shell fragment written by xdg-user-dirs-update::

    XDG_DESKTOP_DIR="$HOME/Desktop"
    XDG_DOWNLOAD_DIR="/mnt/data/Downloads"

Parsing follows the reference ``xdg-user-dir`` lookup rather than a shell:

- lines are read into a fixed 511-byte buffer; the tail of an overlong line is
  dropped and the retained prefix is parsed as if it were the whole line
- a value is either ``$HOME/...`` or an absolute path, anything else is ignored
- ``\\X`` inside the quotes stands for ``X``
- the last matching assignment wins
"""

from __future__ import annotations

import sys
from typing import BinaryIO, Iterator, Optional

from known_folders.core.services.environment import Environment
from known_folders.core.services.error_codes import ErrorCode, KnownFoldersError
from known_folders.core.services.observability import log_debug

USER_DIRS_FILENAME = "user-dirs.dirs"

#: Data bytes kept per line; matches a 512-byte buffer with room for the newline.
LINE_BUFFER_SIZE = 511

USER_DIR_NAMES = frozenset(
    {
        "XDG_DESKTOP_DIR",
        "XDG_DOWNLOAD_DIR",
        "XDG_TEMPLATES_DIR",
        "XDG_PUBLICSHARE_DIR",
        "XDG_DOCUMENTS_DIR",
        "XDG_MUSIC_DIR",
        "XDG_PICTURES_DIR",
        "XDG_VIDEOS_DIR",
    }
)

_BLANKS = b" \t"
_HOME_PREFIX = b"$HOME/"


def _discard_rest_of_line(stream: BinaryIO) -> None:
    while True:
        chunk = stream.readline(4096)
        if not chunk or chunk.endswith(b"\n"):
            return


def iter_bounded_lines(stream: BinaryIO, limit: int = LINE_BUFFER_SIZE) -> Iterator[bytes]:
    """Yield lines without their newline, each cut to at most ``limit`` bytes.

    A last line lacking a trailing newline is yielded like any other.
    """
    while True:
        line = stream.readline(limit + 1)
        if not line:
            return
        if line.endswith(b"\n"):
            yield line[:-1]
        elif len(line) <= limit:
            yield line
        else:
            _discard_rest_of_line(stream)
            yield line[:limit]


def parse_line(line: bytes, name: bytes, home: Optional[bytes]) -> Optional[bytes]:
    """Return the decoded value of ``name="..."`` on this line, or None."""
    line = line.split(b"\0", 1)[0]
    rest = line.lstrip(_BLANKS)
    if not rest.startswith(name):
        return None
    rest = rest[len(name):].lstrip(_BLANKS)
    if not rest.startswith(b"="):
        return None
    rest = rest[1:].lstrip(_BLANKS)
    if not rest.startswith(b'"'):
        return None
    rest = rest[1:]

    if rest.startswith(_HOME_PREFIX):
        if home is None:
            return None
        value = bytearray(home)
        value += b"/"
        rest = rest[len(_HOME_PREFIX):]
    elif rest.startswith(b"/"):
        value = bytearray()
    else:
        return None

    i = 0
    end = len(rest)
    while i < end:
        ch = rest[i]
        if ch == 0x22:  # closing quote
            break
        if ch == 0x5C and i + 1 < end:  # backslash escape
            i += 1
            ch = rest[i]
        value.append(ch)
        i += 1
    return bytes(value)


def parse_user_dirs(stream: BinaryIO, name: str, home: Optional[str]) -> Optional[str]:
    """Scan an open user-dirs.dirs stream for the last valid ``name`` assignment."""
    raw_name = name.encode("ascii")
    encoding = sys.getfilesystemencoding()
    raw_home = home.encode(encoding, "surrogateescape") if home is not None else None
    found: Optional[bytes] = None
    try:
        for lineno, line in enumerate(iter_bounded_lines(stream), start=1):
            value = parse_line(line, raw_name, raw_home)
            if value is not None:
                found = value
            elif line.lstrip(_BLANKS).startswith(raw_name):
                log_debug("user_dirs_line_skipped", {"name": name, "line": lineno})
    except OSError as exc:
        raise KnownFoldersError(
            code=ErrorCode.PARSE_ERROR,
            message=f"Failed to read {USER_DIRS_FILENAME}: {exc}",
            details={"name": name},
        ) from exc
    if found is None:
        return None
    return found.decode(encoding, "surrogateescape")


def user_dirs_directory(environment: Environment) -> Optional[str]:
    """Directory holding user-dirs.dirs: $XDG_CONFIG_HOME, else $HOME/.config."""
    config_home = environment.get_nonempty("XDG_CONFIG_HOME")
    if config_home is not None:
        return config_home
    home = environment.get_nonempty("HOME")
    if home is None:
        return None
    return home + "/.config"


def lookup_user_dir(name: str, environment: Environment) -> Optional[str]:
    """Look ``name`` (an XDG_*_DIR token) up in the user's user-dirs.dirs.

    Returns None when the file or a valid assignment is missing. Errors opening
    the file other than "not found" propagate.
    """
    if name not in USER_DIR_NAMES:
        raise ValueError(f"not a user directory variable: {name}")

    directory = user_dirs_directory(environment)
    if directory is None:
        return None

    try:
        stream = environment.open_file(directory, USER_DIRS_FILENAME)
    except (FileNotFoundError, NotADirectoryError):
        return None

    with stream:
        return parse_user_dirs(stream, name, environment.get_nonempty("HOME"))
