from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import Iterator, Optional

from known_folders.core.domain.entities import KnownFolder
from known_folders.core.use_cases.resolve_folder import ResolveFolderUseCase

_O_DIRECTORY = getattr(os, "O_DIRECTORY", None)


class FolderHandle:
    """An open directory. Use as a context manager or call close()."""

    def __init__(self, path: Path, fd: Optional[int] = None):
        self.path = path
        self._fd = fd
        self.closed = False

    def fileno(self) -> int:
        if self._fd is None:
            raise OSError("directory handles are not supported on this platform")
        return self._fd

    def scandir(self) -> Iterator[os.DirEntry]:
        if self._fd is not None and os.scandir in os.supports_fd:
            return os.scandir(self._fd)
        return os.scandir(self.path)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._fd is not None:
            os.close(self._fd)

    def __enter__(self) -> "FolderHandle":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"FolderHandle(path={str(self.path)!r}, closed={self.closed})"


def open_directory(path: Path) -> FolderHandle:
    """Open ``path`` as a directory; OSError subclasses propagate."""
    if _O_DIRECTORY is not None:
        fd = os.open(path, os.O_RDONLY | _O_DIRECTORY)
        return FolderHandle(path, fd)
    if not stat.S_ISDIR(os.stat(path).st_mode):
        raise NotADirectoryError(str(path))
    return FolderHandle(path)


class OpenFolderUseCase:
    def __init__(self, resolver: Optional[ResolveFolderUseCase] = None):
        self._resolver = resolver or ResolveFolderUseCase()

    def execute(self, folder: KnownFolder) -> Optional[FolderHandle]:
        """Open the folder, or None when it has no path or does not exist."""
        path = self._resolver.execute(folder).path
        if path is None:
            return None
        try:
            return open_directory(Path(path))
        except FileNotFoundError:
            return None


def open_folder(folder: KnownFolder, **resolver_options) -> Optional[FolderHandle]:
    """Resolve ``folder`` and open it. Keyword arguments go to ResolveFolderUseCase."""
    return OpenFolderUseCase(ResolveFolderUseCase(**resolver_options)).execute(folder)
