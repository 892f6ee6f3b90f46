"""Access to environment variables and configuration files.

The resolver never touches ``os.environ`` or the filesystem directly; it asks
an Environment. ``OsEnvironment`` is the real process, ``StaticEnvironment``
is an in-memory stand-in that refuses reads of keys it was not told about.
"""

from __future__ import annotations

import io
import os
import posixpath
from typing import BinaryIO, Dict, Mapping, Optional, Union


class UndeclaredEnvironmentAccess(AssertionError):
    """A StaticEnvironment was asked for a key it does not declare."""


class _Forbidden:
    def __repr__(self) -> str:
        return "FORBIDDEN"


#: Marks a StaticEnvironment key that must never be read.
FORBIDDEN = _Forbidden()


class Environment:
    """Capability interface: read a variable, open a file."""

    def get(self, name: str) -> Optional[str]:
        raise NotImplementedError

    def open_file(self, directory: str, name: str) -> BinaryIO:
        """Open ``directory/name`` for binary reading.

        Raises FileNotFoundError when the file does not exist.
        """
        raise NotImplementedError

    def get_nonempty(self, name: str) -> Optional[str]:
        """Like get(), but an empty value counts as unset."""
        value = self.get(name)
        if not value:
            return None
        return value


class OsEnvironment(Environment):
    def get(self, name: str) -> Optional[str]:
        return os.environ.get(name)

    def open_file(self, directory: str, name: str) -> BinaryIO:
        return open(os.path.join(directory, name), "rb")


EnvValue = Union[Optional[str], _Forbidden]


class StaticEnvironment(Environment):
    """In-memory environment for deterministic resolution.

    Args:
        variables: Declared variables. ``None`` declares a variable as unset,
            ``FORBIDDEN`` declares that reading it is a bug.
        files: File contents keyed by full POSIX path.
    """

    def __init__(
        self,
        variables: Optional[Mapping[str, EnvValue]] = None,
        files: Optional[Mapping[str, Union[bytes, str]]] = None,
    ) -> None:
        self.variables: Dict[str, EnvValue] = dict(variables or {})
        self.files: Dict[str, bytes] = {
            path: content.encode("utf-8") if isinstance(content, str) else content
            for path, content in (files or {}).items()
        }
        self.reads: list[str] = []

    def get(self, name: str) -> Optional[str]:
        if name not in self.variables:
            raise UndeclaredEnvironmentAccess(f"environment variable {name!r} was not declared")
        value = self.variables[name]
        if value is FORBIDDEN:
            raise UndeclaredEnvironmentAccess(f"environment variable {name!r} must not be read")
        self.reads.append(name)
        return value  # type: ignore[return-value]

    def open_file(self, directory: str, name: str) -> BinaryIO:
        path = posixpath.join(directory, name)
        try:
            content = self.files[path]
        except KeyError:
            raise FileNotFoundError(path) from None
        return io.BytesIO(content)
