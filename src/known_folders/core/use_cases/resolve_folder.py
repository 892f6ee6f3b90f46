from __future__ import annotations

import ntpath
import os
import posixpath
import sys
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Tuple

from known_folders.core.domain.entities import (
    ByEnvironment,
    ByFixedSuffix,
    ByIdentifier,
    FolderSpec,
    KnownFolder,
    Platform,
    XdgFolder,
)
from known_folders.core.services.environment import Environment, OsEnvironment
from known_folders.core.services.folder_specs import XDG_FOLDERS, folder_spec
from known_folders.core.services.observability import log_debug
from known_folders.core.services.settings import Config, get_default_config
from known_folders.core.services.user_dirs import lookup_user_dir
from known_folders.core.services.windows_api import get_known_folder_path

KnownFolderLookup = Callable[[str], Optional[str]]

# (path, source); source names the strategy that produced the path
_Resolution = Tuple[Optional[str], Optional[str]]


@dataclass(frozen=True)
class ResolveResult:
    folder: KnownFolder
    path: Optional[str]
    source: Optional[str] = None


def executable_dir() -> Optional[str]:
    """Directory of the running executable, or None if the runtime can't tell."""
    executable = sys.executable
    if not executable:
        return None
    return os.path.dirname(os.path.realpath(executable))


class ResolveFolderUseCase:
    """Turn a KnownFolder into a path for one platform and configuration.

    ``environment`` answers variable and file reads; ``known_folder_path``
    stands in for the Windows shell API.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        environment: Optional[Environment] = None,
        platform: Optional[Platform] = None,
        known_folder_path: Optional[KnownFolderLookup] = None,
    ):
        self._config = config if config is not None else get_default_config()
        self._env = environment if environment is not None else OsEnvironment()
        self._platform = platform if platform is not None else Platform.current()
        self._known_folder_path = known_folder_path or get_known_folder_path

    def execute(self, folder: KnownFolder) -> ResolveResult:
        if folder is KnownFolder.EXECUTABLE_DIR:
            path, source = executable_dir(), "executable"
        elif self._platform is Platform.WINDOWS:
            path, source = self._resolve_windows(folder)
        elif self._platform is Platform.MACOS and not self._config.xdg_on_mac:
            path, source = self._resolve_macos(folder)
        else:
            path, source = self._resolve_xdg(folder)

        log_debug(
            "folder_resolved",
            {
                "folder": folder.value,
                "platform": self._platform.value,
                "path": path,
                "source": source,
            },
        )
        return ResolveResult(folder=folder, path=path, source=source if path is not None else None)

    def resolve_xdg(self, folder: KnownFolder) -> Optional[str]:
        """XDG rules regardless of the platform this use case targets."""
        return self._resolve_xdg(folder)[0]

    def _resolve_windows(self, folder: KnownFolder) -> _Resolution:
        spec = folder_spec(Platform.WINDOWS, folder)
        if spec is None:
            return None, None
        if isinstance(spec, ByIdentifier):
            return self._known_folder_path(spec.guid), "known_folder_api"
        if isinstance(spec, ByEnvironment):
            value = self._env.get_nonempty(spec.name)
            if value is None:
                return None, None
            if spec.subdir:
                value = ntpath.join(value, spec.subdir)
            return value, "env"
        raise TypeError(f"unexpected Windows folder spec: {spec!r}")

    def _resolve_macos(self, folder: KnownFolder) -> _Resolution:
        spec = folder_spec(Platform.MACOS, folder)
        if spec is None:
            return None, None
        if not isinstance(spec, ByFixedSuffix):
            raise TypeError(f"unexpected macOS folder spec: {spec!r}")
        if spec.suffix.startswith("/"):
            return spec.suffix, "fixed"

        home = self._env.get_nonempty("HOME")
        if home is None:
            return None, None
        if not spec.suffix:
            return home, "env"
        return posixpath.join(home, spec.suffix), "fixed"

    def _resolve_xdg(self, folder: KnownFolder) -> _Resolution:
        spec: Optional[FolderSpec] = XDG_FOLDERS.get(folder)
        if spec is None:
            return None, None
        if not isinstance(spec, XdgFolder):
            raise TypeError(f"unexpected XDG folder spec: {spec!r}")

        if folder is KnownFolder.HOME or not self._config.xdg_force_default:
            source = "env"
            base = self._env.get_nonempty(spec.env)
            if base is None and spec.user_dir:
                source = "user_dirs"
                base = lookup_user_dir(spec.env, self._env)
            if base is not None and folder is KnownFolder.GLOBAL_CONFIGURATION:
                base = base.split(":", 1)[0] or None
            if base is not None:
                if spec.suffix:
                    base += spec.suffix
                return base, source

        return self._xdg_default(spec), "default"

    def _xdg_default(self, spec: XdgFolder) -> Optional[str]:
        if spec.default is None:
            return None
        if not spec.default.startswith("~"):
            return spec.default
        home = self._env.get_nonempty("HOME")
        if home is None:
            return None
        return home + spec.default[1:]


def get_path(
    folder: KnownFolder,
    *,
    config: Optional[Config] = None,
    environment: Optional[Environment] = None,
    platform: Optional[Platform] = None,
) -> Optional[str]:
    """Return the path of ``folder`` on this system, or None when it has none."""
    use_case = ResolveFolderUseCase(config=config, environment=environment, platform=platform)
    return use_case.execute(folder).path


def get_paths(
    folders: Optional[Iterable[KnownFolder]] = None,
    *,
    config: Optional[Config] = None,
    environment: Optional[Environment] = None,
    platform: Optional[Platform] = None,
) -> Dict[KnownFolder, Optional[str]]:
    """Resolve several folders (all of them by default) against one environment."""
    use_case = ResolveFolderUseCase(config=config, environment=environment, platform=platform)
    targets = list(KnownFolder) if folders is None else list(folders)
    return {folder: use_case.execute(folder).path for folder in targets}
