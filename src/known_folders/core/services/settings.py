from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from jsonschema import Draft7Validator

from known_folders.core.services.error_codes import ErrorCode, KnownFoldersError
from known_folders.core.services.observability import log_debug

ENV_XDG_FORCE_DEFAULT = "KNOWN_FOLDERS_XDG_FORCE_DEFAULT"
ENV_XDG_ON_MAC = "KNOWN_FOLDERS_XDG_ON_MAC"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})

CONFIG_SCHEMA: dict = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "xdg_force_default": {"type": "boolean"},
        "xdg_on_mac": {"type": "boolean"},
    },
}

_VALIDATOR = Draft7Validator(CONFIG_SCHEMA)


@dataclass(frozen=True)
class Config:
    """Process-wide resolution switches.

    Attributes:
        xdg_force_default: Ignore XDG variables and user-dirs.dirs and always
            use the built-in defaults (HOME is still read).
        xdg_on_mac: Resolve folders on macOS with the XDG rules instead of the
            native ~/Library layout.
    """

    xdg_force_default: bool = False
    xdg_on_mac: bool = False

    def merged(self, **overrides: Optional[bool]) -> "Config":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


def _env_flag(environ: Mapping[str, str], name: str) -> Optional[bool]:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip().lower() in _TRUE_VALUES


def config_from_env(
    environ: Optional[Mapping[str, str]] = None, base: Optional[Config] = None
) -> Config:
    environ = os.environ if environ is None else environ
    return (base or Config()).merged(
        xdg_force_default=_env_flag(environ, ENV_XDG_FORCE_DEFAULT),
        xdg_on_mac=_env_flag(environ, ENV_XDG_ON_MAC),
    )


def load_config_file(path: Path, base: Optional[Config] = None) -> Config:
    """Read a YAML config file such as::

        xdg_force_default: true
        xdg_on_mac: false

    An empty file yields ``base`` unchanged.
    """
    path = Path(path)
    try:
        data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise KnownFoldersError(
            code=ErrorCode.CONFIG_INVALID,
            message=f"Cannot read config file: {path}",
            details={"path": str(path), "reason": str(exc)},
        ) from exc
    except yaml.YAMLError as exc:
        raise KnownFoldersError(
            code=ErrorCode.CONFIG_INVALID,
            message=f"Config file is not valid YAML: {path}",
            details={"path": str(path), "reason": str(exc)},
        ) from exc

    if data is None:
        data = {}
    errors = sorted(_VALIDATOR.iter_errors(data), key=str)
    if errors:
        raise KnownFoldersError(
            code=ErrorCode.CONFIG_INVALID,
            message=f"Config file failed schema validation: {path}",
            details={"path": str(path), "errors": [e.message for e in errors[:3]]},
        )

    log_debug("config_file_loaded", {"path": str(path), "keys": sorted(data)})
    return (base or Config()).merged(**data)


_default_config: Optional[Config] = None
_default_config_used = False


def configure(config: Config) -> None:
    """Install the process-wide Config. Only allowed before its first use."""
    global _default_config
    if _default_config_used:
        raise KnownFoldersError(
            code=ErrorCode.CONFIG_LOCKED,
            message="Configuration is read-only once folders have been resolved",
            details={"current": repr(_default_config)},
        )
    _default_config = config


def get_default_config() -> Config:
    """Return the process-wide Config, reading the environment on first use."""
    global _default_config, _default_config_used
    if _default_config is None:
        _default_config = config_from_env()
    _default_config_used = True
    return _default_config


def _reset_default_config() -> None:
    """Forget the process-wide Config (for testing only)."""
    global _default_config, _default_config_used
    _default_config = None
    _default_config_used = False
