"""Shared pytest fixtures."""

import pytest

from known_folders.core.services.output_formatter import _reset_schema_cache
from known_folders.core.services.settings import _reset_default_config

_PROCESS_VARIABLES = (
    "KNOWN_FOLDERS_XDG_FORCE_DEFAULT",
    "KNOWN_FOLDERS_XDG_ON_MAC",
    "KNOWN_FOLDERS_DEBUG",
    "KNOWN_FOLDERS_LOG_SILENT",
    "KNOWN_FOLDERS_LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def isolate_process_state(monkeypatch):
    """Fresh process-wide config and schema cache, no inherited switches."""
    for name in _PROCESS_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    _reset_default_config()
    _reset_schema_cache()
    yield
    _reset_default_config()
    _reset_schema_cache()
