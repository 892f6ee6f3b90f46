import json
import re

import pytest

from known_folders.core.services.error_codes import ErrorCode, KnownFoldersError
from known_folders.core.services.observability import (
    get_current_run_id,
    get_log_format,
    get_run_id,
    log_debug,
    log_event,
    log_operation,
)


class TestObservability:
    def test_get_run_id_generates_unique(self, monkeypatch):
        monkeypatch.delenv("KNOWN_FOLDERS_RUN_ID", raising=False)
        id1 = get_run_id()
        id2 = get_run_id()
        assert id1 != id2
        assert len(id1) == 36

    def test_get_run_id_uses_env(self, monkeypatch):
        monkeypatch.setenv("KNOWN_FOLDERS_RUN_ID", "00000000-0000-4000-8000-000000000000")
        assert get_run_id() == "00000000-0000-4000-8000-000000000000"

    def test_get_run_id_lowercases_env(self, monkeypatch):
        monkeypatch.setenv("KNOWN_FOLDERS_RUN_ID", "ABCDEF00-0000-4000-8000-000000000000")
        assert get_run_id() == "abcdef00-0000-4000-8000-000000000000"

    def test_get_run_id_invalid_env_falls_back(self, monkeypatch):
        monkeypatch.setenv("KNOWN_FOLDERS_RUN_ID", "not-a-uuid")
        run_id = get_run_id()
        assert run_id != "not-a-uuid"
        assert re.fullmatch(
            r"[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}",
            run_id,
        )

    def test_get_log_format_default(self):
        assert get_log_format() == "text"

    def test_get_log_format_json(self, monkeypatch):
        monkeypatch.setenv("KNOWN_FOLDERS_LOG_FORMAT", "json")
        assert get_log_format() == "json"

    def test_get_current_run_id_returns_same_id(self, monkeypatch):
        import known_folders.core.services.observability as obs

        monkeypatch.delenv("KNOWN_FOLDERS_RUN_ID", raising=False)
        monkeypatch.setattr(obs, "_current_run_id", None)
        assert get_current_run_id() == get_current_run_id()

    def test_log_event_json_format(self, monkeypatch, capsys):
        monkeypatch.setenv("KNOWN_FOLDERS_LOG_FORMAT", "json")
        log_event("test_event", True, details={"key": "value"})
        captured = capsys.readouterr()
        entry = json.loads(captured.err.strip())
        assert entry["operation"] == "test_event"
        assert entry["details"]["key"] == "value"
        assert "timestamp" in entry
        assert "run_id" in entry
        assert captured.out == ""

    def test_log_event_text_format(self, capsys):
        log_event("test_event", True, details={"key": "value"})
        captured = capsys.readouterr()
        assert "test_event" in captured.err
        assert "OK" in captured.err
        assert re.search(r'"key"\s*:\s*"value"', captured.err)

    def test_log_event_silenced(self, monkeypatch, capsys):
        monkeypatch.setenv("KNOWN_FOLDERS_LOG_SILENT", "1")
        log_event("quiet_event", True)
        assert capsys.readouterr().err == ""

    def test_log_debug_disabled_by_default(self, capsys):
        log_debug("folder_resolved", {"folder": "cache"})
        assert capsys.readouterr().err == ""

    def test_log_debug_enabled(self, monkeypatch, capsys):
        monkeypatch.setenv("KNOWN_FOLDERS_DEBUG", "1")
        monkeypatch.setenv("KNOWN_FOLDERS_LOG_SILENT", "1")
        log_debug("folder_resolved", {"folder": "cache"})
        err = capsys.readouterr().err
        assert "folder_resolved" in err
        assert "[debug]" in err

    def test_log_operation_includes_duration_on_failure(self, capsys):
        with pytest.raises(KnownFoldersError):
            with log_operation("test_op"):
                raise KnownFoldersError(code=ErrorCode.PARSE_ERROR, message="Test error")

        captured = capsys.readouterr()
        assert "test_op" in captured.err
        assert "FAILED" in captured.err
        assert "PARSE_ERROR" in captured.err
        assert re.search(r"\(\d+\.\d+ms\)", captured.err)

    def test_log_operation_unknown_error_code(self, capsys):
        with pytest.raises(RuntimeError):
            with log_operation("test_op"):
                raise RuntimeError("boom")
        assert "UNKNOWN_ERROR" in capsys.readouterr().err

    def test_log_operation_collects_details(self, monkeypatch, capsys):
        monkeypatch.setenv("KNOWN_FOLDERS_LOG_FORMAT", "json")
        with log_operation("cli_path") as ctx:
            ctx["details"]["folder"] = "desktop"
        entry = json.loads(capsys.readouterr().err.strip())
        assert entry["success"] is True
        assert entry["details"] == {"folder": "desktop"}
        assert "duration_ms" in entry
