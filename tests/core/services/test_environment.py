import pytest

from known_folders.core.services.environment import (
    FORBIDDEN,
    OsEnvironment,
    StaticEnvironment,
    UndeclaredEnvironmentAccess,
)


class TestStaticEnvironment:
    def test_declared_values(self):
        env = StaticEnvironment({"HOME": "/home/jane", "XDG_CACHE_HOME": None})
        assert env.get("HOME") == "/home/jane"
        assert env.get("XDG_CACHE_HOME") is None
        assert env.reads == ["HOME", "XDG_CACHE_HOME"]

    def test_undeclared_variable_fails(self):
        with pytest.raises(UndeclaredEnvironmentAccess):
            StaticEnvironment({}).get("HOME")

    def test_forbidden_variable_fails(self):
        env = StaticEnvironment({"XDG_CONFIG_HOME": FORBIDDEN})
        with pytest.raises(AssertionError, match="must not be read"):
            env.get("XDG_CONFIG_HOME")
        assert env.reads == []

    def test_get_nonempty(self):
        env = StaticEnvironment({"A": "", "B": "x"})
        assert env.get_nonempty("A") is None
        assert env.get_nonempty("B") == "x"

    def test_open_file(self):
        env = StaticEnvironment({}, {"/etc/jane/user-dirs.dirs": "XDG_MUSIC_DIR=\"/m\"\n"})
        with env.open_file("/etc/jane", "user-dirs.dirs") as stream:
            assert stream.read() == b'XDG_MUSIC_DIR="/m"\n'

    def test_open_missing_file(self):
        with pytest.raises(FileNotFoundError):
            StaticEnvironment({}).open_file("/nowhere", "user-dirs.dirs")


class TestOsEnvironment:
    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("KNOWN_FOLDERS_PROBE", "value")
        monkeypatch.delenv("KNOWN_FOLDERS_ABSENT", raising=False)
        env = OsEnvironment()
        assert env.get("KNOWN_FOLDERS_PROBE") == "value"
        assert env.get("KNOWN_FOLDERS_ABSENT") is None

    def test_open_file(self, tmp_path):
        (tmp_path / "user-dirs.dirs").write_bytes(b"data")
        with OsEnvironment().open_file(str(tmp_path), "user-dirs.dirs") as stream:
            assert stream.read() == b"data"

    def test_open_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            OsEnvironment().open_file(str(tmp_path), "user-dirs.dirs")
