import pytest

from known_folders.core.services.error_codes import ErrorCode, KnownFoldersError
from known_folders.core.services.settings import (
    Config,
    config_from_env,
    configure,
    get_default_config,
    load_config_file,
)


class TestConfigFromEnv:
    def test_defaults(self):
        assert config_from_env({}) == Config()

    @pytest.mark.parametrize("raw", ["1", "true", "YES", " on "])
    def test_true_values(self, raw):
        assert config_from_env({"KNOWN_FOLDERS_XDG_FORCE_DEFAULT": raw}).xdg_force_default

    def test_false_value_overrides_base(self):
        base = Config(xdg_on_mac=True)
        assert config_from_env({"KNOWN_FOLDERS_XDG_ON_MAC": "0"}, base) == Config()

    def test_blank_value_keeps_base(self):
        base = Config(xdg_on_mac=True)
        assert config_from_env({"KNOWN_FOLDERS_XDG_ON_MAC": " "}, base) == base

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("KNOWN_FOLDERS_XDG_ON_MAC", "1")
        assert config_from_env() == Config(xdg_on_mac=True)


class TestLoadConfigFile:
    def test_valid_file(self, tmp_path):
        path = tmp_path / "known-folders.yaml"
        path.write_text("xdg_force_default: true\n")
        assert load_config_file(path) == Config(xdg_force_default=True)

    def test_file_layers_over_base(self, tmp_path):
        path = tmp_path / "known-folders.yaml"
        path.write_text("xdg_force_default: true\n")
        assert load_config_file(path, Config(xdg_on_mac=True)) == Config(True, True)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "known-folders.yaml"
        path.write_text("")
        assert load_config_file(path, Config(xdg_on_mac=True)) == Config(xdg_on_mac=True)

    def test_missing_file(self, tmp_path):
        with pytest.raises(KnownFoldersError) as exc_info:
            load_config_file(tmp_path / "absent.yaml")
        assert exc_info.value.code == ErrorCode.CONFIG_INVALID

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "known-folders.yaml"
        path.write_text("xdg_force_default: [unclosed\n")
        with pytest.raises(KnownFoldersError) as exc_info:
            load_config_file(path)
        assert exc_info.value.code == ErrorCode.CONFIG_INVALID

    @pytest.mark.parametrize(
        "content", ["xdg_force_default: maybe\n", "unknown_key: true\n", "- a list\n"]
    )
    def test_schema_violations(self, tmp_path, content):
        path = tmp_path / "known-folders.yaml"
        path.write_text(content)
        with pytest.raises(KnownFoldersError) as exc_info:
            load_config_file(path)
        assert exc_info.value.code == ErrorCode.CONFIG_INVALID
        assert exc_info.value.details["errors"]


class TestDefaultConfig:
    def test_configure_before_use(self):
        configure(Config(xdg_on_mac=True))
        assert get_default_config() == Config(xdg_on_mac=True)

    def test_configure_twice_before_use(self):
        configure(Config(xdg_on_mac=True))
        configure(Config(xdg_force_default=True))
        assert get_default_config() == Config(xdg_force_default=True)

    def test_configure_after_use_is_rejected(self):
        first = get_default_config()
        with pytest.raises(KnownFoldersError) as exc_info:
            configure(Config(xdg_force_default=True))
        assert exc_info.value.code == ErrorCode.CONFIG_LOCKED
        assert get_default_config() is first

    def test_default_read_from_environment(self, monkeypatch):
        monkeypatch.setenv("KNOWN_FOLDERS_XDG_FORCE_DEFAULT", "true")
        assert get_default_config().xdg_force_default is True
