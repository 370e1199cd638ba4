"""Tests for configuration management."""

import json
from pathlib import Path

import pytest

from domainsweep import config
from domainsweep.errors import WordlistError
from domainsweep.modules.store import SETTINGS_KEY, MemoryStore


class TestLoadEnvFile:
    """Tests for load_env_file."""

    def test_load_env_file_missing_returns_empty(self, temp_dir: Path) -> None:
        env_path = temp_dir / ".env"
        assert not env_path.exists()
        assert config.load_env_file(env_path) == {}

    def test_load_env_file_parses_key_value(self, temp_dir: Path) -> None:
        env_path = temp_dir / ".env"
        env_path.write_text("# comment\n\nFOO=\"bar\"\nBAZ='qux'\n")
        assert config.load_env_file(env_path) == {"FOO": "bar", "BAZ": "qux"}


class TestLoadGlobalConfig:
    """Tests for load_global_config."""

    def test_missing_returns_empty(self) -> None:
        assert config.load_global_config() == {}

    def test_loads_yml(self, data_dir: Path) -> None:
        data_dir.mkdir(parents=True)
        (data_dir / "config.yml").write_text("DOMAINSWEEP_BATCH_SIZE: 4\n")
        assert config.load_global_config() == {"DOMAINSWEEP_BATCH_SIZE": 4}

    def test_invalid_yaml_ignored(self, data_dir: Path) -> None:
        data_dir.mkdir(parents=True)
        (data_dir / "config.yml").write_text("key: [unclosed\n")
        assert config.load_global_config() == {}

    def test_non_mapping_ignored(self, data_dir: Path) -> None:
        data_dir.mkdir(parents=True)
        (data_dir / "config.yml").write_text("- just\n- a list\n")
        assert config.load_global_config() == {}

    def test_create_global_config(self, data_dir: Path) -> None:
        path = config.create_global_config()
        assert path == data_dir / "config.yml"
        assert "DOMAINSWEEP_VIEWDNS_API_KEY" in path.read_text()
        path.write_text("custom: 1\n")
        config.create_global_config()
        assert path.read_text() == "custom: 1\n"


class TestGetConfig:
    """Tests for source priority."""

    def test_priority(self, data_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        data_dir.mkdir(parents=True)
        (data_dir / "config.yml").write_text("KEY_A: yaml\nKEY_B: yaml\nKEY_C: yaml\n")
        (data_dir / ".env").write_text("KEY_A=dotenv\nKEY_B=dotenv\n")
        monkeypatch.setenv("KEY_A", "env")

        assert config.get_config("KEY_A") == "env"
        assert config.get_config("KEY_B") == "dotenv"
        assert config.get_config("KEY_C") == "yaml"
        assert config.get_config("KEY_D", "default") == "default"

    def test_data_dir_override(self, data_dir: Path) -> None:
        assert config.get_data_dir() == data_dir
        assert config.get_db_path() == data_dir / "domainsweep.db"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("yes", True), ("0", False), ("maybe", False), (None, False), (True, True)],
    )
    def test_coerce_bool(self, value, expected) -> None:
        assert config.coerce_bool(value) is expected

    def test_coerce_numbers(self) -> None:
        assert config.coerce_positive_int("7", 10) == 7
        assert config.coerce_positive_int("-1", 10) == 10
        assert config.coerce_positive_float("x", 8.0) == 8.0


class TestScanSettings:
    """Tests for resolved scan settings."""

    def test_defaults(self) -> None:
        settings = config.load_scan_settings(MemoryStore())
        assert settings.api_key == ""
        assert settings.auto_scan_enabled is False
        assert settings.wordlist_source == "default"
        assert len(settings.wordlist) > 0
        assert settings.batch_size == 10
        assert settings.timeout == 8.0
        assert settings.dedupe_history is True

    def test_store_values(self) -> None:
        store = MemoryStore()
        config.save_setting(store, config.API_KEY_SETTING, "stored-key")
        config.save_setting(store, config.AUTO_SCAN_SETTING, True)
        settings = config.load_scan_settings(store)
        assert settings.api_key == "stored-key"
        assert settings.auto_scan_enabled is True

    def test_env_beats_store(self, monkeypatch: pytest.MonkeyPatch) -> None:
        store = MemoryStore({SETTINGS_KEY: {config.API_KEY_SETTING: "stored-key"}})
        monkeypatch.setenv("DOMAINSWEEP_VIEWDNS_API_KEY", "env-key")
        assert config.load_scan_settings(store).api_key == "env-key"

    def test_store_beats_files(self, data_dir: Path) -> None:
        data_dir.mkdir(parents=True)
        (data_dir / "config.yml").write_text("DOMAINSWEEP_VIEWDNS_API_KEY: file-key\n")
        assert config.load_scan_settings(MemoryStore()).api_key == "file-key"
        store = MemoryStore({SETTINGS_KEY: {config.API_KEY_SETTING: "stored-key"}})
        assert config.load_scan_settings(store).api_key == "stored-key"

    def test_stored_wordlist_document(self) -> None:
        wordlist = [{"path": "/only", "type": "file", "severity": "low", "positive_match": ["x"]}]
        store = MemoryStore({SETTINGS_KEY: {config.WORDLIST_SETTING: json.dumps(wordlist)}})
        settings = config.load_scan_settings(store)
        assert [entry.path for entry in settings.wordlist] == ["/only"]
        assert settings.wordlist_source == "stored"

    def test_wordlist_path_from_env(self, temp_dir: Path, monkeypatch) -> None:
        path = temp_dir / "w.json"
        path.write_text(json.dumps([{"path": "/p", "type": "file", "severity": "low"}]))
        monkeypatch.setenv("DOMAINSWEEP_WORDLIST", str(path))
        settings = config.load_scan_settings(MemoryStore())
        assert settings.wordlist_source == str(path)
        assert settings.wordlist[0].path == "/p"

    def test_bad_wordlist_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DOMAINSWEEP_WORDLIST", "/does/not/exist.json")
        with pytest.raises(WordlistError):
            config.load_scan_settings(MemoryStore())

    def test_tuning_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DOMAINSWEEP_BATCH_SIZE", "3")
        monkeypatch.setenv("DOMAINSWEEP_TIMEOUT", "2.5")
        monkeypatch.setenv("DOMAINSWEEP_SHUFFLE", "yes")
        monkeypatch.setenv("DOMAINSWEEP_DEDUPE_HISTORY", "off")
        settings = config.load_scan_settings()
        assert settings.batch_size == 3
        assert settings.timeout == 2.5
        assert settings.shuffle is True
        assert settings.dedupe_history is False

    def test_save_setting(self) -> None:
        store = MemoryStore()
        config.save_setting(store, config.API_KEY_SETTING, "abc")
        config.save_setting(store, config.API_KEY_SETTING, None)
        assert config.stored_settings(store) == {}
        with pytest.raises(KeyError):
            config.save_setting(store, "nope", 1)

    def test_is_auto_scan_enabled(self, monkeypatch: pytest.MonkeyPatch) -> None:
        store = MemoryStore()
        assert not config.is_auto_scan_enabled(store)
        config.save_setting(store, config.AUTO_SCAN_SETTING, True)
        assert config.is_auto_scan_enabled(store)
        monkeypatch.setenv("DOMAINSWEEP_AUTO_SCAN", "false")
        assert not config.is_auto_scan_enabled(store)
