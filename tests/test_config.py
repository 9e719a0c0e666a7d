from __future__ import annotations

import json

from babel_player.config import load_config, save_config_show_translations


class TestConfig:
    def test_defaults(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
        for name in (
            "BABEL_PLAYER_REFRESH_HZ",
            "BABEL_PLAYER_CONTEXT_LINES",
            "BABEL_PLAYER_ALT_SCREEN",
            "BABEL_PLAYER_SHOW_TRANSLATIONS",
        ):
            monkeypatch.delenv(name, raising=False)

        cfg = load_config()
        assert cfg.config_dir == tmp_path / "config" / "babel-player"
        assert cfg.refresh_hz == 30.0
        assert cfg.context_lines == 2
        assert cfg.use_alt_screen is True
        assert cfg.show_translations is True

    def test_env_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        monkeypatch.setenv("BABEL_PLAYER_REFRESH_HZ", "12.5")
        monkeypatch.setenv("BABEL_PLAYER_CONTEXT_LINES", "4")
        monkeypatch.setenv("BABEL_PLAYER_ALT_SCREEN", "0")

        cfg = load_config()
        assert cfg.refresh_hz == 12.5
        assert cfg.context_lines == 4
        assert cfg.use_alt_screen is False


class TestShowTranslations:
    def test_save_and_load(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        monkeypatch.delenv("BABEL_PLAYER_SHOW_TRANSLATIONS", raising=False)

        path = save_config_show_translations(False)
        assert path == tmp_path / "babel-player" / "config.json"
        assert load_config().show_translations is False

        save_config_show_translations(True)
        assert load_config().show_translations is True

    def test_save_keeps_other_keys(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        cfg_file = tmp_path / "babel-player" / "config.json"
        cfg_file.parent.mkdir(parents=True)
        cfg_file.write_text('{"theme": "dark"}', encoding="utf-8")

        save_config_show_translations(False)
        assert json.loads(cfg_file.read_text(encoding="utf-8")) == {"theme": "dark", "show_translations": False}

    def test_config_file_wins_over_env(self, tmp_path, monkeypatch):
        (tmp_path / "babel-player").mkdir(parents=True, exist_ok=True)
        (tmp_path / "babel-player" / "config.json").write_text('{"show_translations": true}', encoding="utf-8")
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        monkeypatch.setenv("BABEL_PLAYER_SHOW_TRANSLATIONS", "0")

        assert load_config().show_translations is True

    def test_env_when_no_config(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        monkeypatch.setenv("BABEL_PLAYER_SHOW_TRANSLATIONS", "false")

        assert load_config().show_translations is False

    def test_unreadable_config_falls_back(self, tmp_path, monkeypatch):
        (tmp_path / "babel-player").mkdir(parents=True, exist_ok=True)
        (tmp_path / "babel-player" / "config.json").write_text("{not json", encoding="utf-8")
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        monkeypatch.delenv("BABEL_PLAYER_SHOW_TRANSLATIONS", raising=False)

        assert load_config().show_translations is True
