from __future__ import annotations

import json
import logging
from dataclasses import dataclass
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def _config_dir() -> Path:
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "babel-player"
    return Path.home() / ".config" / "babel-player"


def _config_file() -> Path:
    return _config_dir() / "config.json"


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip() not in ("0", "false", "False", "no")


@dataclass(frozen=True)
class AppConfig:
    # Storage
    config_dir: Path

    # Rendering
    refresh_hz: float
    context_lines: int  # lines shown above the active one
    use_alt_screen: bool
    show_translations: bool


def load_config() -> AppConfig:
    config_dir = _config_dir()

    return AppConfig(
        config_dir=config_dir,
        refresh_hz=float(os.getenv("BABEL_PLAYER_REFRESH_HZ", "30.0")),
        context_lines=int(os.getenv("BABEL_PLAYER_CONTEXT_LINES", "2")),
        use_alt_screen=_env_flag("BABEL_PLAYER_ALT_SCREEN", True),
        show_translations=_load_show_translations(config_dir),
    )


def _read_config_json(cfg_path: Path) -> dict:
    try:
        data = json.loads(cfg_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable config %s: %s", cfg_path, e)
        return {}
    return data if isinstance(data, dict) else {}


def _load_show_translations(config_dir: Path) -> bool:
    # Priority: config.json → BABEL_PLAYER_SHOW_TRANSLATIONS → True
    cfg_path = config_dir / "config.json"
    if cfg_path.exists():
        value = _read_config_json(cfg_path).get("show_translations")
        if isinstance(value, bool):
            return value
    return _env_flag("BABEL_PLAYER_SHOW_TRANSLATIONS", True)


def save_config_show_translations(show: bool) -> Path:
    cfg_path = _config_file()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    data: dict = _read_config_json(cfg_path) if cfg_path.exists() else {}
    data["show_translations"] = bool(show)
    cfg_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    return cfg_path
