from __future__ import annotations
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

CONFIG_PATH = Path("config.json")

Game = Union[int, str]

# config.json key -> Config attribute; snake_case keys are accepted as well
KEYS = {
    "playingGames": "playing_games",
    "onlineStatus": "online_status",
    "afkMessage": "afk_message",
    "loginDelay": "login_delay",
    "relogDelay": "relog_delay",
    "relogAfterDisconnect": "relog_after_disconnect",
    "stallTimeout": "stall_timeout",
    "playtimeFile": "playtime_file",
    "outputFile": "output_file",
    "debug": "debug",
}

logger = logging.getLogger(__name__)


@dataclass
class Config:
    playing_games: Union[List[Game], Dict[str, List[Game]]] = field(default_factory=lambda: [730])
    online_status: int = 1
    afk_message: str = ""
    login_delay: float = 1.0
    relog_delay: float = 15.0
    relog_after_disconnect: bool = True
    stall_timeout: float = 120.0
    playtime_file: str = "playtime.json"
    output_file: str = "output.txt"
    debug: bool = False

    def games_for(self, account_name: str) -> List[Game]:
        """Games to idle on ``account_name``; a dict maps accounts to lists with ``general`` as fallback."""
        games = self.playing_games
        if isinstance(games, dict):
            games = games.get(account_name, games.get("general", []))
        return list(games)


def _is_games(v: Any) -> bool:
    return isinstance(v, list) and all(isinstance(g, (int, str)) and not isinstance(g, bool) for g in v)


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool) and v >= 0


CHECKS = {
    "playing_games": lambda v: _is_games(v) or (
        isinstance(v, dict) and all(_is_games(g) for g in v.values())
    ),
    "online_status": lambda v: isinstance(v, int) and not isinstance(v, bool),
    "afk_message": lambda v: isinstance(v, str),
    "login_delay": _is_number,
    "relog_delay": _is_number,
    "relog_after_disconnect": lambda v: isinstance(v, bool),
    "stall_timeout": _is_number,
    "playtime_file": lambda v: isinstance(v, str) and bool(v),
    "output_file": lambda v: isinstance(v, str),
    "debug": lambda v: isinstance(v, bool),
}


def _from_dict(data: Dict[str, Any]) -> Config:
    kwargs: Dict[str, Any] = {}
    for key, attr in KEYS.items():
        if key in data:
            value = data[key]
        elif attr in data:
            value = data[attr]
        else:
            continue
        if not CHECKS[attr](value):
            logger.error("Invalid value for %s in config: %r, using default", key, value)
            continue
        kwargs[attr] = value
    unknown = set(data) - set(KEYS) - set(KEYS.values())
    if unknown:
        logger.warning("Ignoring unknown config keys: %s", ", ".join(sorted(unknown)))
    return Config(**kwargs)


def load_config(path: Path = CONFIG_PATH) -> Config:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.info("No config file at %s, using defaults", path)
        return Config()
    except json.JSONDecodeError as exc:
        logger.error("Failed to decode config file %s: %s", path, exc)
        return Config()
    if not isinstance(data, dict):
        logger.error("Config file %s must contain a JSON object", path)
        return Config()
    return _from_dict(data)
