from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, Union

logger = logging.getLogger(__name__)


class PlaytimeLog:
    """Cumulative idle seconds per account and game, kept in a JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.data: Dict[str, Dict[str, float]] = {}
        self.load()

    def load(self) -> None:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            self.data = {}
            return
        except json.JSONDecodeError as e:
            logger.error("Failed to load playtime from %s: %s", self.path, e)
            self.data = {}
            return
        if not isinstance(raw, dict) or not all(
            isinstance(games, dict)
            and all(isinstance(s, (int, float)) and not isinstance(s, bool) for s in games.values())
            for games in raw.values()
        ):
            logger.error("Failed to load playtime from %s: expected {account: {app: seconds}}", self.path)
            self.data = {}
            return
        self.data = {
            str(acc): {str(app): float(secs) for app, secs in games.items()}
            for acc, games in raw.items()
        }

    def add(self, account: str, apps: Iterable[Union[int, str]], seconds: float) -> None:
        if seconds <= 0:
            return
        games = self.data.setdefault(account, {})
        for app in apps:
            games[str(app)] = games.get(str(app), 0.0) + seconds

    def hours(self, account: str) -> float:
        """Total idle hours of ``account`` summed over all games."""
        return sum(self.data.get(account, {}).values()) / 3600

    def save(self) -> None:
        self.path.write_text(json.dumps(self.data, ensure_ascii=False, indent=2), encoding="utf-8")
