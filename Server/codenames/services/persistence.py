"""
Save Slot Store

Keeps the game in progress in a single JSON document on local disk so a
reload can pick up where the player left off. Storage problems are logged
and never interrupt play.
"""

import json
from pathlib import Path
from typing import Optional

from ..utils.game_logger import game_logger
from .session import DEFAULT_AUTO_HINT_DELAY_MS, GameSession

DEFAULT_SAVE_KEY = 'codenames-game'


class PersistenceError(Exception):
    """Base class for save slot failures."""


class PersistenceReadError(PersistenceError):
    """The saved game could not be read or decoded."""


class PersistenceWriteError(PersistenceError):
    """The game could not be written to the save slot."""


class SaveSlotStore:
    """
    One named slot in a directory of JSON documents.

    ``save`` is called after every state change; ``load`` only returns
    sessions that are still in progress.
    """

    def __init__(self, storage_dir: str = 'saves', key: str = DEFAULT_SAVE_KEY):
        self.storage_dir = Path(storage_dir)
        self.key = key

    @property
    def path(self) -> Path:
        return self.storage_dir / f"{self.key}.json"

    def save(self, session: GameSession) -> bool:
        """
        Writes the session to the slot.

        Returns:
            bool: True if the slot was written
        """
        try:
            self._write(session)
            return True
        except PersistenceWriteError as e:
            game_logger.logger.error(f"Failed to save game state: {e}")
            return False

    def _write(self, session: GameSession) -> None:
        try:
            payload = json.dumps(session.to_dict(), ensure_ascii=False)
            self.storage_dir.mkdir(parents=True, exist_ok=True)
            self.path.write_text(payload, encoding='utf-8')
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceWriteError(f"{self.path}: {e}") from e

    def load(self, auto_hint_delay_ms: int = DEFAULT_AUTO_HINT_DELAY_MS) -> Optional[GameSession]:
        """
        Reads the slot back.

        Returns:
            GameSession with stopped timers, or None when there is nothing
            to resume (no slot, unreadable slot, finished game, empty board,
            clock already run out)
        """
        try:
            data = self._read()
        except PersistenceReadError as e:
            game_logger.logger.warning(f"Failed to load game state: {e}")
            return None

        if data is None:
            return None

        if data.get('game_over') or not data.get('cards') or not data.get('total_time_left'):
            game_logger.logger.info(f"Saved game in '{self.key}' is not resumable")
            return None

        try:
            return GameSession.from_dict(data, auto_hint_delay_ms=auto_hint_delay_ms)
        except (KeyError, TypeError, ValueError) as e:
            game_logger.logger.warning(f"Failed to load game state: malformed save in {self.path}: {e}")
            return None

    def _read(self) -> Optional[dict]:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding='utf-8'))
        except (OSError, ValueError) as e:
            raise PersistenceReadError(f"{self.path}: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceReadError(f"{self.path}: expected an object, got {type(data).__name__}")
        return data

    def clear(self) -> None:
        """Empties the slot."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            game_logger.logger.error(f"Failed to clear saved game: {e}")
