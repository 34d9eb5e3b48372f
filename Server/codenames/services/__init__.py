"""
Services Package

Contains all business logic and service classes.
"""

from .board_generator import generate_board
from .game_service import GameService, InvalidAction, get_game_service
from .hint_selector import select_hint
from .persistence import PersistenceReadError, PersistenceWriteError, SaveSlotStore
from .session import GameSession
from .timers import Countdown, DelayedCall

__all__ = [
    'GameService', 'InvalidAction', 'get_game_service',
    'GameSession', 'SaveSlotStore', 'PersistenceReadError', 'PersistenceWriteError',
    'generate_board', 'select_hint', 'Countdown', 'DelayedCall'
]
