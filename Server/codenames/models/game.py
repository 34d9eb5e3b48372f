"""
Game Data Models

Contains all game-related data structures and enums.
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Dict, List, Optional


class Role(Enum):
    """Hidden role of a card on the board."""
    TARGET = "target"
    OPPONENT = "opponent"
    NEUTRAL = "neutral"
    TRAP = "trap"


class TurnPhase(Enum):
    """Where the session is in the hint/guess cycle."""
    WAITING_FOR_HINT = "waiting_for_hint"
    AWAITING_GUESSES = "awaiting_guesses"
    TURN_EXPIRED = "turn_expired"
    HINT_EXHAUSTED = "hint_exhausted"
    WON = "won"
    LOST_TO_TRAP = "lost_to_trap"
    TIME_UP = "time_up"

    @property
    def is_terminal(self) -> bool:
        return self in (TurnPhase.WON, TurnPhase.LOST_TO_TRAP, TurnPhase.TIME_UP)


@dataclass
class Card:
    """A word on the board. Only ``revealed`` changes after creation."""
    word: str
    role: Role
    revealed: bool = False


@dataclass(frozen=True)
class Hint:
    """A category label (or word fragment) and how many targets it covers."""
    label: str
    count: int

    def __str__(self) -> str:
        return f"{self.label}: {self.count}"


@dataclass(frozen=True)
class GameOutcome:
    """Why a game ended and whether the player came out ahead."""
    reason: TurnPhase
    player_won: bool
    target_found: int
    opponent_found: int = 0

    def to_dict(self) -> Dict:
        return {
            'reason': self.reason.value,
            'player_won': self.player_won,
            'target_found': self.target_found,
            'opponent_found': self.opponent_found,
        }


@dataclass
class CardView:
    """Card as shown to the player. ``role`` is None while it is hidden."""
    index: int
    word: str
    revealed: bool
    role: Optional[str]


@dataclass
class GameView:
    """Everything the presentation layer needs to redraw after an action."""
    game_id: str
    language: str
    rule_set: str
    cards: List[CardView]
    spymaster_view: bool
    current_hint: Optional[str]
    hint_history: List[str]
    guesses_left: int
    stored_guesses: int
    target_found: int
    target_total: int
    total_time_left: int
    turn_time_left: Optional[int]
    total_clock: str
    turn_clock: Optional[str]
    total_timer_warning: bool
    turn_timer_warning: bool
    phase: str
    game_over: bool
    outcome: Optional[Dict]
    can_end_turn: bool
    can_end_game: bool

    def to_dict(self) -> Dict:
        return asdict(self)
