"""
Game Session

Holds the state of one game. A session is owned by whoever constructs it;
there is no module-level session.
"""

import uuid
from typing import Dict, List, Optional, Set

from ..config.game_settings import (
    HINT_HISTORY_LENGTH, TOTAL_TIMER_WARNING_SECONDS, TURN_TIMER_WARNING_SECONDS,
    RuleSet, get_rule_set
)
from ..models.game import Card, CardView, GameOutcome, GameView, Hint, Role, TurnPhase
from ..utils.helpers import format_clock
from .hint_selector import format_history
from .timers import Countdown, DelayedCall

DEFAULT_AUTO_HINT_DELAY_MS = 500


class GameSession:
    """
    State of a single game: board, hints, guess budget and clocks.

    ``revealed_words`` is the set of words the player has turned over.
    At the end of a game every card is flipped for display, but the set
    keeps only the player's own reveals.
    """

    def __init__(self, language: str, rules: RuleSet, cards: List[Card],
                 auto_hint_delay_ms: int = DEFAULT_AUTO_HINT_DELAY_MS,
                 game_id: Optional[str] = None):
        self.game_id = game_id or str(uuid.uuid4())
        self.language = language
        self.rules = rules
        self.cards = cards
        self.revealed_words: Set[str] = set()
        self.current_hint: Optional[Hint] = None
        self.hint_history: List[Hint] = []
        self.used_categories: Set[str] = set()
        self.current_guesses = 0
        self.stored_guesses = 0
        self.spymaster_view = False
        self.total_timer = Countdown(rules.total_seconds)
        self.turn_timer = Countdown(rules.turn_seconds) if rules.turn_seconds else None
        self.auto_hint = DelayedCall(auto_hint_delay_ms)
        self.phase = TurnPhase.WAITING_FOR_HINT
        self.outcome: Optional[GameOutcome] = None
        self.game_over = False

    # Board queries

    def cards_with_role(self, role: Role) -> List[Card]:
        return [card for card in self.cards if card.role == role]

    def unrevealed_targets(self) -> List[str]:
        return [card.word for card in self.cards_with_role(Role.TARGET)
                if card.word not in self.revealed_words]

    def found_count(self, role: Role) -> int:
        return sum(1 for card in self.cards_with_role(role) if card.word in self.revealed_words)

    @property
    def target_found(self) -> int:
        return self.found_count(Role.TARGET)

    @property
    def opponent_found(self) -> int:
        return self.found_count(Role.OPPONENT)

    # State transitions

    def apply_hint(self, hint: Hint) -> None:
        """Makes ``hint`` current and refills the guess budget."""
        self.current_hint = hint
        self.current_guesses = hint.count + (self.stored_guesses if self.rules.carry_over else 0)
        self.stored_guesses = 0
        self.hint_history.append(hint)
        if self.rules.track_used_categories:
            self.used_categories.add(hint.label)

        self.auto_hint.cancel()
        if self.turn_timer is not None:
            self.turn_timer.reset()
            if self.total_timer.running:
                self.turn_timer.start()
        self.phase = TurnPhase.AWAITING_GUESSES

    def flush_guesses(self) -> None:
        """Moves the unused budget into the carry-over pool."""
        self.stored_guesses += self.current_guesses
        self.current_guesses = 0

    def start_timers(self) -> None:
        self.total_timer.start()
        if self.turn_timer is not None:
            self.turn_timer.start()

    def cancel_timers(self) -> None:
        self.total_timer.cancel()
        if self.turn_timer is not None:
            self.turn_timer.cancel()
        self.auto_hint.cancel()

    def finish(self, reason: TurnPhase) -> GameOutcome:
        """Enters a terminal phase and stops every clock."""
        if not reason.is_terminal:
            raise ValueError(f"{reason.value} is not an ending")
        target_found = self.target_found
        opponent_found = self.opponent_found
        if reason == TurnPhase.WON:
            player_won = True
        elif reason == TurnPhase.TIME_UP:
            player_won = target_found > opponent_found
        else:
            player_won = False

        self.outcome = GameOutcome(
            reason=reason,
            player_won=player_won,
            target_found=target_found,
            opponent_found=opponent_found,
        )
        self.phase = reason
        self.game_over = True
        self.cancel_timers()

        for card in self.cards:
            card.revealed = True
        return self.outcome

    # Rendering

    def build_view(self) -> GameView:
        turn_time_left = self.turn_timer.remaining if self.turn_timer is not None else None
        return GameView(
            game_id=self.game_id,
            language=self.language,
            rule_set=self.rules.name,
            cards=[
                CardView(
                    index=index,
                    word=card.word,
                    revealed=card.revealed,
                    role=card.role.value if (card.revealed or self.spymaster_view) else None,
                )
                for index, card in enumerate(self.cards)
            ],
            spymaster_view=self.spymaster_view,
            current_hint=str(self.current_hint) if self.current_hint else None,
            hint_history=format_history(self.hint_history, HINT_HISTORY_LENGTH),
            guesses_left=self.current_guesses,
            stored_guesses=self.stored_guesses,
            target_found=self.target_found,
            target_total=self.rules.target_count,
            total_time_left=self.total_timer.remaining,
            turn_time_left=turn_time_left,
            total_clock=format_clock(self.total_timer.remaining),
            turn_clock=format_clock(turn_time_left) if turn_time_left is not None else None,
            total_timer_warning=self.total_timer.is_low(TOTAL_TIMER_WARNING_SECONDS),
            turn_timer_warning=(self.turn_timer is not None
                                and self.turn_timer.is_low(TURN_TIMER_WARNING_SECONDS)),
            phase=self.phase.value,
            game_over=self.game_over,
            outcome=self.outcome.to_dict() if self.outcome else None,
            can_end_turn=self.rules.allow_end_turn and not self.game_over,
            can_end_game=self.rules.allow_end_game,
        )

    # Serialization

    def to_dict(self) -> Dict:
        """JSON-ready snapshot. Sets become lists in board/issue order."""
        return {
            'game_id': self.game_id,
            'language': self.language,
            'rule_set': self.rules.name,
            'cards': [
                {'word': card.word, 'role': card.role.value, 'revealed': card.revealed}
                for card in self.cards
            ],
            'revealed_cards': [card.word for card in self.cards if card.word in self.revealed_words],
            'current_guesses': self.current_guesses,
            'stored_guesses': self.stored_guesses,
            'current_hint': self._hint_to_dict(self.current_hint),
            'hint_history': [self._hint_to_dict(hint) for hint in self.hint_history],
            'used_categories': list(dict.fromkeys(
                hint.label for hint in self.hint_history if hint.label in self.used_categories
            )),
            'spymaster_view': self.spymaster_view,
            'total_time_left': self.total_timer.remaining,
            'turn_time_left': self.turn_timer.remaining if self.turn_timer is not None else None,
            'phase': self.phase.value,
            'outcome': self.outcome.to_dict() if self.outcome else None,
            'game_over': self.game_over,
        }

    @classmethod
    def from_dict(cls, data: Dict,
                  auto_hint_delay_ms: int = DEFAULT_AUTO_HINT_DELAY_MS) -> 'GameSession':
        """
        Rebuilds a session from ``to_dict`` output. Timers come back stopped.

        Raises:
            KeyError, TypeError, ValueError: If the snapshot is malformed
        """
        rules = get_rule_set(data['rule_set'])
        cards = [
            Card(word=entry['word'], role=Role(entry['role']), revealed=bool(entry['revealed']))
            for entry in data['cards']
        ]
        session = cls(
            language=data['language'],
            rules=rules,
            cards=cards,
            auto_hint_delay_ms=auto_hint_delay_ms,
            game_id=data.get('game_id'),
        )
        session.revealed_words = set(data.get('revealed_cards') or [])
        session.current_guesses = int(data['current_guesses'])
        session.stored_guesses = int(data.get('stored_guesses', 0))
        session.current_hint = cls._hint_from_dict(data.get('current_hint'))
        session.hint_history = [cls._hint_from_dict(entry) for entry in data.get('hint_history', [])]
        session.used_categories = set(data.get('used_categories') or [])
        session.spymaster_view = bool(data.get('spymaster_view', False))
        session.total_timer = Countdown(rules.total_seconds, int(data['total_time_left']))
        if session.turn_timer is not None and data.get('turn_time_left') is not None:
            session.turn_timer = Countdown(rules.turn_seconds, int(data['turn_time_left']))
        session.phase = TurnPhase(data.get('phase', TurnPhase.WAITING_FOR_HINT.value))
        outcome = data.get('outcome')
        if outcome:
            session.outcome = GameOutcome(
                reason=TurnPhase(outcome['reason']),
                player_won=bool(outcome['player_won']),
                target_found=int(outcome['target_found']),
                opponent_found=int(outcome.get('opponent_found', 0)),
            )
        session.game_over = bool(data.get('game_over', False))
        return session

    @staticmethod
    def _hint_to_dict(hint: Optional[Hint]) -> Optional[Dict]:
        if hint is None:
            return None
        return {'label': hint.label, 'count': hint.count}

    @staticmethod
    def _hint_from_dict(data: Optional[Dict]) -> Optional[Hint]:
        if data is None:
            return None
        return Hint(label=data['label'], count=int(data['count']))
