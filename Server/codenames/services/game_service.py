"""
Game Service

Contains the turn and guess logic for single-player Codenames.
"""

import random
import threading
from typing import Dict, List, Mapping, Optional, Tuple

from ..config.game_settings import (
    NO_GUESSES_NOTICE, TURN_RULES, WORD_BANKS, RuleSet
)
from ..models.game import Card, GameView, Hint, Role, TurnPhase
from ..utils.game_logger import game_logger
from .board_generator import generate_board
from .hint_selector import select_hint
from .persistence import SaveSlotStore
from .session import DEFAULT_AUTO_HINT_DELAY_MS, GameSession
from .timers import MILLISECONDS_PER_TICK

ActionResult = Tuple[bool, Optional[str]]


class InvalidAction(Exception):
    """An action that does not apply to the current game. Never fatal."""


class GameService:
    """
    Owns the current game and applies player actions and clock ticks to it.

    This class handles:
    - Dealing new boards and issuing hints
    - Guess budget, carry-over and automatic next hints
    - Win, trap and time-up endings
    - Saving after every change and resuming a saved game

    Actions and clock advances are serialized by a re-entrant lock, so the
    session is never seen half-updated by another request thread.
    """

    def __init__(self,
                 word_banks: Optional[Mapping[str, Dict]] = None,
                 rules: RuleSet = TURN_RULES,
                 store: Optional[SaveSlotStore] = None,
                 rng: Optional[random.Random] = None,
                 language: str = 'en',
                 auto_hint_delay_ms: int = DEFAULT_AUTO_HINT_DELAY_MS):
        self.word_banks = word_banks if word_banks is not None else WORD_BANKS
        if language not in self.word_banks:
            raise ValueError(f"Unsupported language '{language}'")

        self.rules = rules
        self.store = store
        self.rng = rng or random.Random()
        self.language = language
        self.auto_hint_delay_ms = auto_hint_delay_ms
        self.session: Optional[GameSession] = None
        self._lock = threading.RLock()

    # Lifecycle

    def new_game(self, cards: Optional[List[Card]] = None) -> GameSession:
        """
        Deals a new board, issues the first hint and starts the clocks.

        Args:
            cards: Pre-dealt board to play instead of a random one

        Returns:
            The new session

        Raises:
            InsufficientWordBank: If the language cannot fill a board
        """
        with self._lock:
            if self.session is not None:
                self.session.cancel_timers()

            if cards is None:
                bank = self.word_banks[self.language]
                cards = generate_board(bank['words'], self.rules, self.rng)
            session = GameSession(
                language=self.language,
                rules=self.rules,
                cards=cards,
                auto_hint_delay_ms=self.auto_hint_delay_ms,
            )
            self.session = session

            game_logger.log_game_event(
                session.game_id, 'game_started',
                language=self.language, rule_set=self.rules.name
            )

            self._issue_hint(session)
            session.start_timers()
            self._save()
            return session

    def end_game(self) -> ActionResult:
        """Discards the current game and its save slot."""
        with self._lock:
            rules = self.session.rules if self.session is not None else self.rules
            if not rules.allow_end_game:
                return False, "Ending the game is not available in this mode"
            if self.session is None:
                return False, "No game in progress"

            session = self.session
            session.cancel_timers()
            self.session = None
            if self.store is not None:
                self.store.clear()

            game_logger.log_game_event(
                session.game_id, 'game_ended',
                target_found=session.target_found, game_over=session.game_over
            )
            return True, None

    def resume(self) -> bool:
        """
        Picks up the game from the save slot, if there is one in progress.

        Returns:
            bool: True if a saved game was resumed
        """
        with self._lock:
            if self.store is None:
                return False

            session = self.store.load(auto_hint_delay_ms=self.auto_hint_delay_ms)
            if session is None:
                return False

            if self.session is not None:
                self.session.cancel_timers()
            self.session = session
            self.language = session.language
            self.rules = session.rules

            session.start_timers()
            if session.phase in (TurnPhase.WAITING_FOR_HINT, TurnPhase.TURN_EXPIRED,
                                 TurnPhase.HINT_EXHAUSTED):
                session.auto_hint.schedule()

            game_logger.log_game_event(
                session.game_id, 'session_resumed',
                phase=session.phase.value, total_time_left=session.total_timer.remaining
            )
            return True

    def ensure_game(self) -> GameSession:
        """Resumes the saved game or starts a fresh one."""
        with self._lock:
            if self.session is None and not self.resume():
                self.new_game()
            return self.session

    # Player actions

    def request_hint(self) -> Optional[Hint]:
        """
        Issues the next hint.

        Returns:
            The new hint, or None if the game is over or no targets remain
        """
        with self._lock:
            if self.session is None or self.session.game_over:
                return None
            hint = self._issue_hint(self.session)
            if hint is not None:
                self._save()
            return hint

    def end_turn(self) -> ActionResult:
        """Banks the unused guesses and moves on to a new hint."""
        with self._lock:
            try:
                session = self._active_session()
                if not session.rules.allow_end_turn:
                    raise InvalidAction("Ending a turn is not available in this mode")
            except InvalidAction as e:
                return False, str(e)

            self._expire_turn(session, 'end_turn')
            self._save()
            return True, None

    def toggle_spymaster_view(self) -> ActionResult:
        """Shows or hides every card's role. Game state is unaffected."""
        with self._lock:
            if self.session is None:
                return False, "No game in progress"
            self.session.spymaster_view = not self.session.spymaster_view
            self._save()
            return True, None

    def click_card(self, index: int) -> ActionResult:
        """
        Reveals the card at ``index``.

        Returns:
            (applied, notice): notice explains why a click was ignored
        """
        with self._lock:
            try:
                session = self._active_session()
                if session.current_guesses <= 0:
                    raise InvalidAction(NO_GUESSES_NOTICE.get(session.language, NO_GUESSES_NOTICE['en']))
                if not isinstance(index, int) or not 0 <= index < len(session.cards):
                    raise InvalidAction(f"No card at position {index}")
                if session.cards[index].revealed:
                    raise InvalidAction("Card already revealed")
            except InvalidAction as e:
                return False, str(e)

            self._reveal(session, index)
            self._save()
            return True, None

    def set_language(self, language: str) -> ActionResult:
        """Switches word bank and starts a new game in that language."""
        with self._lock:
            if language not in self.word_banks:
                return False, f"Unsupported language '{language}'"
            self.language = language
            self.new_game()
            return True, None

    # Clock

    def advance(self, milliseconds: int) -> bool:
        """
        Moves every clock forward by ``milliseconds``.

        Fires a pending automatic hint once its delay has passed, ends the
        game when the overall clock runs out and rolls over to a new hint
        when the turn clock runs out.

        Returns:
            bool: True if anything visible changed
        """
        with self._lock:
            session = self.session
            if session is None or session.game_over or milliseconds <= 0:
                return False

            changed = False
            remaining = milliseconds
            while remaining > 0 and not session.game_over:
                step = min(remaining, MILLISECONDS_PER_TICK)
                remaining -= step
                turn_step = step

                due_ms = session.auto_hint.remaining_ms
                if session.auto_hint.advance(step):
                    changed = True
                    if self._issue_hint(session) is not None:
                        # The turn clock restarted when the hint arrived.
                        turn_step = step - due_ms

                if session.total_timer.advance(step):
                    changed = True
                    if session.total_timer.expired:
                        self._finish(session, TurnPhase.TIME_UP)
                        break

                if session.turn_timer is not None and session.turn_timer.advance(turn_step):
                    changed = True
                    if session.turn_timer.expired:
                        self._expire_turn(session, 'turn_timeout')

            if changed:
                self._save()
            return changed

    # Queries

    def get_view(self) -> Optional[GameView]:
        with self._lock:
            if self.session is None:
                return None
            return self.session.build_view()

    # Internals

    def _active_session(self) -> GameSession:
        if self.session is None:
            raise InvalidAction("No game in progress")
        if self.session.game_over:
            raise InvalidAction("Game is already over")
        return self.session

    def _issue_hint(self, session: GameSession) -> Optional[Hint]:
        categories = self.word_banks[session.language]['categories']
        used = session.used_categories if session.rules.track_used_categories else frozenset()
        hint = select_hint(session.unrevealed_targets(), categories, used, self.rng)
        if hint is None:
            return None

        session.apply_hint(hint)
        game_logger.log_game_event(
            session.game_id, 'hint_issued',
            hint=str(hint), guesses=session.current_guesses
        )
        return hint

    def _expire_turn(self, session: GameSession, reason: str) -> None:
        session.flush_guesses()
        game_logger.log_game_event(
            session.game_id, 'turn_ended',
            reason=reason, stored_guesses=session.stored_guesses
        )
        self._issue_hint(session)

    def _reveal(self, session: GameSession, index: int) -> None:
        card = session.cards[index]
        card.revealed = True
        session.revealed_words.add(card.word)
        wrong_guess = card.role in (Role.NEUTRAL, Role.OPPONENT)

        # With carry-over a wrong guess ends the turn and banks the whole
        # remaining budget; every other reveal spends one guess.
        if wrong_guess and session.rules.carry_over:
            session.flush_guesses()
        else:
            session.current_guesses -= 1

        game_logger.log_game_event(
            session.game_id, 'card_revealed',
            index=index, role=card.role.value, guesses_left=session.current_guesses
        )

        if card.role == Role.TRAP:
            self._finish(session, TurnPhase.LOST_TO_TRAP)
        elif card.role == Role.TARGET and not session.unrevealed_targets():
            self._finish(session, TurnPhase.WON)
        elif wrong_guess and session.rules.carry_over:
            self._schedule_next_hint(session, TurnPhase.TURN_EXPIRED)
        elif session.current_guesses == 0:
            self._schedule_next_hint(session, TurnPhase.HINT_EXHAUSTED)

    def _schedule_next_hint(self, session: GameSession, phase: TurnPhase) -> None:
        session.phase = phase
        session.auto_hint.schedule()

    def _finish(self, session: GameSession, reason: TurnPhase) -> None:
        outcome = session.finish(reason)
        if reason == TurnPhase.WON:
            event = 'game_won'
        elif reason == TurnPhase.TIME_UP:
            event = 'time_up'
        else:
            event = 'game_lost'

        game_logger.log_game_event(
            session.game_id, event,
            source='clock' if reason == TurnPhase.TIME_UP else 'engine',
            **outcome.to_dict()
        )

    def _save(self) -> None:
        if self.store is not None and self.session is not None:
            self.store.save(self.session)


def get_game_service() -> Optional[GameService]:
    """Get the game service attached to the running Flask app."""
    from flask import current_app
    return getattr(current_app, 'game_service', None)
