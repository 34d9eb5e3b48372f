"""
Tests for codenames.services.game_service module.
"""

import pytest

from codenames.config.game_settings import FREE_RULES, NO_GUESSES_NOTICE
from codenames.models.game import Hint, Role, TurnPhase

from conftest import TRAP, index_of


def reveal(service, indices):
    """Flip cards without going through the guess budget."""
    for index in indices:
        card = service.session.cards[index]
        card.revealed = True
        service.session.revealed_words.add(card.word)


def test_new_game_issues_first_hint(turn_service):
    """Animals covers three unrevealed targets and nothing covers more."""
    session = turn_service.session

    assert session.current_hint == Hint("Animals", 3)
    assert session.current_guesses == 3
    assert session.phase == TurnPhase.AWAITING_GUESSES
    assert session.total_timer.running
    assert session.turn_timer.running
    assert len(session.cards) == 25


def test_request_hint_sets_budget(turn_service):
    hint = turn_service.request_hint()

    assert hint == Hint("Animals", 3)
    assert turn_service.session.current_guesses == 3


def test_target_reveal_decrements_budget(turn_service):
    applied, notice = turn_service.click_card(index_of(turn_service, "LION"))

    assert applied and notice is None
    assert turn_service.session.current_guesses == 2
    assert turn_service.session.target_found == 1
    assert turn_service.session.phase == TurnPhase.AWAITING_GUESSES


def test_wrong_guess_banks_remaining_guesses(turn_service):
    """Budget 1, neutral reveal: the remaining guess carries into the next hint."""
    turn_service.click_card(index_of(turn_service, "LION"))
    turn_service.click_card(index_of(turn_service, "TIGER"))
    assert turn_service.session.current_guesses == 1

    turn_service.click_card(index_of(turn_service, "SHARK"))
    session = turn_service.session

    assert session.current_guesses == 0
    assert session.stored_guesses == 1
    assert session.phase == TurnPhase.TURN_EXPIRED

    turn_service.advance(499)
    assert session.current_hint == Hint("Animals", 3)

    turn_service.advance(1)
    assert session.current_hint == Hint("Food", 2)
    assert session.current_guesses == 3
    assert session.stored_guesses == 0
    assert session.phase == TurnPhase.AWAITING_GUESSES


def test_auto_hint_mid_step_restarts_turn_clock(turn_service):
    """The new turn is charged only for the time after its hint arrived."""
    for word in ("LION", "TIGER", "SHARK"):
        turn_service.click_card(index_of(turn_service, word))

    turn_service.advance(1000)
    session = turn_service.session

    assert session.current_hint == Hint("Food", 2)
    assert session.turn_timer.remaining == 120
    assert session.total_timer.remaining == 20 * 60 - 1

    turn_service.advance(500)
    assert session.turn_timer.remaining == 119


def test_exhausted_hint_requests_next_one(turn_service):
    for word in ("LION", "TIGER", "EAGLE"):
        turn_service.click_card(index_of(turn_service, word))

    session = turn_service.session
    assert session.current_guesses == 0
    assert session.phase == TurnPhase.HINT_EXHAUSTED

    turn_service.advance(500)

    assert session.current_hint == Hint("Food", 2)
    assert session.current_guesses == 2


def test_no_turn_rules_wrong_guess_keeps_turn(free_service):
    session = free_service.session
    assert session.current_guesses == 3

    free_service.click_card(index_of(free_service, "SHARK"))
    assert session.current_guesses == 2
    assert session.stored_guesses == 0
    assert session.phase == TurnPhase.AWAITING_GUESSES
    assert not session.auto_hint.pending

    free_service.click_card(index_of(free_service, "MOON"))
    free_service.click_card(index_of(free_service, "LION"))
    assert session.current_guesses == 0
    assert session.phase == TurnPhase.HINT_EXHAUSTED

    free_service.advance(500)

    assert session.current_hint == Hint("Food", 2)
    assert session.current_guesses == 2


def test_no_turn_rules_never_repeat_category(free_service):
    labels = [free_service.session.current_hint.label]
    for _ in range(3):
        labels.append(free_service.request_hint().label)

    assert labels[:3] == ["Animals", "Food", "Nature"]
    assert labels[3].endswith("...")
    assert len(set(labels)) == len(labels)
    assert {"Animals", "Food", "Nature"} <= free_service.session.used_categories


def test_turn_rules_repeat_category(turn_service):
    assert turn_service.request_hint() == Hint("Animals", 3)
    assert turn_service.request_hint() == Hint("Animals", 3)
    assert turn_service.session.used_categories == set()


def test_budget_never_negative(turn_service):
    for word in ("LION", "TIGER", "EAGLE"):
        turn_service.click_card(index_of(turn_service, word))

    applied, notice = turn_service.click_card(index_of(turn_service, "APPLE"))

    assert not applied
    assert notice == NO_GUESSES_NOTICE["en"]
    assert turn_service.session.current_guesses == 0
    assert not turn_service.session.cards[index_of(turn_service, "APPLE")].revealed


def test_click_revealed_card_is_ignored(turn_service):
    index = index_of(turn_service, "LION")
    turn_service.click_card(index)

    applied, notice = turn_service.click_card(index)

    assert not applied
    assert notice == "Card already revealed"
    assert turn_service.session.current_guesses == 2


def test_click_out_of_range(turn_service):
    applied, notice = turn_service.click_card(99)
    assert not applied
    assert "99" in notice


def test_trap_on_first_click_loses(turn_service):
    applied, _ = turn_service.click_card(index_of(turn_service, TRAP))
    session = turn_service.session

    assert applied
    assert session.game_over
    assert session.phase == TurnPhase.LOST_TO_TRAP
    assert session.outcome.player_won is False
    assert not session.total_timer.running
    assert not session.turn_timer.running
    assert all(card.revealed for card in session.cards)
    assert session.revealed_words == {TRAP}


def test_actions_after_game_over_are_ignored(turn_service):
    turn_service.click_card(index_of(turn_service, TRAP))
    total_before = turn_service.session.total_timer.remaining

    assert turn_service.click_card(0) == (False, "Game is already over")
    assert turn_service.request_hint() is None
    assert turn_service.end_turn()[0] is False
    assert turn_service.advance(5000) is False
    assert turn_service.session.total_timer.remaining == total_before


def test_all_targets_win_with_budget_left(turn_service):
    session = turn_service.session
    session.current_guesses = 10
    targets = [i for i, card in enumerate(session.cards) if card.role == Role.TARGET]

    for index in targets:
        turn_service.click_card(index)

    assert session.phase == TurnPhase.WON
    assert session.game_over
    assert session.current_guesses == 2
    assert session.outcome.player_won
    assert session.outcome.target_found == 8


def test_end_turn_carries_over(turn_service):
    turn_service.advance(10_000)
    turn_service.click_card(index_of(turn_service, "LION"))

    applied, notice = turn_service.end_turn()
    session = turn_service.session

    assert applied and notice is None
    assert session.current_hint == Hint("Animals", 2)
    assert session.current_guesses == 4
    assert session.stored_guesses == 0
    assert session.turn_timer.remaining == 120
    assert session.total_timer.remaining == 20 * 60 - 10


def test_end_turn_not_available_without_turns(free_service):
    applied, notice = free_service.end_turn()
    assert not applied
    assert "not available" in notice
    assert free_service.session.current_guesses == 3


def test_turn_timer_expiry_flushes_and_rehints(turn_service):
    turn_service.advance(120_000)
    session = turn_service.session

    assert session.current_guesses == 6
    assert session.stored_guesses == 0
    assert session.turn_timer.remaining == 120
    assert session.turn_timer.running
    assert session.total_timer.remaining == 20 * 60 - 120
    assert [str(h) for h in session.hint_history] == ["Animals: 3", "Animals: 3"]


def test_time_up_player_ahead_wins(classic_service):
    reveal(classic_service, [0, 1, 2, 3, 4, 8, 9, 10])

    classic_service.advance(20 * 60 * 1000)
    session = classic_service.session

    assert session.phase == TurnPhase.TIME_UP
    assert session.outcome.target_found == 5
    assert session.outcome.opponent_found == 3
    assert session.outcome.player_won


def test_time_up_player_behind_loses(classic_service):
    reveal(classic_service, [0, 1, 8, 9, 10])

    classic_service.advance(20 * 60 * 1000)
    outcome = classic_service.session.outcome

    assert outcome.reason == TurnPhase.TIME_UP
    assert not outcome.player_won


def test_time_up_without_opponents(free_service):
    free_service.advance(20 * 60 * 1000)
    session = free_service.session

    assert session.phase == TurnPhase.TIME_UP
    assert session.total_timer.remaining == 0
    assert not session.outcome.player_won


def test_new_game_cancels_old_clocks(turn_service):
    old = turn_service.session
    old.auto_hint.schedule()

    turn_service.new_game()

    assert not old.total_timer.running
    assert not old.turn_timer.running
    assert not old.auto_hint.pending
    assert turn_service.session is not old
    assert turn_service.session.total_timer.running


def test_spymaster_view_shows_roles(turn_service):
    view = turn_service.get_view()
    assert all(card.role is None for card in view.cards)

    turn_service.toggle_spymaster_view()
    view = turn_service.get_view()

    assert view.spymaster_view
    assert [card.role for card in view.cards].count("trap") == 1
    assert turn_service.session.current_guesses == 3


def test_revealed_card_role_visible(turn_service):
    index = index_of(turn_service, "LION")
    turn_service.click_card(index)

    view = turn_service.get_view()

    assert view.cards[index].role == "target"
    assert view.cards[index + 1].role is None


def test_view_is_idempotent(turn_service):
    turn_service.click_card(0)
    assert turn_service.get_view() == turn_service.get_view()


def test_view_contents(turn_service):
    for _ in range(4):
        turn_service.request_hint()

    view = turn_service.get_view()

    assert view.current_hint == "Animals: 3"
    assert view.hint_history == ["Animals: 3"] * 3
    assert view.guesses_left == 3
    assert view.target_total == 8
    assert view.total_clock == "20:00"
    assert view.turn_clock == "2:00"
    assert view.can_end_turn and not view.can_end_game
    assert view.outcome is None


def test_timer_warnings(turn_service):
    turn_service.advance(91_000)
    view = turn_service.get_view()

    assert view.turn_timer_warning
    assert not view.total_timer_warning


def test_free_rules_view_has_no_turn_clock(free_service):
    view = free_service.get_view()
    assert view.turn_time_left is None
    assert view.turn_clock is None
    assert view.can_end_game and not view.can_end_turn


def test_end_game_clears_session(free_service, store):
    assert store.path.exists()

    applied, notice = free_service.end_game()

    assert applied and notice is None
    assert free_service.get_view() is None
    assert not store.path.exists()


def test_end_game_not_available_with_turns(turn_service):
    applied, notice = turn_service.end_game()
    assert not applied
    assert turn_service.session is not None


def test_set_language(turn_service):
    applied, _ = turn_service.set_language("fr")

    assert applied
    assert turn_service.session.language == "fr"
    assert all(card.word.startswith("MOT") for card in turn_service.session.cards)


def test_set_unknown_language(turn_service):
    game_id = turn_service.session.game_id

    applied, notice = turn_service.set_language("de")

    assert not applied
    assert "de" in notice
    assert turn_service.session.game_id == game_id


def test_actions_without_game(make_service):
    service = make_service()

    assert service.get_view() is None
    assert service.click_card(0) == (False, "No game in progress")
    assert service.toggle_spymaster_view()[0] is False
    assert service.request_hint() is None
    assert service.advance(1000) is False


def test_ensure_game_starts_fresh(make_service):
    service = make_service(FREE_RULES)
    session = service.ensure_game()

    assert session.rules is FREE_RULES
    assert len(session.cards) == 25
    assert session.current_hint is not None


def test_unknown_default_language():
    from codenames.services.game_service import GameService
    with pytest.raises(ValueError):
        GameService(word_banks={}, language="en")


def test_finish_requires_an_ending(turn_service):
    session = turn_service.session

    assert not TurnPhase.AWAITING_GUESSES.is_terminal
    with pytest.raises(ValueError):
        session.finish(TurnPhase.AWAITING_GUESSES)
    assert not session.game_over
