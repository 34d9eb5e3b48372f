"""
Pytest configuration for the Codenames game server.

Provides a small word bank with known categories, pre-dealt boards and
services wired to a save slot under the test's temporary directory.
"""

import os
import random
import tempfile

# Keep log files out of the working tree; must run before codenames is imported.
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="codenames-logs-"))

import pytest

from codenames.config.game_settings import CLASSIC_RULES, FREE_RULES, TURN_RULES
from codenames.models.game import Card, Role
from codenames.services.game_service import GameService
from codenames.services.persistence import SaveSlotStore


TARGETS = ["LION", "TIGER", "EAGLE", "APPLE", "BREAD", "RIVER", "CLOUD", "PIANO", "GUITAR"]
OPPONENTS = ["HONEY", "LEMON", "BRIDGE", "CASTLE", "TOWER", "MARKET", "SCHOOL"]
NEUTRALS = [
    "SHARK", "MOON", "STAR", "COMET", "HONEY", "LEMON", "BRIDGE", "CASTLE",
    "TOWER", "MARKET", "SCHOOL", "DRUM", "KEY", "LOCK", "MIRROR", "CLOCK",
]
TRAP = "CANDLE"

TEST_WORD_BANKS = {
    "en": {
        "words": TARGETS + NEUTRALS + [TRAP, "ROCKET", "FOREST", "OCEAN", "STORM"],
        "categories": {
            "Animals": ["LION", "TIGER", "EAGLE", "SHARK"],
            "Food": ["APPLE", "BREAD", "HONEY", "LEMON"],
            "Space": ["MOON", "STAR", "COMET", "ROCKET"],
            "Nature": ["RIVER", "CLOUD", "FOREST", "OCEAN", "STORM"],
        },
    },
    "fr": {
        "words": [f"MOT{i:02d}" for i in range(30)],
        "categories": {
            "Premiers": ["MOT00", "MOT01", "MOT02"],
        },
    },
}


def build_board(rules):
    """
    Deterministic board for a rule set, dealt in role order.

    Targets come first, then opponents, neutrals and finally the trap, so
    card indices are predictable in tests.
    """
    targets = TARGETS[:rules.target_count]
    opponents = OPPONENTS[:rules.opponent_count]
    taken = set(targets) | set(opponents)
    neutral_pool = [word for word in NEUTRALS + TARGETS[rules.target_count:] if word not in taken]
    neutrals = neutral_pool[:rules.neutral_count]

    return (
        [Card(word, Role.TARGET) for word in targets] +
        [Card(word, Role.OPPONENT) for word in opponents] +
        [Card(word, Role.NEUTRAL) for word in neutrals] +
        [Card(TRAP, Role.TRAP)]
    )


def index_of(service, word):
    """Board position of ``word`` in the service's current game."""
    return next(i for i, card in enumerate(service.session.cards) if card.word == word)


def first_index(service, role):
    """Board position of the first unrevealed card with ``role``."""
    return next(
        i for i, card in enumerate(service.session.cards)
        if card.role == role and not card.revealed
    )


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def store(tmp_path):
    return SaveSlotStore(str(tmp_path / "saves"), "test-slot")


def _service(rules, store, rng):
    return GameService(
        word_banks=TEST_WORD_BANKS,
        rules=rules,
        store=store,
        rng=rng,
        language="en",
        auto_hint_delay_ms=500,
    )


@pytest.fixture
def turn_service(store, rng):
    """Turn-based rules, board dealt with build_board."""
    service = _service(TURN_RULES, store, rng)
    service.new_game(cards=build_board(TURN_RULES))
    return service


@pytest.fixture
def free_service(store, rng):
    """No-turn rules, board dealt with build_board."""
    service = _service(FREE_RULES, store, rng)
    service.new_game(cards=build_board(FREE_RULES))
    return service


@pytest.fixture
def classic_service(store, rng):
    """Original red/blue layout with opponent cards."""
    service = _service(CLASSIC_RULES, store, rng)
    service.new_game(cards=build_board(CLASSIC_RULES))
    return service


@pytest.fixture
def make_service(store, rng):
    """Factory for services without a game in progress."""
    def factory(rules=TURN_RULES, with_store=True):
        return _service(rules, store if with_store else None, rng)
    return factory
