"""
Game Configuration Constants Module

This module defines the rule sets and the per-language word banks.
All game parameters are centralized here to enable easy modification.
"""

import json
import os
from dataclasses import dataclass
from typing import Dict, Final, List, Mapping, Optional

BOARD_SIZE: Final[int] = 25
"""
Number of cards on every board (5x5 grid).
"""

HINT_HISTORY_LENGTH: Final[int] = 3
FALLBACK_PREFIX_LENGTH: Final[int] = 3
FALLBACK_MARKER: Final[str] = "..."

TOTAL_TIMER_WARNING_SECONDS: Final[int] = 60
TURN_TIMER_WARNING_SECONDS: Final[int] = 30


class InsufficientWordBank(ValueError):
    """Raised when a language cannot fill a board with distinct words."""


@dataclass(frozen=True)
class RuleSet:
    """
    One playable variant of the game.

    Role counts must fill the board exactly and there is always a single
    Trap card. ``turn_seconds`` is None for variants without a per-turn clock.
    """
    name: str
    target_count: int
    neutral_count: int
    trap_count: int = 1
    opponent_count: int = 0
    carry_over: bool = True
    turn_seconds: Optional[int] = 2 * 60
    total_seconds: int = 20 * 60
    track_used_categories: bool = False
    allow_end_turn: bool = True
    allow_end_game: bool = False

    def __post_init__(self):
        total = self.target_count + self.opponent_count + self.neutral_count + self.trap_count
        if total != BOARD_SIZE:
            raise ValueError(f"Rule set '{self.name}' assigns {total} cards, expected {BOARD_SIZE}")
        if self.trap_count != 1:
            raise ValueError(f"Rule set '{self.name}' must have exactly one trap card")
        if self.target_count < 1:
            raise ValueError(f"Rule set '{self.name}' needs at least one target card")


# Turn-based play: wrong guesses end the turn, unused guesses carry over
TURN_RULES: Final[RuleSet] = RuleSet(
    name="turns",
    target_count=8,
    neutral_count=16,
)

# No turns: guess until the hint is used up, categories are never repeated
FREE_RULES: Final[RuleSet] = RuleSet(
    name="free",
    target_count=9,
    neutral_count=15,
    carry_over=False,
    turn_seconds=None,
    track_used_categories=True,
    allow_end_turn=False,
    allow_end_game=True,
)

# Original red/blue layout; blue cards count only when the clock runs out
CLASSIC_RULES: Final[RuleSet] = RuleSet(
    name="classic",
    target_count=8,
    opponent_count=7,
    neutral_count=9,
)

RULE_SETS: Final[Dict[str, RuleSet]] = {
    rules.name: rules for rules in (TURN_RULES, FREE_RULES, CLASSIC_RULES)
}


def get_rule_set(name: str) -> RuleSet:
    """
    Look up a rule set by name.

    Raises:
        ValueError: If no rule set has that name
    """
    try:
        return RULE_SETS[name]
    except KeyError:
        raise ValueError(f"Unknown rule set '{name}'. Choose from: {', '.join(RULE_SETS)}")


NO_GUESSES_NOTICE: Final[Dict[str, str]] = {
    'vi': 'Hết lượt đoán! Nhấn "Gợi ý mới" hoặc "Kết thúc lượt".',
    'en': 'No guesses left! Click "New Hint" or "End Turn".',
    'fr': 'Plus de tentatives! Cliquez sur "Nouvel Indice" ou "Fin du Tour".',
    'de': 'Keine Versuche mehr! Klicken Sie auf "Neuer Hinweis" oder "Runde Beenden".',
}


def validate_word_bank(language: str, bank: Mapping) -> None:
    """
    Validates one language's word bank.

    Checks that the bank has a word list with at least BOARD_SIZE distinct
    entries and a category mapping whose values are lists of words.

    Raises:
        InsufficientWordBank: If the language cannot fill a board
        ValueError: If the bank is malformed
    """
    words = bank.get("words")
    categories = bank.get("categories")

    if not isinstance(words, list):
        raise ValueError(f"Word bank '{language}' must contain a 'words' array")
    if not isinstance(categories, dict):
        raise ValueError(f"Word bank '{language}' must contain a 'categories' object")

    if len(set(words)) != len(words):
        duplicates = sorted({word for word in words if words.count(word) > 1})
        raise ValueError(f"Duplicate words found in word bank '{language}': {duplicates}")

    if len(words) < BOARD_SIZE:
        raise InsufficientWordBank(
            f"Word bank '{language}' has {len(words)} words, at least {BOARD_SIZE} are required"
        )

    for name, members in categories.items():
        if not isinstance(members, list):
            raise ValueError(f"Category '{name}' in word bank '{language}' must be an array")


def _load_word_banks() -> Dict[str, Dict]:
    """
    Load and validate word_banks.json.

    Returns:
        Dict mapping language code to {"words": [...], "categories": {...}}.
        Category order follows the file, which decides hint tie-breaks.

    Raises:
        FileNotFoundError: If word_banks.json is missing
        ValueError: If the file is malformed or a language is too small
    """
    config_dir = os.path.dirname(os.path.abspath(__file__))
    json_file_path = os.path.join(config_dir, 'word_banks.json')

    try:
        with open(json_file_path, 'r', encoding='utf-8') as f:
            banks = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Word bank file not found: {json_file_path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in word_banks.json: {e}")

    if not isinstance(banks, dict) or not banks:
        raise ValueError("word_banks.json must contain at least one language")

    for language, bank in banks.items():
        validate_word_bank(language, bank)

    return banks


# Word banks loaded from JSON file
WORD_BANKS: Final[Dict[str, Dict]] = _load_word_banks()


def get_word_bank_statistics(banks: Optional[Mapping[str, Mapping]] = None) -> dict:
    """
    Summarises each language's word bank for balancing hints.

    Returns:
        dict keyed by language with:
            - total_words: Number of words on offer
            - total_categories: Number of hint categories
            - covered_words: Words that belong to at least one category
            - largest_category: (name, size) of the biggest category
    """
    if banks is None:
        banks = WORD_BANKS

    stats = {}
    for language, bank in banks.items():
        words: List[str] = bank["words"]
        categories: Dict[str, List[str]] = bank["categories"]
        word_set = set(words)
        covered = set()
        for members in categories.values():
            covered.update(word for word in members if word in word_set)

        largest = max(categories.items(), key=lambda item: len(item[1]), default=(None, []))
        stats[language] = {
            "total_words": len(words),
            "total_categories": len(categories),
            "covered_words": len(covered),
            "largest_category": (largest[0], len(largest[1])),
        }
    return stats


if __name__ == "__main__":

    try:
        for code, word_bank in WORD_BANKS.items():
            validate_word_bank(code, word_bank)
        print(" Word bank validation passed")

        print(f" Word bank statistics: {get_word_bank_statistics()}")
    except ValueError as config_error:
        print(f" Configuration validation failed: {config_error}")
        exit(1)
