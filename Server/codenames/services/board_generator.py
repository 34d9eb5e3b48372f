"""
Board Generator

Deals 25 words into role groups and lays them out in random order.
"""

import random
from typing import List, Optional, Sequence

from ..config.game_settings import BOARD_SIZE, InsufficientWordBank, RuleSet
from ..models.game import Card, Role


def role_layout(rules: RuleSet) -> List[Role]:
    """Roles in dealing order: targets, opponents, neutrals, then the trap."""
    return (
        [Role.TARGET] * rules.target_count +
        [Role.OPPONENT] * rules.opponent_count +
        [Role.NEUTRAL] * rules.neutral_count +
        [Role.TRAP] * rules.trap_count
    )


def generate_board(words: Sequence[str], rules: RuleSet,
                   rng: Optional[random.Random] = None) -> List[Card]:
    """
    Creates a new board for one game.

    Words are sampled without replacement before roles are known, paired
    with the rule set's roles, and the pairs are shuffled for display.

    Args:
        words: The language's word list
        rules: Rule set giving the role counts
        rng: Random source (module-level random when omitted)

    Returns:
        List of BOARD_SIZE unrevealed cards

    Raises:
        InsufficientWordBank: If fewer than BOARD_SIZE distinct words are given
    """
    rng = rng or random.Random()
    distinct_words = list(dict.fromkeys(words))
    if len(distinct_words) < BOARD_SIZE:
        raise InsufficientWordBank(
            f"Need at least {BOARD_SIZE} distinct words to deal a board, got {len(distinct_words)}"
        )

    sampled = rng.sample(distinct_words, BOARD_SIZE)
    board = [Card(word=word, role=role) for word, role in zip(sampled, role_layout(rules))]
    rng.shuffle(board)
    return board
