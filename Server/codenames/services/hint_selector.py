"""
Hint Selector

Greedy hint giver: the category that covers the most unrevealed targets wins.
"""

import random
from typing import AbstractSet, List, Mapping, Optional, Sequence

from ..config.game_settings import FALLBACK_MARKER, FALLBACK_PREFIX_LENGTH
from ..models.game import Hint


def best_category(unrevealed_targets: Sequence[str],
                  categories: Mapping[str, Sequence[str]],
                  used_categories: AbstractSet[str] = frozenset()) -> Optional[Hint]:
    """
    Finds the unused category with the largest overlap with the targets.

    Categories are scanned in mapping order and only a strictly larger
    overlap replaces the current best, so the first category wins ties.
    Returns None when no unused category matches any target.
    """
    targets = set(unrevealed_targets)
    best = None
    max_count = 0

    for name, members in categories.items():
        if name in used_categories:
            continue
        count = len(targets.intersection(members))
        if count > max_count:
            max_count = count
            best = Hint(label=name, count=count)

    return best


def fallback_hint(unrevealed_targets: Sequence[str], rng: random.Random) -> Hint:
    """One-word hint built from the first letters of a random target."""
    word = rng.choice(list(unrevealed_targets))
    return Hint(label=word[:FALLBACK_PREFIX_LENGTH] + FALLBACK_MARKER, count=1)


def select_hint(unrevealed_targets: Sequence[str],
                categories: Mapping[str, Sequence[str]],
                used_categories: AbstractSet[str] = frozenset(),
                rng: Optional[random.Random] = None) -> Optional[Hint]:
    """
    Picks the next hint for the player.

    Args:
        unrevealed_targets: Target words still face down, in board order
        categories: Ordered category name -> member words mapping
        used_categories: Category names that must not be offered again
        rng: Random source for the fallback hint

    Returns:
        Hint, or None when there are no targets left to hint at
    """
    if not unrevealed_targets:
        return None

    hint = best_category(unrevealed_targets, categories, used_categories)
    if hint is None:
        hint = fallback_hint(unrevealed_targets, rng or random.Random())
    return hint


def format_history(history: List[Hint], limit: int) -> List[str]:
    """Renders the last ``limit`` hints as "label: count"."""
    if limit <= 0:
        return []
    return [str(hint) for hint in history[-limit:]]
