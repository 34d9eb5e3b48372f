"""
Models Package

Contains all data models and structures.
"""

from .game import Card, CardView, GameOutcome, GameView, Hint, Role, TurnPhase

__all__ = ['Card', 'CardView', 'GameOutcome', 'GameView', 'Hint', 'Role', 'TurnPhase']
