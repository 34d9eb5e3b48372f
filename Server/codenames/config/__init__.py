"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: Flask application configuration (environment-based)
- game_settings.py: Rule sets, word banks and game constants
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .game_settings import (
    BOARD_SIZE, RULE_SETS, WORD_BANKS, InsufficientWordBank, RuleSet,
    get_rule_set, get_word_bank_statistics, validate_word_bank
)

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config',
    # Game rules
    'BOARD_SIZE', 'RULE_SETS', 'WORD_BANKS', 'InsufficientWordBank', 'RuleSet',
    'get_rule_set', 'get_word_bank_statistics', 'validate_word_bank'
]
