"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: Flask application configuration (environment-based)
- game_settings.py: Game rules and constants (business logic)
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .game_settings import (
    MAX_ROUNDS, WORD_LENGTH, REVEAL_DELAY_SECONDS, GAME_NAME, LOSS_MARKER,
    SHARE_GLYPHS, PERSISTENCE_KEY, KEYBOARD_ROWS, ENTER_KEY, DELETE_KEY,
    SPECIAL_KEYS, validate_game_settings
)

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config',
    # Game rules
    'MAX_ROUNDS', 'WORD_LENGTH', 'REVEAL_DELAY_SECONDS', 'GAME_NAME', 'LOSS_MARKER',
    'SHARE_GLYPHS', 'PERSISTENCE_KEY', 'KEYBOARD_ROWS', 'ENTER_KEY', 'DELETE_KEY',
    'SPECIAL_KEYS', 'validate_game_settings'
]
