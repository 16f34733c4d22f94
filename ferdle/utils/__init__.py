"""
Utilities Package

Contains the game logger and the Flask/Socket.IO handler decorators.
The decorators are imported from ``ferdle.utils.decorators`` directly so
that importing the logger does not pull in the web stack.
"""

from .game_logger import game_logger, GameLogger

__all__ = ['game_logger', 'GameLogger']
