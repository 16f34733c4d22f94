"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game import (
    GamePhase, KeyStatus, PersistedGameState, Puzzle, SnapshotDecodeError,
    Tile, TileResult, empty_board
)

__all__ = [
    'GamePhase', 'KeyStatus', 'PersistedGameState', 'Puzzle', 'SnapshotDecodeError',
    'Tile', 'TileResult', 'empty_board'
]
