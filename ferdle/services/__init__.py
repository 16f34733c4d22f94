"""
Services Package

Contains all business logic and service classes.
"""

from .game_engine import GameEngine, score_guess
from .persistence import GameStore, MemoryGameStore, JsonFileGameStore, MongoGameStore, build_store
from .puzzle_service import PuzzleService, PuzzleFetchError, today_date_string
from .scheduler import RevealScheduler, AsyncioScheduler, BlockingScheduler
from .session_service import SessionService, get_session_service, initialize_session_service

__all__ = [
    'GameEngine', 'score_guess',
    'GameStore', 'MemoryGameStore', 'JsonFileGameStore', 'MongoGameStore', 'build_store',
    'PuzzleService', 'PuzzleFetchError', 'today_date_string',
    'RevealScheduler', 'AsyncioScheduler', 'BlockingScheduler',
    'SessionService', 'get_session_service', 'initialize_session_service'
]
