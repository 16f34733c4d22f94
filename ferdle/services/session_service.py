"""
Session Service

Plays the part of the messaging-app container around the game engine:
loads today's puzzle, owns the storage backend, serialises access to the
engine and remembers whether the widget is loading, loaded or failed.
"""

import threading
from typing import Dict, Optional

from ..models.game import GamePhase
from ..utils.game_logger import game_logger
from .game_engine import GameEngine
from .persistence import GameStore, build_store
from .puzzle_service import PuzzleFetchError, PuzzleService
from .scheduler import BlockingScheduler, RevealScheduler

LOAD_STATE_LOADING = 'loading'
LOAD_STATE_LOADED = 'loaded'
LOAD_STATE_ERROR = 'error'


class SessionService:
    """
    Host-side wrapper around one GameEngine.

    Calls into the engine never wait on each other: while one call holds the
    engine (a reveal running inside a key press, for instance) any other call
    is turned away, the same way the engine turns away keys mid-reveal.
    """

    def __init__(self,
                 puzzle_service: PuzzleService,
                 store: GameStore,
                 scheduler: Optional[RevealScheduler] = None):
        self.puzzle_service = puzzle_service
        self.engine = GameEngine(store=store, scheduler=scheduler)
        self.load_state = LOAD_STATE_LOADING
        self.error_message: Optional[str] = None
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config) -> "SessionService":
        return cls(
            puzzle_service=PuzzleService.from_config(config),
            store=build_store(config),
            scheduler=BlockingScheduler(config.REVEAL_DELAY_SECONDS)
        )

    @property
    def is_loaded(self) -> bool:
        return self.load_state == LOAD_STATE_LOADED

    def load_puzzle(self, date: Optional[str] = None) -> Dict:
        """
        Fetches the puzzle and configures the engine (fresh start or resume).

        Calling it again after a failure is the retry.

        Raises:
            PuzzleFetchError: If the puzzle could not be fetched or decoded
        """
        self.load_state = LOAD_STATE_LOADING
        self.error_message = None

        try:
            puzzle = self.puzzle_service.fetch_puzzle(date)
        except PuzzleFetchError as e:
            self.load_state = LOAD_STATE_ERROR
            self.error_message = str(e)
            game_logger.log_error(None, e, 'load_puzzle', date)
            raise

        with self._lock:
            self.engine.configure(puzzle)
        self.load_state = LOAD_STATE_LOADED
        game_logger.log_game_event(puzzle.print_date, 'puzzle_loaded', days_since_launch=puzzle.days_since_launch)
        return self.get_state()

    def handle_key(self, key) -> bool:
        """Forwards a key press; False if it was ignored or the engine was busy."""
        if not self._lock.acquire(blocking=False):
            return False
        try:
            return self.engine.handle_key(key)
        finally:
            self._lock.release()

    def reset_game(self) -> bool:
        if not self._lock.acquire(blocking=False):
            return False
        try:
            return self.engine.reset_game()
        finally:
            self._lock.release()

    def share(self) -> Optional[str]:
        """Returns the share summary once the game is over, else None."""
        if not self.engine.phase.is_over:
            return None
        return self.engine.request_share()

    def get_state(self) -> Dict:
        state = self.engine.to_dict()
        state['load_state'] = self.load_state
        state['error_message'] = self.error_message
        return state

    def subscribe(self, listener):
        return self.engine.subscribe(listener)

    @property
    def phase(self) -> GamePhase:
        return self.engine.phase


# Global service instance
_session_service = None


def get_session_service() -> Optional[SessionService]:
    """Get the global session service instance."""
    return _session_service


def initialize_session_service(config) -> SessionService:
    """Initialize the global session service instance."""
    global _session_service
    _session_service = SessionService.from_config(config)
    return _session_service
