"""
Pytest configuration for Ferdle.

Keeps log files out of the working tree and provides a puzzle, an engine
with an immediate reveal clock, and a helper to type whole guesses.
"""

import os
import tempfile

# Must be set before ferdle.config is imported anywhere.
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="ferdle-logs-"))
os.environ.setdefault("STORAGE_BACKEND", "memory")

import pytest

from ferdle.models.game import Puzzle
from ferdle.services.game_engine import GameEngine
from ferdle.services.persistence import MemoryGameStore
from ferdle.services.scheduler import BlockingScheduler


class RecordingStore(MemoryGameStore):
    """Memory store that remembers every snapshot saved and every clear."""

    def __init__(self):
        super().__init__()
        self.saved = []
        self.clear_count = 0

    def save(self, state):
        self.saved.append(state)
        super().save(state)

    def clear(self):
        self.clear_count += 1
        super().clear()


def type_word(engine, word, submit=True):
    for letter in word:
        engine.handle_key(letter)
    if submit:
        engine.handle_key("ENTER")


@pytest.fixture
def puzzle():
    return Puzzle(solution="crane", print_date="2024-06-01", days_since_launch=1443, id=2500, editor="Tracy Bennett")


@pytest.fixture
def other_puzzle():
    return Puzzle(solution="slate", print_date="2024-06-02", days_since_launch=1444)


@pytest.fixture
def store():
    return RecordingStore()


@pytest.fixture
def engine(store, puzzle):
    engine = GameEngine(store=store, scheduler=BlockingScheduler(delay=0))
    engine.configure(puzzle)
    return engine
