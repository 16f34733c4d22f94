"""
Game Data Models

Contains all game-related data structures and enums: the daily puzzle,
board tiles, keyboard statuses, the game phase and the persisted snapshot.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..config.game_settings import MAX_ROUNDS, WORD_LENGTH


class SnapshotDecodeError(ValueError):
    """Raised when persisted game data cannot be turned back into a snapshot."""


class TileResult(Enum):
    """Scoring result for a single letter of a submitted guess."""
    MISS = "miss"
    PRESENT = "present"
    CORRECT = "correct"


class KeyStatus(Enum):
    """Best-known status of a keyboard letter, ordered unknown < miss < present < correct."""
    UNKNOWN = "unknown"
    MISS = "miss"
    PRESENT = "present"
    CORRECT = "correct"

    @property
    def rank(self) -> int:
        return _KEY_STATUS_ORDER.index(self)

    def should_update(self, new_status: "KeyStatus") -> bool:
        """Statuses only ever upgrade: correct beats present beats miss."""
        return new_status.rank > self.rank

    @classmethod
    def from_result(cls, result: TileResult) -> "KeyStatus":
        return cls(result.value)


_KEY_STATUS_ORDER = [KeyStatus.UNKNOWN, KeyStatus.MISS, KeyStatus.PRESENT, KeyStatus.CORRECT]


class GamePhase(Enum):
    """Lifecycle of one puzzle session."""
    LOADING = "loading"
    PLAYING = "playing"
    REVEALING = "revealing"
    WON = "won"
    LOST = "lost"

    @property
    def is_over(self) -> bool:
        return self in (GamePhase.WON, GamePhase.LOST)


@dataclass(frozen=True)
class Puzzle:
    """Identity of the day's game. Immutable once loaded."""
    solution: str
    print_date: str
    days_since_launch: int
    id: Optional[int] = None
    editor: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'solution', self.solution.upper())

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Puzzle":
        """
        Builds a Puzzle from the daily-puzzle JSON payload.

        Raises:
            KeyError: If a required field is missing
            ValueError: If a field has the wrong shape
        """
        solution = payload['solution']
        if (not isinstance(solution, str) or len(solution) != WORD_LENGTH
                or not (solution.isascii() and solution.isalpha())):
            raise ValueError(f"Solution must be a {WORD_LENGTH}-letter word, got {solution!r}")

        return cls(
            solution=solution,
            print_date=str(payload['print_date']),
            days_since_launch=int(payload['days_since_launch']),
            id=payload.get('id'),
            editor=payload.get('editor')
        )


@dataclass
class Tile:
    """One board cell."""
    letter: str = ""
    result: Optional[TileResult] = None
    is_revealed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'letter': self.letter,
            'result': self.result.value if self.result else None,
            'is_revealed': self.is_revealed
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Tile":
        result = data.get('result')
        return cls(
            letter=check_letter(data.get('letter', "")),
            result=TileResult(result) if result is not None else None,
            is_revealed=bool(data.get('is_revealed', False))
        )


def check_letter(letter: Any) -> str:
    """Returns ``letter`` if it is empty or a single uppercase A-Z letter."""
    if not isinstance(letter, str) or len(letter) > 1:
        raise ValueError(f"Tile letter must be at most one character, got {letter!r}")
    if letter and not (letter.isascii() and letter.isupper()):
        raise ValueError(f"Tile letter must be an uppercase A-Z letter, got {letter!r}")
    return letter


def empty_board() -> List[List[Tile]]:
    """Returns a fresh MAX_ROUNDS x WORD_LENGTH board of empty tiles."""
    return [[Tile() for _ in range(WORD_LENGTH)] for _ in range(MAX_ROUNDS)]


@dataclass
class PersistedGameState:
    """Snapshot of an in-progress game, keyed by puzzle identity."""
    print_date: str
    days_since_launch: int
    board: List[List[Tile]] = field(default_factory=empty_board)
    current_row_index: int = 0
    current_col_index: int = 0
    keyboard_statuses: Dict[str, str] = field(default_factory=dict)
    phase: str = GamePhase.PLAYING.value
    submitted_rows_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Structured, JSON-compatible representation used by every store."""
        return {
            'print_date': self.print_date,
            'days_since_launch': self.days_since_launch,
            'board': [[tile.to_dict() for tile in row] for row in self.board],
            'current_row_index': self.current_row_index,
            'current_col_index': self.current_col_index,
            'keyboard_statuses': dict(self.keyboard_statuses),
            'phase': self.phase,
            'submitted_rows_count': self.submitted_rows_count
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PersistedGameState":
        """
        Rebuilds a snapshot from its structured representation.

        Raises:
            SnapshotDecodeError: If any field is missing or malformed
        """
        try:
            board = [[Tile.from_dict(tile) for tile in row] for row in data['board']]

            statuses = dict(data['keyboard_statuses'])
            for value in statuses.values():
                KeyStatus(value)

            state = cls(
                print_date=str(data['print_date']),
                days_since_launch=int(data['days_since_launch']),
                board=board,
                current_row_index=int(data['current_row_index']),
                current_col_index=int(data['current_col_index']),
                keyboard_statuses=statuses,
                phase=str(data['phase']),
                submitted_rows_count=int(data['submitted_rows_count'])
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise SnapshotDecodeError(f"Invalid persisted game state: {e}") from e

        state.validate()
        return state

    def validate(self) -> None:
        """
        Checks that the snapshot describes a board the engine can resume.

        The board must be MAX_ROUNDS x WORD_LENGTH with valid letters, the
        cursor must sit on the board, and the active row must be filled
        exactly up to the cursor column.

        Raises:
            SnapshotDecodeError: If any check fails
        """
        board, row, col = self.board, self.current_row_index, self.current_col_index
        try:
            if len(board) != MAX_ROUNDS or any(len(tiles) != WORD_LENGTH for tiles in board):
                raise ValueError(f"Board must be {MAX_ROUNDS}x{WORD_LENGTH}")
            for tile in (tile for tiles in board for tile in tiles):
                check_letter(tile.letter)

            if not (isinstance(row, int) and isinstance(col, int)):
                raise ValueError(f"Cursor ({row!r}, {col!r}) must be integers")
            if not (0 <= row < MAX_ROUNDS and 0 <= col <= WORD_LENGTH):
                raise ValueError(f"Cursor ({row}, {col}) is outside the board")

            active = board[row]
            if not all(tile.letter for tile in active[:col]) or any(tile.letter for tile in active[col:]):
                raise ValueError(f"Row {row} is not filled exactly up to column {col}")
        except (TypeError, ValueError, AttributeError) as e:
            raise SnapshotDecodeError(f"Invalid persisted game state: {e}") from e

