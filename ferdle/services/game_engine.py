"""
Game Engine

Contains the core game logic for the daily puzzle: input routing, guess
scoring, keyboard aggregation, the reveal sequence, end-of-game detection,
persistence of in-progress games and the share summary.

The engine is framework-free. Hosts read its state through ``to_dict`` and
are told about changes through listeners registered with ``subscribe``.
"""

import copy
from collections import Counter
from typing import Callable, Dict, List, Optional

from ..config.game_settings import (
    MAX_ROUNDS, WORD_LENGTH, REVEAL_DELAY_SECONDS, GAME_NAME, LOSS_MARKER,
    SHARE_GLYPHS, ENTER_KEY, DELETE_KEY, KEYBOARD_ROWS, SPECIAL_KEYS
)
from ..models.game import (
    GamePhase, KeyStatus, PersistedGameState, Puzzle, SnapshotDecodeError, TileResult,
    empty_board
)
from ..utils.game_logger import game_logger
from .persistence import GameStore, MemoryGameStore
from .scheduler import BlockingScheduler, RevealScheduler

Listener = Callable[[str, Dict], None]


def score_guess(guess: str, solution: str) -> List[TileResult]:
    """
    Implements the Wordle letter evaluation algorithm.

    Exact matches are marked first and consume their letter, so a letter
    guessed twice against a solution that holds it once gets exactly one
    non-miss mark. Both words must be WORD_LENGTH letters long.
    """
    guess = guess.upper()
    solution = solution.upper()
    results = [TileResult.MISS] * WORD_LENGTH
    remaining = Counter(solution)

    # First pass: exact position matches
    for i in range(WORD_LENGTH):
        if guess[i] == solution[i]:
            results[i] = TileResult.CORRECT
            remaining[guess[i]] -= 1

    # Second pass: letters elsewhere in the solution, while any are left
    for i in range(WORD_LENGTH):
        if results[i] is TileResult.CORRECT:
            continue
        if remaining[guess[i]] > 0:
            results[i] = TileResult.PRESENT
            remaining[guess[i]] -= 1

    return results


class GameEngine:
    """
    Single source of truth for one puzzle session.

    This class handles:
    - Fresh start vs resume when a puzzle is configured
    - Key routing (letters, ENTER, DELETE) while the game is playing
    - Scoring, the staged tile reveal and win/loss detection
    - Best-known keyboard letter statuses
    - Saving the snapshot while in progress and clearing it once the game ends
    """

    def __init__(self, store: Optional[GameStore] = None, scheduler: Optional[RevealScheduler] = None):
        self.store = store if store is not None else MemoryGameStore()
        self.scheduler = scheduler if scheduler is not None else BlockingScheduler(REVEAL_DELAY_SECONDS)

        self.puzzle: Optional[Puzzle] = None
        self.board = empty_board()
        self.current_row_index = 0
        self.current_col_index = 0
        self.phase = GamePhase.LOADING
        self.keyboard_statuses: Dict[str, KeyStatus] = {}
        self.submitted_rows_count = 0

        self._listeners: List[Listener] = []
        # Bumped on configure/reset so an in-flight reveal knows it is stale
        self._generation = 0

    # Observers

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Registers ``listener(event, payload)`` for every observable change.

        Returns:
            A callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: str, **payload) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, payload)
            except Exception as e:
                game_logger.log_error(None, e, f'listener_{event}', self._puzzle_id)

    @property
    def _puzzle_id(self) -> Optional[str]:
        return self.puzzle.print_date if self.puzzle else None

    @property
    def solution(self) -> str:
        return self.puzzle.solution if self.puzzle else ""

    # Configuration

    def configure(self, puzzle: Puzzle,
                  load_persisted: Optional[Callable[[], Optional[PersistedGameState]]] = None) -> None:
        """
        Configures the engine for ``puzzle``.

        Restores the persisted snapshot when it belongs to the same puzzle
        (same print date and day index); otherwise starts fresh.

        Args:
            puzzle: Today's puzzle
            load_persisted: Snapshot lookup, defaults to the store's ``load``
        """
        self.puzzle = puzzle
        self._generation += 1

        persisted = self._guarded('load', load_persisted or self.store.load)
        if persisted is not None:
            try:
                persisted.validate()
            except SnapshotDecodeError as e:
                game_logger.log_error(None, e, 'load', self._puzzle_id)
                persisted = None

        if (persisted is not None
                and persisted.print_date == puzzle.print_date
                and persisted.days_since_launch == puzzle.days_since_launch):
            self._restore(persisted)
            game_logger.log_game_event(
                self._puzzle_id, 'game_resumed',
                row=self.current_row_index, col=self.current_col_index, phase=self.phase.value
            )
        else:
            self._reset_board()
            self.phase = GamePhase.PLAYING

        self._emit('configured', state=self.to_dict())

    def _restore(self, persisted: PersistedGameState) -> None:
        self.board = copy.deepcopy(persisted.board)
        self.current_row_index = persisted.current_row_index
        self.current_col_index = persisted.current_col_index
        self.submitted_rows_count = persisted.submitted_rows_count

        statuses = {}
        for key, value in persisted.keyboard_statuses.items():
            # Malformed keys are dropped rather than failing the resume
            if not isinstance(key, str):
                continue
            key = key.upper()
            if len(key) != 1 or not ("A" <= key <= "Z"):
                continue
            try:
                statuses[key] = KeyStatus(value)
            except ValueError:
                continue
        self.keyboard_statuses = statuses

        try:
            self.phase = GamePhase(persisted.phase)
        except ValueError:
            self.phase = GamePhase.PLAYING

    def _reset_board(self) -> None:
        self.board = empty_board()
        self.current_row_index = 0
        self.current_col_index = 0
        self.keyboard_statuses = {}
        self.submitted_rows_count = 0

    def reset_game(self) -> bool:
        """
        Clears persisted state and starts the current puzzle over, whatever the phase.

        Returns:
            bool: False only when no puzzle has been configured yet
        """
        if self.puzzle is None:
            return False

        self._generation += 1
        self.clear_persisted_state()
        self._reset_board()
        self.phase = GamePhase.PLAYING

        game_logger.log_game_event(self._puzzle_id, 'game_reset')
        self._emit('reset', state=self.to_dict())
        return True

    # Input handling

    def handle_key(self, key) -> bool:
        """
        Routes a key press. Anything other than A-Z, ENTER or DELETE is ignored,
        as is every key while the game is not playing.

        Returns:
            bool: True if the key changed the game state
        """
        if self.phase is not GamePhase.PLAYING or not isinstance(key, str):
            return False

        if key == ENTER_KEY:
            return self.submit_guess()
        if key == DELETE_KEY:
            return self.delete_letter()
        if len(key) == 1 and key.isascii() and key.isalpha():
            return self.append_letter(key)
        return False

    def append_letter(self, letter: str) -> bool:
        """Appends a letter to the current row if there's room."""
        if self.phase is not GamePhase.PLAYING or self.current_col_index >= WORD_LENGTH:
            return False

        row, col = self.current_row_index, self.current_col_index
        self.board[row][col].letter = letter.upper()
        self.current_col_index += 1

        self._emit('letter_added', row=row, col=col, letter=letter.upper())
        self.persist_if_needed()
        return True

    def delete_letter(self) -> bool:
        """Removes the last letter from the current row."""
        if self.phase is not GamePhase.PLAYING or self.current_col_index == 0:
            return False

        self.current_col_index -= 1
        row, col = self.current_row_index, self.current_col_index
        self.board[row][col].letter = ""

        self._emit('letter_deleted', row=row, col=col)
        self.persist_if_needed()
        return True

    def current_guess(self) -> str:
        return "".join(tile.letter for tile in self.board[self.current_row_index])

    def submit_guess(self) -> bool:
        """
        Scores the active row and hands the reveal sequence to the scheduler.

        A row that is not full is ignored.
        """
        if self.phase is not GamePhase.PLAYING or self.current_col_index != WORD_LENGTH:
            return False

        row = self.current_row_index
        guess = self.current_guess()
        results = score_guess(guess, self.solution)

        for col, result in enumerate(results):
            self.board[row][col].result = result

        self.phase = GamePhase.REVEALING
        game_logger.log_game_event(
            self._puzzle_id, 'guess_submitted',
            row=row, guess=guess, results=[result.value for result in results]
        )
        self._emit('guess_submitted', row=row, guess=guess, results=[result.value for result in results])
        self._emit('phase_changed', phase=self.phase.value)

        reveal = self.run_reveal(row, results, self._generation)
        try:
            self.scheduler.spawn(reveal)
        except Exception as e:
            # Nothing was revealed: put the row back so the player can retry
            reveal.close()
            for tile in self.board[row]:
                tile.result = None
                tile.is_revealed = False
            self.phase = GamePhase.PLAYING
            game_logger.log_error(None, e, 'reveal_spawn', self._puzzle_id)
            self._emit('phase_changed', phase=self.phase.value)
            return False
        return True

    # Reveal sequence

    async def run_reveal(self, row: int, results: List[TileResult], generation: Optional[int] = None) -> None:
        """
        Reveals the row's tiles one at a time, in column order, then applies
        the keyboard update and end-of-game check.

        Stops early if the engine is reset or reconfigured meanwhile.
        """
        if generation is None:
            generation = self._generation

        for col in range(WORD_LENGTH):
            if generation != self._generation:
                return
            self.board[row][col].is_revealed = True
            self._emit('tile_revealed', row=row, col=col, result=results[col].value)
            await self.scheduler.sleep()

        if generation != self._generation:
            return

        guess = "".join(tile.letter for tile in self.board[row])
        self.apply_results_to_keyboard(guess, results)

        self.submitted_rows_count += 1
        self.check_end_conditions(results)

        if not self.phase.is_over:
            self.current_row_index += 1
            self.current_col_index = 0
            self.phase = GamePhase.PLAYING
            self._emit('phase_changed', phase=self.phase.value)
            self.persist_if_needed()
        else:
            game_logger.log_game_event(
                self._puzzle_id, f'game_{self.phase.value}',
                rounds_used=self.submitted_rows_count, final_guess=guess
            )
            self._emit('phase_changed', phase=self.phase.value)
            self.clear_persisted_state()

    def check_end_conditions(self, row_results: List[TileResult]) -> None:
        """Checks if the game has ended (win or loss)."""
        if all(result is TileResult.CORRECT for result in row_results):
            self.phase = GamePhase.WON
        elif self.current_row_index == MAX_ROUNDS - 1:
            # Just used the last row
            self.phase = GamePhase.LOST

    # Keyboard

    def apply_results_to_keyboard(self, guess: str, results: List[TileResult]) -> None:
        """
        Updates keyboard statuses from one scored guess.

        Statuses only move forward (unknown < miss < present < correct).
        """
        changed = False
        for letter, result in zip(guess.upper(), results):
            new_status = KeyStatus.from_result(result)
            current_status = self.keyboard_statuses.get(letter, KeyStatus.UNKNOWN)
            if current_status.should_update(new_status):
                self.keyboard_statuses[letter] = new_status
                changed = True

        if changed:
            self._emit('keyboard_updated', keyboard_statuses=self._keyboard_dict())

    def _keyboard_dict(self) -> Dict[str, str]:
        return {letter: status.value for letter, status in self.keyboard_statuses.items()}

    # Sharing

    def make_share_summary(self) -> str:
        """Generates the summary text for sharing."""
        attempts = str(self.submitted_rows_count) if self.phase is GamePhase.WON else LOSS_MARKER
        day = self.puzzle.days_since_launch if self.puzzle else 0
        lines = [f"{GAME_NAME} {day} {attempts}/{MAX_ROUNDS}", ""]

        for row in self.board[:self.submitted_rows_count]:
            lines.append("".join(
                SHARE_GLYPHS[tile.result.value if tile.result else TileResult.MISS.value]
                for tile in row
            ))

        return "\n".join(lines)

    def request_share(self) -> str:
        """Formats the summary and signals the host that share text is ready."""
        summary = self.make_share_summary()
        self._emit('share_ready', summary=summary)
        return summary

    # Persistence

    def snapshot(self) -> PersistedGameState:
        return PersistedGameState(
            print_date=self.puzzle.print_date if self.puzzle else "",
            days_since_launch=self.puzzle.days_since_launch if self.puzzle else 0,
            board=copy.deepcopy(self.board),
            current_row_index=self.current_row_index,
            current_col_index=self.current_col_index,
            keyboard_statuses=self._keyboard_dict(),
            phase=self.phase.value,
            submitted_rows_count=self.submitted_rows_count
        )

    def persist_if_needed(self) -> None:
        """Persists the current state if the game is still in progress."""
        if self.puzzle is None or self.phase not in (GamePhase.PLAYING, GamePhase.REVEALING):
            return
        state = self.snapshot()
        self._guarded('save', lambda: self.store.save(state))

    def clear_persisted_state(self) -> None:
        self._guarded('clear', self.store.clear)

    def _guarded(self, action: str, operation: Callable):
        """Storage failures are logged and never reach the player."""
        try:
            return operation()
        except Exception as e:
            game_logger.log_error(None, e, f'storage_{action}', self._puzzle_id)
            return None

    # Rendering

    def to_dict(self) -> Dict:
        """Observable state for rendering. The solution is only exposed once the game is over."""
        return {
            'print_date': self._puzzle_id,
            'days_since_launch': self.puzzle.days_since_launch if self.puzzle else None,
            'phase': self.phase.value,
            'board': [[tile.to_dict() for tile in row] for row in self.board],
            'current_row_index': self.current_row_index,
            'current_col_index': self.current_col_index,
            'keyboard_statuses': self._keyboard_dict(),
            'submitted_rows_count': self.submitted_rows_count,
            'max_rounds': MAX_ROUNDS,
            'word_length': WORD_LENGTH,
            'keyboard_rows': list(KEYBOARD_ROWS),
            'special_keys': list(SPECIAL_KEYS),
            'solution': self.solution if self.phase.is_over else None
        }
