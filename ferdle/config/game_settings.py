"""
Game Configuration Constants Module

Game rules and fixed presentation constants for the daily puzzle.
Everything the engine needs to know about board shape, share text and
persistence identity lives here so it can be changed in one place.
"""

from typing import Dict, Final, Tuple

# Board shape
MAX_ROUNDS: Final[int] = 6
"""
Maximum number of guess attempts allowed per puzzle (rows on the board).
Type: Final[int] - Immutable to prevent accidental modification
"""

WORD_LENGTH: Final[int] = 5
"""Number of letters in the solution and in every guess (columns on the board)."""

# Reveal sequence
REVEAL_DELAY_SECONDS: Final[float] = 0.15
"""Pause between two consecutive tile reveals after a guess is submitted."""

# Share summary
GAME_NAME: Final[str] = "Wordle"
LOSS_MARKER: Final[str] = "X"
SHARE_GLYPHS: Final[Dict[str, str]] = {
    "correct": "\U0001F7E9",  # green square
    "present": "\U0001F7E8",  # yellow square
    "miss": "\u2B1C",        # white square
}

# Persistence
PERSISTENCE_KEY: Final[str] = "ferdle.persistedGameState.v1"

# Keyboard
KEYBOARD_ROWS: Final[Tuple[str, ...]] = ("QWERTYUIOP", "ASDFGHJKL", "ZXCVBNM")
ENTER_KEY: Final[str] = "ENTER"
DELETE_KEY: Final[str] = "DELETE"
SPECIAL_KEYS: Final[Tuple[str, ...]] = (ENTER_KEY, DELETE_KEY)


def validate_game_settings() -> bool:
    """
    Validates that the game constants are mutually consistent.

    Checks:
    1. Board dimensions are positive
    2. Keyboard rows cover A-Z exactly once
    3. Every tile result has a share glyph

    Returns:
        bool: True if all checks pass

    Raises:
        ValueError: If any check fails with a detailed error message
    """
    if MAX_ROUNDS <= 0 or WORD_LENGTH <= 0:
        raise ValueError("Board dimensions must be positive")

    letters = "".join(KEYBOARD_ROWS)
    if sorted(letters) != [chr(code) for code in range(ord("A"), ord("Z") + 1)]:
        raise ValueError(f"Keyboard rows must contain each letter A-Z once, got '{letters}'")

    missing = {"correct", "present", "miss"} - set(SHARE_GLYPHS)
    if missing:
        raise ValueError(f"Missing share glyphs for: {sorted(missing)}")

    return True


if __name__ == "__main__":

    try:
        validate_game_settings()
        print(" Game settings validation passed")
    except ValueError as config_error:
        print(f" Configuration validation failed: {config_error}")
        exit(1)
