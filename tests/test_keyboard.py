"""
Tests for keyboard status aggregation.
"""

import itertools

from ferdle.models.game import KeyStatus, TileResult
from ferdle.services.game_engine import score_guess

C, P, M = TileResult.CORRECT, TileResult.PRESENT, TileResult.MISS


def test_first_guess_sets_statuses(engine):
    engine.apply_results_to_keyboard("SLATE", score_guess("SLATE", "CRANE"))

    assert engine.keyboard_statuses == {
        "S": KeyStatus.MISS,
        "L": KeyStatus.MISS,
        "A": KeyStatus.CORRECT,
        "T": KeyStatus.MISS,
        "E": KeyStatus.CORRECT,
    }


def test_statuses_upgrade_but_never_downgrade(engine):
    engine.apply_results_to_keyboard("RRRRR", [M, M, M, M, M])
    assert engine.keyboard_statuses["R"] is KeyStatus.MISS

    engine.apply_results_to_keyboard("RRRRR", [M, P, M, M, M])
    assert engine.keyboard_statuses["R"] is KeyStatus.PRESENT

    engine.apply_results_to_keyboard("RRRRR", [C, M, M, M, M])
    assert engine.keyboard_statuses["R"] is KeyStatus.CORRECT

    engine.apply_results_to_keyboard("RRRRR", [P, P, P, P, P])
    engine.apply_results_to_keyboard("RRRRR", [M, M, M, M, M])
    assert engine.keyboard_statuses["R"] is KeyStatus.CORRECT


def test_same_letter_twice_in_one_guess_keeps_best(engine):
    engine.apply_results_to_keyboard("SPEED", [M, M, P, M, P])
    assert engine.keyboard_statuses["E"] is KeyStatus.PRESENT


def test_lowercase_guess_updates_uppercase_keys(engine):
    engine.apply_results_to_keyboard("crane", [C, C, C, C, C])
    assert set(engine.keyboard_statuses) == {"C", "R", "A", "N", "E"}


def test_replay_is_idempotent(engine):
    guesses = [("SLATE", "CRANE"), ("TRACE", "CRANE"), ("CRANE", "CRANE")]

    for guess, solution in guesses:
        engine.apply_results_to_keyboard(guess, score_guess(guess, solution))
    first = dict(engine.keyboard_statuses)

    for guess, solution in guesses:
        engine.apply_results_to_keyboard(guess, score_guess(guess, solution))
    assert engine.keyboard_statuses == first


def test_status_is_monotonic_over_any_order(engine):
    sequences = itertools.permutations([M, P, C])
    for order in sequences:
        engine.keyboard_statuses = {}
        previous = KeyStatus.UNKNOWN
        for result in order:
            engine.apply_results_to_keyboard("QQQQQ", [result] * 5)
            current = engine.keyboard_statuses["Q"]
            assert current.rank >= previous.rank
            previous = current
        assert previous is KeyStatus.CORRECT


def test_keyboard_update_is_announced_only_on_change(engine):
    events = []
    engine.subscribe(lambda event, payload: events.append(event))

    engine.apply_results_to_keyboard("SLATE", [M, M, C, M, C])
    engine.apply_results_to_keyboard("SLATE", [M, M, C, M, C])

    assert events.count("keyboard_updated") == 1
