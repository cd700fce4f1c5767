import random

import pytest

from flashdeck.services.scheduler import pick_weighted


class _FixedRandom(random.Random):
    def __init__(self, value: float) -> None:
        super().__init__(0)
        self._value = value

    def random(self) -> float:
        return self._value


def test_weight_is_inverse_of_interval():
    rng = random.Random(1234)
    counts = {"weak": 0, "mastered": 0}

    for _ in range(10_000):
        counts[pick_weighted(["weak", "mastered"], [1 / 1, 1 / 16], rng)] += 1

    ratio = counts["weak"] / counts["mastered"]
    assert 13 <= ratio <= 20


def test_zero_draw_picks_first_candidate():
    assert pick_weighted([4, 7, 9], [0.5, 0.25, 0.25], _FixedRandom(0.0)) == 4


def test_draw_walks_cumulative_weights():
    # total 1.0, r = 0.6 falls in the second bucket (0.5, 0.75]
    assert pick_weighted([4, 7, 9], [0.5, 0.25, 0.25], _FixedRandom(0.6)) == 7


def test_overshooting_draw_still_selects():
    assert pick_weighted([4, 7, 9], [0.1, 0.1, 0.1], _FixedRandom(1.5)) == 4


def test_empty_candidates_rejected():
    with pytest.raises(ValueError):
        pick_weighted([], [], random.Random(0))


def test_advance_favours_short_intervals(make_scheduler):
    scheduler = make_scheduler(
        [
            {"id": "cur", "front": "q", "back": "a"},
            {"id": "weak", "front": "w", "back": "w"},
            {"id": "mastered", "front": "m", "back": "m"},
        ],
        seed=2024,
    )
    cur, weak, mastered = scheduler.items
    counts = {"cur": 0, "weak": 0, "mastered": 0}

    for _ in range(10_000):
        scheduler.current_index = 0
        cur.interval, cur.due_in = 1, 0
        weak.interval, weak.due_in = 1, 0
        mastered.interval, mastered.due_in = 16, 0

        scheduler.submit_answer("a")
        counts[scheduler.advance().item_id] += 1

    # the answered card sits out the round it was answered in
    assert counts["cur"] == 0
    ratio = counts["weak"] / counts["mastered"]
    assert 13 <= ratio <= 20
