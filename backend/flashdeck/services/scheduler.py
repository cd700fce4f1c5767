"""
Spaced review scheduler for a single study session.

Counts spacing in questions rather than days:
  - correct answer: interval doubles (capped at max_interval), card sits out `interval` questions
  - wrong answer:   interval resets to 1, card comes back after one other question
  - next card:      weighted draw among due cards, weight = 1 / interval

The scheduler never ends a session on its own; the caller decides when to finish().
"""
from __future__ import annotations

import logging
import random
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from flashdeck.config import Settings, settings as default_settings
from flashdeck.models import (
    CardInput,
    ItemStats,
    Judgement,
    NextItem,
    SessionState,
    SessionSummary,
)

logger = logging.getLogger(__name__)


class InvalidStateError(RuntimeError):
    """Raised when an operation is called in a session state that does not allow it."""


@dataclass
class ReviewItem:
    id: str | int
    prompt: str
    expected_answer: str
    interval: int = 1
    due_in: int = 0
    seen_count: int = 0
    correct_count: int = 0
    incorrect_count: int = 0

    @property
    def miss_rate(self) -> float:
        if self.seen_count == 0:
            return 0.0
        return self.incorrect_count / self.seen_count

    def reset(self) -> None:
        self.interval = 1
        self.due_in = 0
        self.seen_count = 0
        self.correct_count = 0
        self.incorrect_count = 0


def normalize_answer(text: str) -> str:
    return text.strip().lower()


def is_correct(given: str, expected: str) -> bool:
    """Exact match after trimming whitespace and lowercasing both sides."""
    return normalize_answer(given) == normalize_answer(expected)


def pick_weighted(
    candidates: Sequence[int],
    weights: Sequence[float],
    rng: random.Random,
) -> int:
    """
    Cumulative-weight draw over `candidates`.

    Draws r in [0, total) and returns the first candidate whose running weight
    reaches r. Falls back to the first candidate so float rounding never leaves
    the draw without a pick.
    """
    if not candidates:
        raise ValueError("cannot pick from an empty candidate list")

    total = sum(weights)
    r = rng.random() * total
    cumulative = 0.0
    for candidate, weight in zip(candidates, weights):
        cumulative += weight
        if cumulative >= r:
            return candidate
    return candidates[0]


def _to_review_item(raw: ReviewItem | CardInput | Mapping[str, Any]) -> ReviewItem:
    if isinstance(raw, ReviewItem):
        return ReviewItem(id=raw.id, prompt=raw.prompt, expected_answer=raw.expected_answer)
    card = raw if isinstance(raw, CardInput) else CardInput.model_validate(raw)
    return ReviewItem(id=card.id, prompt=card.prompt, expected_answer=card.expected_answer)


class SpacedReviewScheduler:
    """
    In-memory state machine for one spaced review run.

    The scheduler owns its items exclusively; `current_index` points into that
    list and is the only notion of "current card". Not thread-safe: callers
    hosting it behind a request boundary must serialize calls per session.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        config: Settings | None = None,
    ) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._config = config if config is not None else default_settings
        self._items: list[ReviewItem] = []
        self.current_index: int | None = None
        self.question_count = 0
        self.correct_count = 0
        self.incorrect_count = 0
        self.completed = False
        self._state = SessionState.NOT_STARTED

    # --- Read-only views ---

    @property
    def items(self) -> tuple[ReviewItem, ...]:
        return tuple(self._items)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def current_item(self) -> ReviewItem | None:
        if self.current_index is None:
            return None
        return self._items[self.current_index]

    # --- Lifecycle ---

    def start(self, items: Iterable[ReviewItem | CardInput | Mapping[str, Any]]) -> None:
        """Load a deck and reset all scheduling state. An empty deck yields no current item."""
        arena = [_to_review_item(raw) for raw in items]

        seen_ids: set[str | int] = set()
        for item in arena:
            if item.id in seen_ids:
                raise ValueError(f"Duplicate item id in session: {item.id!r}")
            seen_ids.add(item.id)

        self._items = arena
        self._reset_session()
        logger.info("Spaced review session started with %d item(s)", len(arena))

    def restart(self) -> None:
        """Start over on the same deck with fresh intervals and counts."""
        if self._state == SessionState.NOT_STARTED:
            raise InvalidStateError("restart: session has not been started")
        for item in self._items:
            item.reset()
        self._reset_session()
        logger.info("Spaced review session restarted with %d item(s)", len(self._items))

    def _reset_session(self) -> None:
        self.current_index = 0 if self._items else None
        self.question_count = 0
        self.correct_count = 0
        self.incorrect_count = 0
        self.completed = False
        self._state = SessionState.IN_PROGRESS

    # --- Answering ---

    def submit_answer(self, given_answer: str) -> Judgement:
        """
        Judge the answer for the current item and update its interval.

        Does not move to the next item and does not count the question;
        both happen in advance().
        """
        if self._state == SessionState.COMPLETED:
            raise InvalidStateError("submit_answer: session is completed")
        if self._state == SessionState.AWAITING_NEXT:
            raise InvalidStateError("submit_answer: answer already judged, call advance() first")
        item = self.current_item
        if item is None:
            raise InvalidStateError("submit_answer: no current item")

        correct = is_correct(given_answer, item.expected_answer)
        item.seen_count += 1
        if correct:
            item.correct_count += 1
            self.correct_count += 1
            item.interval = min(
                self._config.max_interval,
                item.interval * self._config.interval_multiplier,
            )
            item.due_in = item.interval
        else:
            item.incorrect_count += 1
            self.incorrect_count += 1
            item.interval = 1
            item.due_in = 1

        self._state = SessionState.AWAITING_NEXT
        logger.debug(
            "Item %r judged %s; interval=%d due_in=%d",
            item.id,
            "correct" if correct else "incorrect",
            item.interval,
            item.due_in,
        )
        return Judgement(correct=correct, item_id=item.id, expected_answer=item.expected_answer)

    def advance(self) -> NextItem:
        """Count the judged question, tick down every other item and pick the next one."""
        if self._state == SessionState.COMPLETED:
            raise InvalidStateError("advance: session is completed")
        if self.current_index is None:
            raise InvalidStateError("advance: no current item")
        if self._state != SessionState.AWAITING_NEXT:
            raise InvalidStateError("advance: current item has not been answered")

        answered = self.current_index
        self.question_count += 1

        # The item just answered keeps its fresh due_in this round
        for idx, item in enumerate(self._items):
            if idx != answered:
                item.due_in = max(0, item.due_in - 1)

        eligible = [idx for idx, item in enumerate(self._items) if item.due_in <= 0]
        if not eligible:
            # Nothing due: open every item up again rather than stall
            logger.debug("No item due after question %d; relaxing", self.question_count)
            for item in self._items:
                item.due_in = 0
            eligible = list(range(len(self._items)))

        weights = [1 / (self._items[idx].interval or 1) for idx in eligible]
        chosen = pick_weighted(eligible, weights, self._rng)

        self.current_index = chosen
        self._state = SessionState.IN_PROGRESS
        item = self._items[chosen]
        logger.debug(
            "Selected item %r from %d eligible (question %d)",
            item.id,
            len(eligible),
            self.question_count + 1,
        )
        return NextItem(
            item_id=item.id,
            prompt=item.prompt,
            question_number=self.question_count + 1,
        )

    # --- Ending ---

    def finish(self) -> SessionSummary:
        """End the session, at any point, and return its summary."""
        if not self.completed:
            self.completed = True
            self.current_index = None
            self._state = SessionState.COMPLETED
            logger.info(
                "Spaced review session finished: %d/%d correct after %d question(s)",
                self.correct_count,
                self.correct_count + self.incorrect_count,
                self.question_count,
            )
        return self.summary()

    def summary(self) -> SessionSummary:
        """Snapshot of session totals with items ordered by descending miss rate."""
        answered = self.correct_count + self.incorrect_count
        accuracy = round(self.correct_count / answered * 100) if answered else 0

        # sorted() is stable, so equal miss rates keep load order
        ranked = sorted(self._items, key=lambda i: i.miss_rate, reverse=True)
        return SessionSummary(
            question_count=self.question_count,
            correct_count=self.correct_count,
            incorrect_count=self.incorrect_count,
            accuracy=accuracy,
            met_minimum=self.question_count >= self._config.min_questions,
            per_item_stats=[self._item_stats(item) for item in ranked],
        )

    def _item_stats(self, item: ReviewItem) -> ItemStats:
        seen = item.seen_count > 0
        miss_rate = item.miss_rate
        return ItemStats(
            item_id=item.id,
            prompt=item.prompt,
            expected_answer=item.expected_answer,
            seen_count=item.seen_count,
            correct_count=item.correct_count,
            incorrect_count=item.incorrect_count,
            miss_rate=miss_rate,
            weak=seen and miss_rate >= self._config.weak_miss_rate,
            strong=seen and miss_rate == 0,
        )
