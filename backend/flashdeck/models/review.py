from __future__ import annotations

from enum import Enum

from pydantic import AliasChoices, BaseModel, Field


class SessionState(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    AWAITING_NEXT = "awaiting_next"
    COMPLETED = "completed"


class CardInput(BaseModel):
    id: str | int
    prompt: str = Field(validation_alias=AliasChoices("prompt", "front", "front_text"))
    expected_answer: str = Field(
        validation_alias=AliasChoices("expected_answer", "back", "back_text")
    )


class Judgement(BaseModel):
    correct: bool
    item_id: str | int
    expected_answer: str    # shown to the user after a miss


class NextItem(BaseModel):
    item_id: str | int
    prompt: str
    question_number: int    # 1-based number of the question about to be shown


class ItemStats(BaseModel):
    item_id: str | int
    prompt: str
    expected_answer: str
    seen_count: int
    correct_count: int
    incorrect_count: int
    miss_rate: float        # 0.0 for never-seen items
    weak: bool
    strong: bool


class SessionSummary(BaseModel):
    question_count: int
    correct_count: int
    incorrect_count: int
    accuracy: int           # percent, 0 when nothing was answered
    met_minimum: bool
    per_item_stats: list[ItemStats]  # most missed first
