from flashdeck.config import Settings, settings
from flashdeck.models import (
    CardInput,
    ItemStats,
    Judgement,
    NextItem,
    SessionState,
    SessionSummary,
)
from flashdeck.services.scheduler import (
    InvalidStateError,
    ReviewItem,
    SpacedReviewScheduler,
)

__all__ = [
    "CardInput",
    "InvalidStateError",
    "ItemStats",
    "Judgement",
    "NextItem",
    "ReviewItem",
    "SessionState",
    "SessionSummary",
    "Settings",
    "SpacedReviewScheduler",
    "settings",
]
