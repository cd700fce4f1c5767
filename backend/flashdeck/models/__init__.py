from flashdeck.models.review import (
    CardInput,
    ItemStats,
    Judgement,
    NextItem,
    SessionState,
    SessionSummary,
)

__all__ = [
    "CardInput",
    "ItemStats",
    "Judgement",
    "NextItem",
    "SessionState",
    "SessionSummary",
]
