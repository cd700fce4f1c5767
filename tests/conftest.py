import random

import pytest

from flashdeck.config import Settings
from flashdeck.services import session_registry
from flashdeck.services.scheduler import SpacedReviewScheduler


@pytest.fixture
def config() -> Settings:
    return Settings()


@pytest.fixture
def make_scheduler(config: Settings):
    def _make(items, seed: int = 0, cfg: Settings | None = None) -> SpacedReviewScheduler:
        scheduler = SpacedReviewScheduler(
            rng=random.Random(seed),
            config=cfg if cfg is not None else config,
        )
        scheduler.start(items)
        return scheduler

    return _make


@pytest.fixture
def deck() -> list[dict]:
    return [
        {"id": 1, "front": "2+2", "back": "4"},
        {"id": 2, "front": "capital of France", "back": "Paris"},
        {"id": 3, "front": "H2O", "back": "water"},
    ]


@pytest.fixture(autouse=True)
def _clear_registry():
    session_registry._sessions.clear()
    yield
    session_registry._sessions.clear()
