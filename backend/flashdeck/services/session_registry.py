from __future__ import annotations

import logging
import random
import threading
import uuid
from collections.abc import Iterable, Mapping
from typing import Any

from flashdeck.config import Settings, settings as default_settings
from flashdeck.models import CardInput, SessionSummary
from flashdeck.services.scheduler import ReviewItem, SpacedReviewScheduler

logger = logging.getLogger(__name__)

_sessions: dict[str, SpacedReviewScheduler] = {}
_lock = threading.Lock()


def start_session(
    items: Iterable[ReviewItem | CardInput | Mapping[str, Any]],
    *,
    session_id: str | None = None,
    rng: random.Random | None = None,
    config: Settings | None = None,
) -> tuple[str, SpacedReviewScheduler]:
    """Create, start and register a scheduler. Returns (session_id, scheduler)."""
    config = config if config is not None else default_settings
    session_id = session_id or str(uuid.uuid4())

    with _lock:
        if session_id in _sessions:
            raise ValueError(f"Session already registered: {session_id}")
        if len(_sessions) >= config.max_sessions:
            raise ValueError(f"Session limit reached ({config.max_sessions})")
        scheduler = SpacedReviewScheduler(rng=rng, config=config)
        scheduler.start(items)
        _sessions[session_id] = scheduler

    logger.info("Registered session %s (%d item(s))", session_id, len(scheduler.items))
    return session_id, scheduler


def get_session(session_id: str) -> SpacedReviewScheduler | None:
    with _lock:
        return _sessions.get(session_id)


def finish_session(session_id: str) -> SessionSummary:
    """Finish the session and drop it from the registry. KeyError if unknown."""
    with _lock:
        scheduler = _sessions.pop(session_id)
    logger.info("Finished session %s", session_id)
    return scheduler.finish()


def discard_session(session_id: str) -> None:
    with _lock:
        removed = _sessions.pop(session_id, None)
    if removed is not None:
        logger.info("Discarded session %s", session_id)


def active_session_ids() -> list[str]:
    with _lock:
        return list(_sessions)
