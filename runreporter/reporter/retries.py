"""Attempt history bookkeeping for retried tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from runreporter.models.events import TestPayload
    from runreporter.registry.runnables import AttemptSnapshot, TestRecord

logger = structlog.get_logger(__name__)


def is_new_attempt(stored: int | None, incoming: int | None) -> bool:
    """True when ``incoming`` starts an attempt after one already recorded."""
    if stored is None or incoming is None:
        return False
    return incoming > stored


def reconcile_attempt(test: TestRecord, payload: TestPayload) -> AttemptSnapshot | None:
    """Archive the previous attempt when a before-attempt event starts a retry.

    The live record keeps its identity; only its terminal fields are copied
    into the history and the per-attempt failure fields are cleared.
    """
    if not is_new_attempt(test.current_retry, payload.current_retry):
        return None

    snapshot = test.to_attempt()
    test.prev_attempts = [*test.prev_attempts, snapshot]
    test.err = None
    test.failed_from_hook_id = None
    test.hook_name = None

    logger.info(
        "test_retried",
        test_id=test.id,
        title=test.title,
        previous_attempt=test.current_retry,
        attempt=payload.current_retry,
        previous_state=snapshot.state,
    )
    return snapshot
