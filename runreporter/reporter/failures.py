"""Failure attribution: hook failures belong to the test the hook guarded."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from runreporter.exceptions import UnresolvedHookError
from runreporter.registry.runnables import SuiteRecord
from runreporter.types import RunnableType, TestState

if TYPE_CHECKING:
    from runreporter.models.events import ErrorInfo, FailPayload
    from runreporter.registry.registry import RunnableRegistry
    from runreporter.registry.runnables import HookRecord, TestRecord

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Failure:
    """A failure resolved to its owning test.

    ``test`` is a display copy titled after the failing runnable; the
    registry's record keeps its canonical title.
    """

    test: TestRecord
    err: ErrorInfo | None
    hook: HookRecord | None = None


def resolve_hook(payload: FailPayload, registry: RunnableRegistry) -> HookRecord:
    """Find the failing hook and follow the engine's latest test association."""
    if payload.hook_id is None:
        raise UnresolvedHookError(None)

    hook = registry.get_hook(payload.hook_id)
    if hook is None:
        if payload.id is None:
            raise UnresolvedHookError(payload.hook_id)
        hook, _ = registry.ensure_hook(payload.hook_id)
        hook.title = payload.title
        hook.hook_name = payload.hook_name
        logger.warning(
            "hook_placeholder_created",
            hook_id=payload.hook_id,
            test_id=payload.id,
        )

    if payload.id is not None and payload.id != hook.test_id:
        hook.test_id = payload.id
    if hook.test_id is None:
        raise UnresolvedHookError(hook.hook_id)
    return hook


def reattribute_failure(payload: FailPayload, registry: RunnableRegistry) -> Failure:
    """Mark the owning test failed and record which hook, if any, caused it."""
    hook: HookRecord | None = None
    if payload.type == RunnableType.HOOK:
        hook = resolve_hook(payload, registry)
        if isinstance(registry.get(hook.test_id), SuiteRecord):
            raise UnresolvedHookError(hook.hook_id)
        test = registry.get_test(hook.test_id)
        if hook.parent is None:
            hook.parent = test.parent
    else:
        test = registry.get_test(payload.id)

    test.err = payload.err
    test.state = TestState.FAILED
    test.failed_from_hook_id = hook.hook_id if hook else None
    if hook is not None:
        test.hook_name = hook.hook_name

    logger.debug(
        "failure_attributed",
        test_id=test.id,
        hook_id=hook.hook_id if hook else None,
        error=payload.err.name if payload.err else None,
    )
    return Failure(test=test.with_title(payload.title or test.title), err=test.err, hook=hook)
