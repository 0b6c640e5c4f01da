"""Folds raw engine events into the runnable registry."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog

from runreporter.exceptions import UnknownRunnableError
from runreporter.models.events import (
    FailPayload,
    HookPayload,
    RetryPayload,
    RunPayload,
    SuitePayload,
    TestPayload,
)
from runreporter.registry.runnables import HookRecord, SuiteRecord, TestRecord
from runreporter.reporter.failures import reattribute_failure
from runreporter.reporter.retries import reconcile_attempt
from runreporter.reporter.titles import title_path
from runreporter.types import EventKind, TestState
from runreporter.utils.timestamps import parse_timestamp

if TYPE_CHECKING:
    from pydantic import BaseModel

    from runreporter.models.events import ErrorInfo
    from runreporter.registry.registry import RunnableRegistry
    from runreporter.reporter.stats import RunStatistics

logger = structlog.get_logger(__name__)

# Registry bookkeeping that downstream consumers never see.
INTERNAL_FIELDS = frozenset({"id", "hookId"})

_TEST_FIELDS = {
    "title": "title",
    "state": "state",
    "body": "body",
    "duration": "duration",
    "timed_out": "timedOut",
    "is_async": "async",
    "sync": "sync",
    "retries": "retries",
    "current_retry": "currentRetry",
    "timings": "timings",
    "wall_clock_started_at": "wallClockStartedAt",
    "wall_clock_duration": "wallClockDuration",
    "failed_from_hook_id": "failedFromHookId",
    "hook_name": "hookName",
}
_SUITE_FIELDS = {"title": "title", "file": "file", "root": "root"}
_HOOK_FIELDS = {"title": "title", "hook_name": "hookName", "body": "body"}


@dataclass(frozen=True)
class NormalizedEvent:
    """An applied event as observers see it."""

    kind: EventKind
    payload: dict[str, Any] = field(default_factory=dict)
    err: ErrorInfo | None = None


def strip_internal(payload: Mapping[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in payload.items() if k not in INTERNAL_FIELDS}


def _error_view(err: ErrorInfo | None) -> dict[str, Any] | None:
    if err is None:
        return None
    return err.model_dump(by_alias=True, exclude_none=True)


def record_view(record: SuiteRecord | TestRecord | HookRecord) -> dict[str, Any]:
    """Public view of a record, with internal identifiers removed."""
    if isinstance(record, TestRecord):
        view: dict[str, Any] = {"id": record.id, "type": record.type.value}
        view.update({alias: getattr(record, name) for name, alias in _TEST_FIELDS.items()})
        view["err"] = _error_view(record.err)
        view["attempts"] = len(record.prev_attempts) + 1
    elif isinstance(record, SuiteRecord):
        view = {"id": record.id, "type": record.type.value}
        view.update({alias: getattr(record, name) for name, alias in _SUITE_FIELDS.items()})
    else:
        view = {"id": record.test_id, "hookId": record.hook_id, "type": record.type.value}
        view.update({alias: getattr(record, name) for name, alias in _HOOK_FIELDS.items()})
    view["titlePath"] = title_path(record)
    view.update(record.extra)
    return strip_internal(view)


class EventNormalizer:
    """Applies one engine event at a time to the registry and statistics."""

    def __init__(self, registry: RunnableRegistry, stats: RunStatistics) -> None:
        self._registry = registry
        self._stats = stats
        self.registry = registry
        self._handlers: dict[EventKind, Callable[[EventKind, Mapping[str, Any]], NormalizedEvent]] = {
            EventKind.RUN_START: self._on_run_timestamps,
            EventKind.RUN_END: self._on_run_timestamps,
            EventKind.SUITE_ENTER: self._on_suite,
            EventKind.SUITE_EXIT: self._on_suite,
            EventKind.TEST_ENTER: self._on_test,
            EventKind.TEST_EXIT: self._on_test,
            EventKind.TEST_BEFORE_ATTEMPT: self._on_test,
            EventKind.TEST_AFTER_ATTEMPT: self._on_test,
            EventKind.PASS: self._on_test,
            EventKind.PENDING: self._on_test,
            EventKind.HOOK_ENTER: self._on_hook,
            EventKind.HOOK_EXIT: self._on_hook,
            EventKind.FAIL: self._on_fail,
            EventKind.RETRY: self._on_retry,
        }

    def apply(self, event: str, payload: Mapping[str, Any] | None = None) -> NormalizedEvent | None:
        """Apply ``event``; unknown event names are ignored and return None."""
        try:
            kind = EventKind(event)
        except ValueError:
            logger.debug("event_ignored", event_name=event)
            return None

        normalized = self._handlers[kind](kind, payload or {})
        logger.debug("event_applied", event_name=kind.value, payload=normalized.payload)
        return normalized

    def _on_run_timestamps(self, kind: EventKind, raw: Mapping[str, Any]) -> NormalizedEvent:
        payload = RunPayload.model_validate(raw)
        self._stats.record_start(parse_timestamp(payload.start))
        self._stats.record_end(parse_timestamp(payload.end))
        return NormalizedEvent(kind=kind, payload=strip_internal(_dump(payload)))

    def _on_suite(self, kind: EventKind, raw: Mapping[str, Any]) -> NormalizedEvent:
        payload = SuitePayload.model_validate(raw)
        suite = self._registry.get_suite(payload.id)
        suite.merge(payload)
        return NormalizedEvent(kind=kind, payload=record_view(suite))

    def _on_test(self, kind: EventKind, raw: Mapping[str, Any]) -> NormalizedEvent:
        payload = TestPayload.model_validate(raw)
        test = self._registry.get_test(payload.id)

        if kind == EventKind.TEST_BEFORE_ATTEMPT:
            reconcile_attempt(test, payload)

        test.merge(payload)

        if "state" not in payload.model_fields_set:
            if kind == EventKind.PASS:
                test.state = TestState.PASSED
            elif kind == EventKind.PENDING:
                test.state = TestState.PENDING

        return NormalizedEvent(kind=kind, payload=record_view(test), err=test.err)

    def _on_hook(self, kind: EventKind, raw: Mapping[str, Any]) -> NormalizedEvent:
        payload = HookPayload.model_validate(raw)
        hook, created = self._registry.ensure_hook(payload.hook_id)
        hook.merge(payload)

        if payload.id is not None:
            guarded = self._registry.get(payload.id)
            if guarded is None:
                raise UnknownRunnableError(payload.id, expected="hook target")
            if hook.test_id != payload.id:
                logger.debug(
                    "hook_reassociated",
                    hook_id=hook.hook_id,
                    previous_test_id=hook.test_id,
                    test_id=payload.id,
                )
            hook.test_id = payload.id
            hook.parent = guarded if isinstance(guarded, SuiteRecord) else guarded.parent

        if created:
            logger.debug("hook_registered", hook_id=hook.hook_id, hook_name=hook.hook_name)
        return NormalizedEvent(kind=kind, payload=record_view(hook))

    def _on_fail(self, kind: EventKind, raw: Mapping[str, Any]) -> NormalizedEvent:
        payload = FailPayload.model_validate(raw)
        failure = reattribute_failure(payload, self._registry)
        return NormalizedEvent(kind=kind, payload=record_view(failure.test), err=failure.err)

    def _on_retry(self, kind: EventKind, raw: Mapping[str, Any]) -> NormalizedEvent:
        payload = RetryPayload.model_validate(raw)
        return NormalizedEvent(kind=kind, payload=strip_internal(_dump(payload)))


def _dump(payload: BaseModel) -> dict[str, Any]:
    return payload.model_dump(by_alias=True, exclude_unset=True)
