"""Registry-owned records for suites, tests and hooks."""

from __future__ import annotations

import copy
import weakref
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

from runreporter.types import HookKind, RunnableType, TestState
from runreporter.utils.timestamps import parse_timestamp

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from pydantic import BaseModel

    from runreporter.models.events import ErrorInfo

_HOOK_KINDS = {
    "before all": HookKind.BEFORE,
    "before each": HookKind.BEFORE_EACH,
    "after all": HookKind.AFTER,
    "after each": HookKind.AFTER_EACH,
}


@dataclass(frozen=True)
class AttemptSnapshot:
    """Terminal fields of an attempt that was superseded by a retry."""

    state: TestState | None = None
    err: ErrorInfo | None = None
    timings: dict[str, Any] | None = None
    failed_from_hook_id: str | None = None
    wall_clock_started_at: datetime | None = None
    wall_clock_duration: float | None = None


class _Runnable:
    """Parent back-reference and payload merging shared by all records."""

    type: ClassVar[RunnableType]
    # Payload fields that describe identity rather than state.
    _identity_fields: ClassVar[frozenset[str]] = frozenset({"id", "type"})
    _converters: ClassVar[dict[str, Callable[[Any], Any]]] = {}

    title: str | None
    original_title: str | None
    extra: dict[str, Any]
    _parent_ref: weakref.ReferenceType[SuiteRecord] | None

    @property
    def parent(self) -> SuiteRecord | None:
        return self._parent_ref() if self._parent_ref is not None else None

    @parent.setter
    def parent(self, suite: SuiteRecord | None) -> None:
        self._parent_ref = weakref.ref(suite) if suite is not None else None

    def merge(self, payload: BaseModel) -> None:
        """Shallow-merge the fields the payload explicitly carries; incoming wins."""
        known = type(payload).model_fields
        for name in payload.model_fields_set:
            if name not in known or name in self._identity_fields:
                continue
            value = getattr(payload, name)
            converter = self._converters.get(name)
            setattr(self, name, converter(value) if converter else value)
        if payload.model_extra:
            self.extra.update(payload.model_extra)


@dataclass(eq=False)
class SuiteRecord(_Runnable):
    type: ClassVar[RunnableType] = RunnableType.SUITE
    _identity_fields: ClassVar[frozenset[str]] = frozenset({"id", "type", "root"})

    id: str | None
    title: str | None = None
    file: str | None = None
    root: bool = False
    original_title: str | None = None
    tests: list[TestRecord] = field(default_factory=list)
    suites: list[SuiteRecord] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)
    _parent_ref: weakref.ReferenceType[SuiteRecord] | None = field(
        default=None, init=False, repr=False
    )


@dataclass(eq=False)
class TestRecord(_Runnable):
    type: ClassVar[RunnableType] = RunnableType.TEST
    _converters: ClassVar[dict[str, Callable[[Any], Any]]] = {
        "wall_clock_started_at": parse_timestamp,
    }

    id: str | None
    title: str | None = None
    state: TestState | None = TestState.SKIPPED
    body: str | None = None
    duration: float | None = None
    timed_out: bool | None = None
    is_async: bool | None = None
    sync: bool | None = None
    retries: int | None = None
    current_retry: int | None = None  # None until the engine reports an attempt
    timings: dict[str, Any] | None = None
    wall_clock_started_at: datetime | None = None
    wall_clock_duration: float | None = None
    err: ErrorInfo | None = None
    failed_from_hook_id: str | None = None
    hook_name: str | None = None
    original_title: str | None = None
    prev_attempts: list[AttemptSnapshot] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)
    _parent_ref: weakref.ReferenceType[SuiteRecord] | None = field(
        default=None, init=False, repr=False
    )

    def to_attempt(self) -> AttemptSnapshot:
        return AttemptSnapshot(
            state=self.state,
            err=self.err,
            timings=self.timings,
            failed_from_hook_id=self.failed_from_hook_id,
            wall_clock_started_at=self.wall_clock_started_at,
            wall_clock_duration=self.wall_clock_duration,
        )

    def with_title(self, title: str | None) -> TestRecord:
        """Return a shallow copy carrying a display title; the record is untouched."""
        display = copy.copy(self)
        display.title = title
        return display


@dataclass(eq=False)
class HookRecord(_Runnable):
    type: ClassVar[RunnableType] = RunnableType.HOOK
    _identity_fields: ClassVar[frozenset[str]] = frozenset({"id", "hook_id", "type"})

    hook_id: str
    title: str | None = None
    hook_name: str | None = None
    body: str | None = None
    test_id: str | None = None  # the test this hook most recently guarded
    original_title: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    _parent_ref: weakref.ReferenceType[SuiteRecord] | None = field(
        default=None, init=False, repr=False
    )

    @property
    def kind(self) -> HookKind | None:
        if self.hook_name is None:
            return None
        return _HOOK_KINDS.get(self.hook_name.strip('"').lower())
