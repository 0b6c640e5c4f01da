"""Enums and type aliases for runreporter."""

from enum import StrEnum


class TestState(StrEnum):
    PASSED = "passed"
    FAILED = "failed"
    PENDING = "pending"
    SKIPPED = "skipped"


class HookKind(StrEnum):
    BEFORE = "before"
    AFTER = "after"
    BEFORE_EACH = "beforeEach"
    AFTER_EACH = "afterEach"


class RunnableType(StrEnum):
    SUITE = "suite"
    TEST = "test"
    HOOK = "hook"


class EventKind(StrEnum):
    """Event names as emitted by the execution engine."""

    RUN_START = "start"
    RUN_END = "end"
    SUITE_ENTER = "suite"
    SUITE_EXIT = "suite end"
    TEST_ENTER = "test"
    TEST_EXIT = "test end"
    TEST_BEFORE_ATTEMPT = "test:before:run"
    TEST_AFTER_ATTEMPT = "test:after:run"
    PASS = "pass"
    PENDING = "pending"
    HOOK_ENTER = "hook"
    HOOK_EXIT = "hook end"
    FAIL = "fail"
    RETRY = "retry"
