"""Arena of live runnables keyed by engine-assigned identifier."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from runreporter.exceptions import DuplicateRunnableError, UnknownRunnableError
from runreporter.registry.runnables import HookRecord, SuiteRecord, TestRecord
from runreporter.types import TestState

if TYPE_CHECKING:
    from collections.abc import Iterator

    from runreporter.models.events import SuiteDescriptor, TestPayload

logger = structlog.get_logger(__name__)


class RunnableRegistry:
    """Owns every suite, test and hook record of a single run.

    Suites and tests are materialized up front from the declared tree; hooks
    are created lazily as hook events arrive. Hooks live in their own table
    because the engine's hook identifiers are independent of test and suite
    identifiers.
    """

    def __init__(self) -> None:
        self._runnables: dict[str | None, SuiteRecord | TestRecord] = {}
        self._hooks: dict[str, HookRecord] = {}
        self._root: SuiteRecord | None = None

    @property
    def root(self) -> SuiteRecord | None:
        return self._root

    def create_root(self, descriptor: SuiteDescriptor) -> SuiteRecord:
        """Materialize the declared tree of suites and tests."""
        self._runnables.clear()
        self._hooks.clear()
        self._root = self._create_suite(descriptor, parent=None)
        logger.debug(
            "runnables_materialized",
            suites=sum(1 for _ in self.suites()),
            tests=sum(1 for _ in self.tests()),
        )
        return self._root

    def _create_suite(
        self, descriptor: SuiteDescriptor, parent: SuiteRecord | None
    ) -> SuiteRecord:
        suite = SuiteRecord(
            id=descriptor.id,
            title=descriptor.title,
            file=descriptor.file,
            root=bool(descriptor.root) or parent is None,
            extra=dict(descriptor.model_extra or {}),
        )
        suite.parent = parent
        if suite.id is not None or suite.root:
            self.register(suite.id, suite)
        suite.tests = [self._create_test(t, suite) for t in descriptor.tests]
        suite.suites = [self._create_suite(s, suite) for s in descriptor.suites]
        return suite

    def _create_test(self, descriptor: TestPayload, parent: SuiteRecord) -> TestRecord:
        test = TestRecord(id=descriptor.id)
        test.merge(descriptor)
        if test.state is None:
            test.state = TestState.SKIPPED
        test.parent = parent
        self.register(test.id, test)
        return test

    def register(self, runnable_id: str | None, runnable: SuiteRecord | TestRecord) -> None:
        """Store a record under its identifier; identifiers are never reused in a run."""
        existing = self._runnables.get(runnable_id)
        if existing is not None and existing is not runnable:
            logger.error(
                "runnable_id_reused",
                runnable_id=runnable_id,
                previous=existing.type.value,
                current=runnable.type.value,
            )
            raise DuplicateRunnableError(runnable_id)
        self._runnables[runnable_id] = runnable

    def get(self, runnable_id: str | None) -> SuiteRecord | TestRecord | None:
        return self._runnables.get(runnable_id)

    def get_test(self, runnable_id: str | None) -> TestRecord:
        runnable = self._runnables.get(runnable_id)
        if not isinstance(runnable, TestRecord):
            raise UnknownRunnableError(runnable_id, expected="test")
        return runnable

    def get_suite(self, runnable_id: str | None) -> SuiteRecord:
        runnable = self._runnables.get(runnable_id)
        if not isinstance(runnable, SuiteRecord):
            raise UnknownRunnableError(runnable_id, expected="suite")
        return runnable

    def get_hook(self, hook_id: str | None) -> HookRecord | None:
        return self._hooks.get(hook_id) if hook_id is not None else None

    def ensure_hook(self, hook_id: str) -> tuple[HookRecord, bool]:
        """Return the hook record for ``hook_id``, creating it on first reference."""
        hook = self._hooks.get(hook_id)
        if hook is not None:
            return hook, False
        hook = HookRecord(hook_id=hook_id)
        self._hooks[hook_id] = hook
        return hook, True

    def suites(self) -> Iterator[SuiteRecord]:
        """Iterate every suite, root included, in declaration order."""
        for runnable in self._runnables.values():
            if isinstance(runnable, SuiteRecord):
                yield runnable

    def tests(self) -> Iterator[TestRecord]:
        for runnable in self._runnables.values():
            if isinstance(runnable, TestRecord):
                yield runnable

    def hooks(self) -> Iterator[HookRecord]:
        yield from self._hooks.values()

    def __len__(self) -> int:
        return len(self._runnables) + len(self._hooks)

    def __contains__(self, runnable_id: object) -> bool:
        return runnable_id in self._runnables
