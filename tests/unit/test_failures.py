import pytest

from runreporter.exceptions import UnknownRunnableError, UnresolvedHookError
from runreporter.models.events import FailPayload
from runreporter.registry.registry import RunnableRegistry
from runreporter.reporter.failures import reattribute_failure, resolve_hook
from runreporter.types import TestState

_ERR = {"name": "Error", "message": "setup broke", "stack": "Error: setup broke\n    at hook (s.cy.js:2:3)"}


def _hook_fail(**overrides: object) -> FailPayload:
    data = {
        "id": "t2",
        "type": "hook",
        "hookId": "h1",
        "hookName": "before each",
        "title": '"before each" hook for "does y"',
        "err": _ERR,
    }
    data.update(overrides)
    return FailPayload.model_validate(data)


@pytest.mark.unit
class TestFailureReattributor:
    def test_test_failure_marks_test(self, registry: RunnableRegistry) -> None:
        payload = FailPayload.model_validate(
            {"id": "t1", "type": "test", "title": "does x", "err": {"name": "AssertionError"}}
        )
        failure = reattribute_failure(payload, registry)
        test = registry.get_test("t1")
        assert test.state == TestState.FAILED
        assert test.failed_from_hook_id is None
        assert failure.hook is None
        assert failure.err is not None and failure.err.name == "AssertionError"

    def test_hook_failure_reattributed_to_guarded_test(self, registry: RunnableRegistry) -> None:
        hook, _ = registry.ensure_hook("h1")
        hook.test_id = "t2"
        hook.title = '"before each" hook'
        hook.hook_name = "before each"

        failure = reattribute_failure(_hook_fail(), registry)
        test = registry.get_test("t2")

        assert test.state == TestState.FAILED
        assert test.failed_from_hook_id == "h1"
        assert test.hook_name == "before each"
        assert failure.hook is hook
        assert not hasattr(hook, "state")

    def test_only_associated_test_mutated(self, registry: RunnableRegistry) -> None:
        hook, _ = registry.ensure_hook("h1")
        hook.test_id = "t2"
        reattribute_failure(_hook_fail(), registry)
        assert registry.get_test("t1").state == TestState.SKIPPED
        assert registry.get_test("t3").state == TestState.SKIPPED

    def test_display_copy_keeps_canonical_title(self, registry: RunnableRegistry) -> None:
        hook, _ = registry.ensure_hook("h1")
        hook.test_id = "t2"
        failure = reattribute_failure(_hook_fail(), registry)
        assert failure.test.title == '"before each" hook for "does y"'
        assert registry.get_test("t2").title == "does y"
        assert failure.test is not registry.get_test("t2")

    def test_engine_reassociation_followed(self, registry: RunnableRegistry) -> None:
        hook, _ = registry.ensure_hook("h1")
        hook.test_id = "t1"
        reattribute_failure(_hook_fail(id="t2"), registry)
        assert hook.test_id == "t2"
        assert registry.get_test("t2").state == TestState.FAILED
        assert registry.get_test("t1").state == TestState.SKIPPED

    def test_placeholder_hook_created_from_fail(self, registry: RunnableRegistry) -> None:
        hook = resolve_hook(_hook_fail(), registry)
        assert hook.hook_id == "h1"
        assert hook.test_id == "t2"
        assert hook.hook_name == "before each"
        assert registry.get_hook("h1") is hook

    def test_hook_without_association_raises(self, registry: RunnableRegistry) -> None:
        with pytest.raises(UnresolvedHookError) as exc_info:
            reattribute_failure(_hook_fail(id=None), registry)
        assert exc_info.value.hook_id == "h1"

    def test_hook_failure_without_hook_id_raises(self, registry: RunnableRegistry) -> None:
        with pytest.raises(UnresolvedHookError):
            reattribute_failure(_hook_fail(hookId=None), registry)

    def test_unknown_test_raises(self, registry: RunnableRegistry) -> None:
        payload = FailPayload.model_validate({"id": "t404", "title": "ghost", "err": _ERR})
        with pytest.raises(UnknownRunnableError):
            reattribute_failure(payload, registry)

    def test_test_failure_clears_hook_attribution(self, registry: RunnableRegistry) -> None:
        registry.get_test("t1").failed_from_hook_id = "h1"
        reattribute_failure(FailPayload.model_validate({"id": "t1", "err": _ERR}), registry)
        assert registry.get_test("t1").failed_from_hook_id is None

    def test_hook_guarding_a_suite_is_unresolved(self, registry: RunnableRegistry) -> None:
        hook, _ = registry.ensure_hook("h1")
        hook.test_id = "r2"
        with pytest.raises(UnresolvedHookError) as exc_info:
            reattribute_failure(_hook_fail(id=None), registry)
        assert exc_info.value.hook_id == "h1"
        assert all(t.state == TestState.SKIPPED for t in registry.tests())
