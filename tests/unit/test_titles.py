import pytest

from runreporter.models.events import SuiteDescriptor
from runreporter.registry.registry import RunnableRegistry
from runreporter.registry.runnables import HookRecord
from runreporter.reporter.reporter import Reporter
from runreporter.reporter.titles import BROWSER_SKIP_TITLE, canonical_title, title_path


@pytest.mark.unit
class TestTitlePath:
    def test_root_contributes_no_segment(self, registry: RunnableRegistry) -> None:
        assert registry.root is not None
        assert title_path(registry.root) == []

    def test_test_path_walks_ancestors(self, registry: RunnableRegistry) -> None:
        assert title_path(registry.get_test("t1")) == ["S", "does x"]

    def test_nested_suite_path(self, registry: RunnableRegistry) -> None:
        assert title_path(registry.get_suite("r3")) == ["S", "nested"]

    def test_browser_skip_suffix_stripped(self, registry: RunnableRegistry) -> None:
        test = registry.get_test("t3")
        assert test.title is not None and test.title.endswith(BROWSER_SKIP_TITLE)
        assert title_path(test) == ["S", "nested", "does z"]

    def test_original_title_wins_over_display_alias(self, registry: RunnableRegistry) -> None:
        hook = HookRecord(
            hook_id="h1",
            title='"before each" hook for "does x"',
            original_title='"before each" hook',
        )
        hook.parent = registry.get_suite("r2")
        assert title_path(hook) == ["S", '"before each" hook']

    def test_resolution_does_not_mutate(self, registry: RunnableRegistry) -> None:
        test = registry.get_test("t1")
        test.original_title = "does x"
        test.title = "does x (aliased)"
        first = title_path(test)
        second = title_path(test)
        assert first == second == ["S", "does x"]
        assert test.title == "does x (aliased)"

    def test_untitled_runnable(self) -> None:
        assert canonical_title(HookRecord(hook_id="h9")) is None
        assert title_path(HookRecord(hook_id="h9")) == []

    def test_titled_root_contributes_no_segment(self) -> None:
        reg = RunnableRegistry()
        reg.create_root(
            SuiteDescriptor.model_validate(
                {
                    "id": "r1",
                    "title": "All Specs",
                    "root": True,
                    "tests": [{"id": "t1", "title": "does x"}],
                    "suites": [{"id": "r2", "title": "S"}],
                }
            )
        )
        assert reg.root is not None
        assert title_path(reg.root) == []
        assert title_path(reg.get_test("t1")) == ["does x"]
        assert title_path(reg.get_suite("r2")) == ["S"]

    def test_titled_root_excluded_from_results(self) -> None:
        rep = Reporter("spec")
        rep.set_runnables(
            {"id": "r1", "title": "All Specs", "root": True, "tests": [{"id": "t1", "title": "does x"}]}
        )
        assert rep.results().tests[0].title == ["does x"]

    def test_parentless_hook_keeps_own_title(self) -> None:
        hook = HookRecord(hook_id="h1", title='"before all" hook')
        assert title_path(hook) == ['"before all" hook']
