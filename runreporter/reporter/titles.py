"""Title path resolution for suites, tests and hooks."""

from __future__ import annotations

from typing import TYPE_CHECKING

from runreporter.types import RunnableType

if TYPE_CHECKING:
    from runreporter.registry.runnables import HookRecord, SuiteRecord, TestRecord

# Appended for display by browser-level skips; never part of a canonical title.
BROWSER_SKIP_TITLE = " (skipped due to browser)"


def _is_root_suite(runnable: SuiteRecord | TestRecord | HookRecord) -> bool:
    return runnable.type == RunnableType.SUITE and runnable.parent is None and runnable.root


def canonical_title(runnable: SuiteRecord | TestRecord | HookRecord) -> str | None:
    """Return the runnable's own title with display-time substitutions undone."""
    title = runnable.original_title or runnable.title
    if not title:
        return None
    return title.replace(BROWSER_SKIP_TITLE, "")


def title_path(runnable: SuiteRecord | TestRecord | HookRecord) -> list[str]:
    """Return titles from the outermost ancestor down to ``runnable``.

    The root suite contributes no segment, whatever its title; untitled
    runnables contribute none either.
    """
    titles: list[str] = []
    node: SuiteRecord | TestRecord | HookRecord | None = runnable
    while node is not None:
        if _is_root_suite(node):
            break
        title = canonical_title(node)
        if title:
            titles.append(title)
        node = node.parent
    titles.reverse()
    return titles
