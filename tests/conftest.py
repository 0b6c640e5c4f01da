"""Shared test fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from runreporter.config.settings import get_settings
from runreporter.models.events import SuiteDescriptor
from runreporter.registry.registry import RunnableRegistry
from runreporter.reporter.reporter import Reporter


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Settings are cached per process; isolate tests that touch the env."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def declared_tree() -> dict[str, Any]:
    """Root > S (t1, t2) > nested (t3)."""
    return {
        "id": "r1",
        "title": "",
        "root": True,
        "tests": [],
        "suites": [
            {
                "id": "r2",
                "title": "S",
                "file": "cypress/e2e/s.cy.js",
                "tests": [
                    {"id": "t1", "title": "does x", "body": "() => { expect(true).to.be.true }"},
                    {"id": "t2", "title": "does y"},
                ],
                "suites": [
                    {
                        "id": "r3",
                        "title": "nested",
                        "tests": [
                            {"id": "t3", "title": "does z (skipped due to browser)"},
                        ],
                    }
                ],
            }
        ],
    }


@pytest.fixture()
def registry(declared_tree: dict[str, Any]) -> RunnableRegistry:
    reg = RunnableRegistry()
    reg.create_root(SuiteDescriptor.model_validate(declared_tree))
    return reg


@pytest.fixture()
def reporter(declared_tree: dict[str, Any]) -> Reporter:
    rep = Reporter("spec")
    rep.set_runnables(declared_tree)
    return rep
