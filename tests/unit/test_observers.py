from unittest.mock import MagicMock

import pytest

from runreporter.models.events import ErrorInfo
from runreporter.reporter.normalizer import NormalizedEvent
from runreporter.reporter.observers import LoggingObserver, ObserverBus
from runreporter.types import EventKind


@pytest.mark.unit
class TestObserverBus:
    def test_notifies_in_registration_order(self) -> None:
        seen: list[str] = []
        first, second = MagicMock(), MagicMock()
        first.on_event.side_effect = lambda e: seen.append("first")
        second.on_event.side_effect = lambda e: seen.append("second")
        bus = ObserverBus()
        bus.subscribe(first)
        bus.subscribe(second)
        bus.notify(NormalizedEvent(kind=EventKind.PASS))
        assert seen == ["first", "second"]
        assert len(bus) == 2


@pytest.mark.unit
class TestLoggingObserver:
    @pytest.fixture()
    def observer(self) -> LoggingObserver:
        obs = LoggingObserver()
        obs._log = MagicMock()
        return obs

    def test_pass_logged_with_depth(self, observer: LoggingObserver) -> None:
        observer.on_event(
            NormalizedEvent(
                kind=EventKind.PASS,
                payload={"title": "does x", "duration": 30, "titlePath": ["S", "does x"]},
            )
        )
        observer._log.info.assert_called_once_with(
            "test_passed", title="does x", duration_ms=30, depth=2
        )

    def test_fail_logged_as_error(self, observer: LoggingObserver) -> None:
        observer.on_event(
            NormalizedEvent(
                kind=EventKind.FAIL,
                payload={"title": "hook", "hookName": "before each", "titlePath": ["S"]},
                err=ErrorInfo(name="Error", message="setup broke"),
            )
        )
        kwargs = observer._log.error.call_args[1]
        assert kwargs["error"] == "setup broke"
        assert kwargs["hook"] == "before each"

    def test_root_suite_not_logged(self, observer: LoggingObserver) -> None:
        observer.on_event(NormalizedEvent(kind=EventKind.SUITE_ENTER, payload={"title": ""}))
        observer._log.info.assert_not_called()
