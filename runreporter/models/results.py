"""Outbound run snapshot handed to renderers and exporters."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from runreporter.types import TestState


class _ResultModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorDetail(_ResultModel):
    name: str | None = None
    message: str | None = None
    stack: str | None = None
    code_frame: Any | None = None


class AttemptResult(_ResultModel):
    state: TestState | None = None
    error: ErrorDetail | None = None
    timings: dict[str, Any] | None = None
    failed_from_hook_id: str | None = None
    wall_clock_started_at: datetime | None = None
    wall_clock_duration: float | None = None
    video_timestamp: int | None = None


class TestResult(_ResultModel):
    test_id: str | None = None
    title: list[str] = []
    state: TestState | None = None
    body: str | None = None
    display_error: str | None = None
    attempts: list[AttemptResult] = []


class HookResult(_ResultModel):
    hook_id: str
    hook_name: str | None = None
    title: list[str] = []
    body: str | None = None


class SuiteResult(_ResultModel):
    suite_id: str | None = None
    title: list[str] = []
    file: str | None = None


class RunStats(_ResultModel):
    suites: int = 0
    tests: int = 0
    passes: int = 0
    pending: int = 0
    skipped: int = 0
    failures: int = 0
    wall_clock_started_at: datetime | None = None
    wall_clock_ended_at: datetime | None = None
    wall_clock_duration: int = 0


class RunResult(_ResultModel):
    stats: RunStats
    reporter: str
    tests: list[TestResult] = []
    hooks: list[HookResult] = []
    suites: list[SuiteResult] = []

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase keys external consumers expect."""
        return self.model_dump(mode="json", by_alias=True)
