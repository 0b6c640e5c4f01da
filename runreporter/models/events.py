"""Inbound event payloads, one immutable model per event family.

The execution engine sends camelCase mappings. Each payload is validated into
a frozen model so that no two events ever share a mutable object; the
registry owns the records that payloads are merged into.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from runreporter.types import RunnableType, TestState

_PAYLOAD_CONFIG = ConfigDict(frozen=True, extra="allow", populate_by_name=True)


class ErrorInfo(BaseModel):
    model_config = _PAYLOAD_CONFIG

    name: str | None = None
    message: str | None = None
    stack: str | None = None
    code_frame: Any | None = Field(default=None, alias="codeFrame")


class SuitePayload(BaseModel):
    """suite / suite end."""

    model_config = _PAYLOAD_CONFIG

    id: str | None = None
    title: str | None = None
    file: str | None = None
    root: bool | None = None


class SuiteDescriptor(SuitePayload):
    """A suite as declared in the run tree, with its children."""

    tests: list["TestPayload"] = []
    suites: list["SuiteDescriptor"] = []


class TestPayload(BaseModel):
    """test / test end / pass / pending / test:before:run / test:after:run."""

    model_config = _PAYLOAD_CONFIG

    id: str | None = None
    title: str | None = None
    original_title: str | None = Field(default=None, alias="originalTitle")
    state: TestState | None = None
    body: str | None = None
    duration: float | None = None
    timed_out: bool | None = Field(default=None, alias="timedOut")
    is_async: bool | None = Field(default=None, alias="async")
    sync: bool | None = None
    retries: int | None = None
    current_retry: int | None = Field(default=None, alias="currentRetry")
    timings: dict[str, Any] | None = None
    wall_clock_started_at: Any | None = Field(default=None, alias="wallClockStartedAt")
    wall_clock_duration: float | None = Field(default=None, alias="wallClockDuration")
    err: ErrorInfo | None = None


class HookPayload(BaseModel):
    """hook / hook end.

    ``id`` is the test the hook is currently guarding; the engine re-keys it
    whenever a shared hook runs for another test.
    """

    model_config = _PAYLOAD_CONFIG

    id: str | None = None
    hook_id: str = Field(alias="hookId")
    title: str | None = None
    original_title: str | None = Field(default=None, alias="originalTitle")
    hook_name: str | None = Field(default=None, alias="hookName")
    body: str | None = None
    type: RunnableType = RunnableType.HOOK


class FailPayload(BaseModel):
    model_config = _PAYLOAD_CONFIG

    id: str | None = None
    type: RunnableType = RunnableType.TEST
    hook_id: str | None = Field(default=None, alias="hookId")
    hook_name: str | None = Field(default=None, alias="hookName")
    title: str | None = None
    err: ErrorInfo | None = None


class RetryPayload(BaseModel):
    model_config = _PAYLOAD_CONFIG

    id: str | None = None
    title: str | None = None
    current_retry: int = Field(default=0, alias="currentRetry")
    retries: int = 0


class RunPayload(BaseModel):
    """start / end."""

    model_config = _PAYLOAD_CONFIG

    start: Any | None = None
    end: Any | None = None


SuiteDescriptor.model_rebuild()
