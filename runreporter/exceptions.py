"""Exception hierarchy for runreporter."""


class ReporterError(Exception):
    """Base exception for all runreporter errors."""


class UnknownRunnableError(ReporterError):
    """Raised when an event references an identifier that was never declared."""

    def __init__(self, runnable_id: str | None, expected: str = "runnable") -> None:
        self.runnable_id = runnable_id
        self.expected = expected
        super().__init__(f"Unknown {expected}: {runnable_id!r}")


class UnresolvedHookError(ReporterError):
    """Raised when a hook fails before it was associated with a test."""

    def __init__(self, hook_id: str | None) -> None:
        self.hook_id = hook_id
        super().__init__(f"Hook {hook_id!r} failed with no associated test")


class ReporterStateError(ReporterError):
    """Raised when events arrive before the run tree was materialized."""


class ConfigError(ReporterError):
    """Raised when configuration is invalid."""


class DuplicateRunnableError(ReporterError):
    """Raised when the declared tree uses the same identifier twice."""

    def __init__(self, runnable_id: str | None) -> None:
        self.runnable_id = runnable_id
        super().__init__(f"Runnable identifier declared twice: {runnable_id!r}")
