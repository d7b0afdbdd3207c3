from __future__ import annotations


class PlannerError(Exception):
    pass


class ValidationError(PlannerError, ValueError):
    """Raised before any storage access when a request payload is unusable."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class NotInitializedError(PlannerError, RuntimeError):
    pass


class NotFoundError(PlannerError, LookupError):
    pass
