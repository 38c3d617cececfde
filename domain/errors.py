"""Failures a generation run can end in."""

from typing import Any


class GenerationError(Exception):
    title = "Generation Failed"
    status_code = 500

    def __init__(self, message: str, *, step: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.step = step

    def __str__(self) -> str:
        if self.step is None:
            return self.message
        return f"[{self.step}] {self.message}"

    def to_dict(self) -> dict[str, str]:
        return {"error": self.title, "message": str(self)}


class ValidationError(GenerationError):
    """Caller input is missing a required field or holds a bad value."""

    title = "Invalid Input"
    status_code = 400

    def __init__(self, field: str, reason: str = "is required") -> None:
        super().__init__(f"{field} {reason}")
        self.field = field


class UpstreamError(GenerationError):
    title = "Upstream Error"

    def __init__(self, cause: BaseException, *, step: str | None = None) -> None:
        super().__init__(f"generation call failed: {cause!r}", step=step)
        self.cause = cause


class EmptyResult(GenerationError):
    title = "Empty Result"

    def __init__(self, *, step: str | None = None) -> None:
        super().__init__("generation returned no usable payload", step=step)


class ShapeMismatch(GenerationError):
    title = "Shape Mismatch"

    def __init__(self, field: str, reason: str = "is missing", value: Any = None) -> None:
        super().__init__(f"{field} {reason}")
        self.field = field
        self.value = value


class Cancelled(GenerationError):
    title = "Cancelled"

    def __init__(self, reason: str = "cancelled", *, step: str | None = None) -> None:
        super().__init__(reason, step=step)
