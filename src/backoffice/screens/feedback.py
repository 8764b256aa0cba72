"""User-facing outcome of a screen action."""

from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Literal, TypeVar

from backoffice.errors import BackofficeError, MutationError, ValidationError

T = TypeVar("T")

Tone = Literal["success", "error"]


@dataclass(frozen=True)
class Feedback:
    """A short localized message shown as a banner or dialog."""

    tone: Tone
    message: str
    error: BackofficeError | None = None
    ref: str | None = None

    @property
    def ok(self) -> bool:
        return self.tone == "success"

    @classmethod
    def success(cls, message: str, ref: str | None = None) -> "Feedback":
        return cls(tone="success", message=message, ref=ref)

    @classmethod
    def failure(cls, message: str, error: BackofficeError | None = None) -> "Feedback":
        return cls(tone="error", message=message, error=error)


async def run_action(
    operation: Awaitable[T],
    *,
    success: str,
    failure: str,
    invalid: str,
) -> Feedback:
    """Await a mutation and turn its outcome into feedback.

    Validation failures never reached the backend and get the ``invalid``
    message; backend failures get ``failure``. Neither is retried.
    """
    try:
        result = await operation
    except ValidationError as exc:
        return Feedback.failure(invalid, exc)
    except MutationError as exc:
        return Feedback.failure(failure, exc)
    return Feedback.success(success, ref=result if isinstance(result, str) else None)
