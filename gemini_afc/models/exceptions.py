"""Exception classes and error wrappers."""

from dataclasses import dataclass


class GeminiAFCError(Exception):
    """Base class for library errors."""

    pass


class ConfigurationError(GeminiAFCError):
    """Raised when an automatic function calling setting is invalid."""

    pass


@dataclass(frozen=True)
class ContinuationFailure:
    """Returned in place of a response when the continuation call failed.

    The automatic function calling loop does not raise or retry when the
    caller-supplied continuation fails; it stops and hands this wrapper back
    so the caller can tell a final model turn from an upstream failure.

    Attributes:
        error: The exception raised by the continuation.
    """

    error: BaseException

    @property
    def message(self) -> str:
        return f"{type(self.error).__name__}: {self.error}"

    def __str__(self) -> str:
        return f"Continuation failed: {self.message}"
