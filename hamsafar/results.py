from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Result:
    """Outcome of a write operation: exactly one of value or error is set.

    Unpacks like a pair, so callers can write ``post, error = create_post(data)``.
    """

    value: Any = None
    error: Optional[Exception] = None

    def __post_init__(self):
        if (self.value is None) == (self.error is None):
            raise ValueError("Result requires exactly one of value or error")

    @classmethod
    def success(cls, value: Any = True) -> "Result":
        return cls(value=value)

    @classmethod
    def failure(cls, error: Exception) -> "Result":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def __iter__(self):
        return iter((self.value, self.error))
