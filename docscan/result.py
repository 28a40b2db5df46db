"""Result sum type used by the non-raising APIs."""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E", bound=BaseException)


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed outcome carrying the error that caused it."""

    error: E

    @property
    def is_ok(self) -> bool:
        return False


Result = Ok[T] | Err[E]
