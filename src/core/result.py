"""Explicit success/failure values returned by operation execution."""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from .faults import Fault

T = TypeVar('T')


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""
    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """Failed outcome carrying a classified fault."""
    fault: Fault

    @property
    def is_ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]
