"""Result type for operations that can fail without raising.

Walk resolution and configuration loading report failures as ``Err`` values
so callers can ``match`` on the outcome:

    match walks(flow, [0, 1]):
        case Ok(found): ...
        case Err(EmptyStack() as e): ...
"""

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E", bound=Exception)
V = TypeVar("V")

@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

Result: TypeAlias = Union[Ok[T], Err[E]]


def unwrap(result: Result[V, Exception]) -> V:
    """Return the ``Ok`` value or raise the ``Err`` error."""
    match result:
        case Ok(value):
            return value
        case Err(error):
            raise error
    raise TypeError(f"Not a Result: {result!r}")
