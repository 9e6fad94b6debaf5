"""Result type for loaders and other fallible edges of the package."""

from dataclasses import dataclass
from typing import TypeVar, Generic

T = TypeVar("T")
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    @property
    def message(self) -> str:
        return str(self.error)


type Result[T, E] = Ok[T] | Err[E]
