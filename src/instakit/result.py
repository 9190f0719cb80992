"""Single outcome value returned by every asynchronous instakit operation.

A :class:`Result` is either a success carrying a value or a failure
carrying an :class:`~instakit.exceptions.InstakitError`. Callers branch on
:attr:`Result.ok`, or call :meth:`Result.unwrap` to get the value and let
the error propagate as an exception.

Example::

    result = await session.request("/users/self", response_model=User)
    if result.ok:
        print(result.value.username)
    else:
        print(result.error.kind, result.error)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from instakit.exceptions import InstakitError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[InstakitError] = None

    @classmethod
    def success(cls, value: T) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: InstakitError) -> Result[T]:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
