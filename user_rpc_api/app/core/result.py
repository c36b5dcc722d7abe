"""
Result values returned by procedures.

Procedures do not raise for expected failures.  They return ``Ok`` with
the output or ``Err`` with a ``ProcedureError`` and the RPC adapter
turns either into a response envelope.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from .errors import ProcedureError


T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    error: ProcedureError

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[Any], Err]
