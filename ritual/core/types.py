"""Core type definitions."""

from enum import Enum
from typing import Literal, TypeGuard, TypeVar

V = TypeVar("V")


class _Unset(Enum):
    UNSET = "UNSET"


UNSET: Literal[_Unset.UNSET] = _Unset.UNSET
Unset = Literal[_Unset.UNSET]


def is_set(value: "V | Unset") -> TypeGuard[V]:
    return value is not UNSET
