"""Domain primitives that enforce validity at creation time."""

import re
from dataclasses import dataclass
from typing import Self

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


@dataclass(frozen=True)
class Address:
    """Holder identity in canonical lowercase form."""

    value: str

    def __post_init__(self) -> None:
        if not _ADDRESS_RE.match(self.value):
            raise ValueError("Address must be 0x followed by 40 hex digits")
        if self.value != self.value.lower():
            raise ValueError("Address must be lowercase; use Address.parse")

    @classmethod
    def parse(cls, value: str) -> Self:
        return cls(value=value.strip().lower())

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Counter:
    """Non-negative integer counter."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Counter cannot be negative")

    def incremented(self, by: int = 1) -> Self:
        if by < 0:
            raise ValueError("Counters only move forward")
        return type(self)(value=self.value + by)
