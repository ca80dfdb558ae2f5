"""
Lookup results for catalog queries.

A lookup never fails: unknown keys resolve to a default entry and the
result records that the fallback was used.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class LookupResult(Generic[T]):
    value: T
    found: bool

    @property
    def used_default(self) -> bool:
        return not self.found
