"""Cursor pagination DTO."""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of results plus the cursor for the next one."""

    items: list[T] = field(default_factory=list)
    next_cursor: str | None = None
