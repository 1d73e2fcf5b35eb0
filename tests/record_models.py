"""Record types shared by storage tests.

Defined at module level so their type names resolve through importlib.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class Note:
    title: str
    body: str = ""


@dataclass
class Contact:
    name: str
    email: str | None = None
    tags: list[str] = field(default_factory=list)
    extension_data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Address:
    street: str
    city: str


@dataclass(frozen=True)
class Customer:
    name: str
    address: Address


class Priority(Enum):
    LOW = "low"
    HIGH = "high"


@dataclass(frozen=True)
class Task:
    title: str
    priority: Priority
    due: date | None = None


@dataclass(frozen=True)
class Scores:
    name: str
    by_round: dict[int, int] = field(default_factory=dict)


@dataclass(frozen=True)
class Holder:
    name: str
    item: Address | Note | None = None
