"""Command variants produced by the CommandRouter."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class AddItem:
    """Start of an add-item dialogue; any field may be missing."""

    name: str | None = None
    price: Decimal | None = None
    available: bool | None = None


@dataclass(frozen=True)
class EditPrice:
    name_query: str
    price: Decimal


@dataclass(frozen=True)
class ToggleAvailability:
    name_query: str
    enable: bool


@dataclass(frozen=True)
class Search:
    query: str


@dataclass(frozen=True)
class NoMatch:
    pass


CommandMatch = AddItem | EditPrice | ToggleAvailability | Search | NoMatch
