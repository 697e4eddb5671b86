"""CommandRouter: fixed-priority grammars for one-shot commands."""

import re
from typing import Protocol

from ..models import (
    AddItem,
    CommandMatch,
    EditPrice,
    NoMatch,
    Search,
    ToggleAvailability,
)
from .parsing import parse_price, parse_strict_price, parse_yes_no

_COLON = r"\s*[:：]\s*"

_ADD_ITEM = re.compile(
    r"(?:add\s+item|[أا]ضف\s+صنف)"
    r"(?:"
    rf"(?:\s+(?:name|اسم){_COLON}(?P<name>.+?))?"
    rf"(?:\s+(?:price|سعر){_COLON}(?P<price>.+?))?"
    rf"(?:\s+(?:available|متاح){_COLON}(?P<available>.+?))?"
    r"\s*$"
    # Unlabeled trailing text still opens the dialogue, with every field missing
    r"|\s+.*$"
    r")",
    re.IGNORECASE,
)

# Price is the first number after "to"; trailing units ("27 QAR") are ignored
_EDIT_PRICE = re.compile(
    r"(?:(?:edit|change|update|set)\s+price|عدّ?ل\s+سعر)"
    r"\s+(?P<name>.+?)\s+(?:to|إلى|الى)\s+(?P<price>\d+(?:[.٫]\d+)?)(?!\d)",
    re.IGNORECASE,
)

_TOGGLE = re.compile(
    r"(?P<verb>enable|activate|disable|deactivate|فعّ?ل|[أا]وقف)"
    r"\s+(?:item|صنف)\s+(?P<name>.+)",
    re.IGNORECASE,
)

_SEARCH = re.compile(
    r"(?:search\s+for|ابحث\s+عن)\s+(?P<query>.+)",
    re.IGNORECASE,
)

_ENABLE_VERBS = ("enable", "activate", "فع")


class ICommandRouter(Protocol):
    """Recognizes one-shot commands in free text."""

    def route(self, text: str) -> CommandMatch:
        """Return the first grammar that matches, or NoMatch."""
        ...


class CommandRouter:
    """Tries add-item, edit-price, toggle and search grammars in that order."""

    def route(self, text: str) -> CommandMatch:
        for grammar in (
            self._match_add_item,
            self._match_edit_price,
            self._match_toggle,
            self._match_search,
        ):
            match = grammar(text)
            if match is not None:
                return match
        return NoMatch()

    @staticmethod
    def _match_add_item(text: str) -> AddItem | None:
        m = _ADD_ITEM.search(text)
        if not m:
            return None

        name = (m.group("name") or "").strip()
        price = m.group("price")
        available = m.group("available")
        return AddItem(
            name=name or None,
            price=parse_price(price) if price else None,
            available=parse_yes_no(available) if available else None,
        )

    @staticmethod
    def _match_edit_price(text: str) -> EditPrice | None:
        m = _EDIT_PRICE.search(text)
        if not m:
            return None

        price = parse_strict_price(m.group("price"))
        name = m.group("name").strip()
        if price is None or not name:
            return None
        return EditPrice(name_query=name, price=price)

    @staticmethod
    def _match_toggle(text: str) -> ToggleAvailability | None:
        m = _TOGGLE.search(text)
        if not m:
            return None

        name = m.group("name").strip()
        if not name:
            return None
        verb = m.group("verb").casefold()
        return ToggleAvailability(
            name_query=name, enable=verb.startswith(_ENABLE_VERBS)
        )

    @staticmethod
    def _match_search(text: str) -> Search | None:
        m = _SEARCH.search(text)
        if not m:
            return None

        query = m.group("query").strip()
        return Search(query=query) if query else None
