"""DialogEngine: add-item dialogue state machine and one-shot commands."""

from dataclasses import replace
from decimal import Decimal
from typing import Callable, Protocol

from ..audit import IAuditLog
from ..catalog import SEARCH_LIMIT, CatalogGateway, ICatalogGateway
from ..commands import (
    CommandRouter,
    ICommandRouter,
    detect_locale,
    is_cancel,
    is_confirm,
    parse_price,
    parse_yes_no,
)
from ..errors import CatalogError
from ..logging_config import get_logger, log_context
from ..models import (
    Action,
    AddItem,
    CatalogItem,
    EditPrice,
    InboundMessage,
    ItemDraft,
    Search,
    Session,
    SessionState,
    ToggleAvailability,
)
from ..sessions import ISessionManager
from ..storage import ICatalogStore
from .replies import Replies

logger = get_logger(__name__)

GatewayFactory = Callable[[str], ICatalogGateway]

# Field each waiting state asks for
_PROMPT_FIELD = {
    SessionState.WAITING_NAME: "name",
    SessionState.WAITING_PRICE: "price",
    SessionState.WAITING_AVAILABLE: "available",
}


def _context(message: InboundMessage) -> dict:
    return log_context(message.tenant_id, message.sender, message.message_id)


def _item_details(item: CatalogItem) -> dict:
    return {
        "id": item.id,
        "name": item.name,
        "price": str(item.price),
        "available": item.available,
    }


class IDialogEngine(Protocol):
    """Decides the next session state and reply for one inbound message."""

    async def handle(self, message: InboundMessage) -> str:
        """Run one turn and return the reply text."""
        ...


class DialogEngine:
    """Runs one dialogue turn per inbound message.

    An active add-item session always takes the message first; only when the
    sender has no current session is the text routed to one-shot commands.
    Every turn ends with exactly one audit record.
    """

    def __init__(
        self,
        sessions: ISessionManager,
        audit_log: IAuditLog,
        catalog_store: ICatalogStore | None = None,
        router: ICommandRouter | None = None,
        gateway_factory: GatewayFactory | None = None,
        currency: str = "QAR",
        search_limit: int = SEARCH_LIMIT,
    ):
        if gateway_factory is None:
            if catalog_store is None:
                raise ValueError("catalog_store or gateway_factory is required")

            def gateway_factory(tenant_id: str) -> ICatalogGateway:
                return CatalogGateway(catalog_store, tenant_id)

        self._sessions = sessions
        self._audit = audit_log
        self._router = router or CommandRouter()
        self._gateway_factory = gateway_factory
        self._currency = currency
        self._search_limit = search_limit

    async def handle(self, message: InboundMessage) -> str:
        text = message.text.strip()
        stored = await self._sessions.load(message.tenant_id, message.sender)

        if self._sessions.is_current(stored):
            return await self._continue(message, text, stored)

        version = stored.version if stored else 0
        return await self._dispatch(message, text, version)

    # Multi-turn dialogue
    async def _continue(
        self, message: InboundMessage, text: str, session: Session
    ) -> str:
        replies = Replies(session.locale, self._currency)
        draft = session.draft

        logger.info("Continuing %s", session.state.value, extra=_context(message))

        if is_cancel(text):
            await self._sessions.clear(
                message.tenant_id, message.sender, session.locale, session.version
            )
            return await self._finish(
                message,
                Action.ADD_ITEM_CANCEL,
                True,
                {"state": session.state.value},
                replies.text("cancelled"),
            )

        match session.state:
            case SessionState.WAITING_NAME:
                if not text:
                    return await self._reject(message, Action.ADD_ITEM_NAME, "name", replies)
                draft = replace(draft, name=text)
                action = Action.ADD_ITEM_NAME

            case SessionState.WAITING_PRICE:
                price = parse_price(text)
                if price is None:
                    return await self._reject(message, Action.ADD_ITEM_PRICE, "price", replies)
                draft = replace(draft, price=price)
                action = Action.ADD_ITEM_PRICE

            case SessionState.WAITING_AVAILABLE:
                available = parse_yes_no(text)
                if available is None:
                    return await self._reject(
                        message, Action.ADD_ITEM_AVAILABLE, "available", replies
                    )
                draft = replace(draft, available=available)
                action = Action.ADD_ITEM_AVAILABLE

            case SessionState.CONFIRM:
                if is_confirm(text):
                    return await self._complete(message, session, replies)
                return await self._finish(
                    message,
                    Action.ADD_ITEM_CONFIRM_PROMPT,
                    False,
                    {"state": session.state.value},
                    replies.text("confirm_or_cancel"),
                )

            case _:
                raise ValueError(f"Unexpected session state: {session.state}")

        return await self._advance(
            message, session.version, draft, session.locale, action, replies
        )

    async def _advance(
        self,
        message: InboundMessage,
        expected_version: int,
        draft: ItemDraft,
        locale: str,
        action: Action,
        replies: Replies,
    ) -> str:
        """Store the draft and ask for the first missing field (or confirmation)."""
        next_state = draft.next_state()
        await self._sessions.save(
            message.tenant_id,
            message.sender,
            next_state,
            draft,
            locale,
            expected_version,
        )

        if next_state is SessionState.CONFIRM:
            reply = replies.confirm(draft)
        else:
            reply = replies.missing(_PROMPT_FIELD[next_state])

        return await self._finish(
            message,
            action,
            True,
            {"state": next_state.value, "draft": draft.to_dict()},
            reply,
        )

    async def _complete(
        self, message: InboundMessage, session: Session, replies: Replies
    ) -> str:
        draft = session.draft
        if draft.next_state() is not SessionState.CONFIRM:
            # Incomplete row (e.g. written by an older build): ask again
            return await self._advance(
                message,
                session.version,
                draft,
                session.locale,
                Action.ADD_ITEM_CONFIRM_PROMPT,
                replies,
            )

        gateway = self._gateway_factory(message.tenant_id)
        try:
            item = await gateway.add_item(draft.name, draft.price, draft.available)
        except CatalogError as e:
            logger.error("Add item failed: %s", e, exc_info=True, extra=_context(message))
            await self._audit.record(
                message,
                Action.MENUS_INSERT.value,
                False,
                {"error": str(e), "item": draft.to_dict()},
            )
            await self._sessions.clear(
                message.tenant_id, message.sender, session.locale, session.version
            )
            return replies.text("insert_failed", error=e)

        await self._audit.record(
            message,
            Action.MENUS_INSERT.value,
            True,
            {"id": item.id, "item": draft.to_dict()},
        )
        await self._sessions.clear(
            message.tenant_id, message.sender, session.locale, session.version
        )
        return replies.text("done")

    # One-shot commands
    async def _dispatch(self, message: InboundMessage, text: str, version: int) -> str:
        replies = Replies(detect_locale(text), self._currency)
        command = self._router.route(text)

        logger.info("Command %s", type(command).__name__, extra=_context(message))

        match command:
            case AddItem(name=name, price=price, available=available):
                draft = ItemDraft(name=name, price=price, available=available)
                return await self._advance(
                    message,
                    version,
                    draft,
                    replies.locale,
                    Action.ADD_ITEM_START,
                    replies,
                )
            case EditPrice(name_query=name_query, price=price):
                return await self._edit_price(message, name_query, price, replies)
            case ToggleAvailability(name_query=name_query, enable=enable):
                return await self._toggle(message, name_query, enable, replies)
            case Search(query=query):
                return await self._search(message, query, replies)
            case _:
                return await self._finish(
                    message, Action.HELP, True, {"matched": False}, replies.text("help")
                )

    async def _edit_price(
        self, message: InboundMessage, name_query: str, price: Decimal, replies: Replies
    ) -> str:
        gateway = self._gateway_factory(message.tenant_id)
        try:
            rows = await gateway.update_price_by_name_contains(name_query, price)
        except CatalogError as e:
            logger.error("Price update failed: %s", e, extra=_context(message))
            return await self._finish(
                message,
                Action.MENUS_UPDATE_PRICE,
                False,
                {"error": str(e)},
                replies.text("price_failed", error=e),
            )

        return await self._finish(
            message,
            Action.MENUS_UPDATE_PRICE,
            True,
            {"affected": len(rows), "rows": [_item_details(r) for r in rows]},
            replies.text("price_updated") if rows else replies.text("no_matches"),
        )

    async def _toggle(
        self, message: InboundMessage, name_query: str, enable: bool, replies: Replies
    ) -> str:
        gateway = self._gateway_factory(message.tenant_id)
        try:
            rows = await gateway.set_availability_by_name_contains(name_query, enable)
        except CatalogError as e:
            logger.error("Availability update failed: %s", e, extra=_context(message))
            return await self._finish(
                message,
                Action.MENUS_UPDATE_AVAILABLE,
                False,
                {"error": str(e)},
                replies.text("toggle_failed", error=e),
            )

        if not rows:
            reply = replies.text("no_matches")
        else:
            reply = replies.text("item_enabled" if enable else "item_disabled")

        return await self._finish(
            message,
            Action.MENUS_UPDATE_AVAILABLE,
            True,
            {"affected": len(rows), "rows": [_item_details(r) for r in rows]},
            reply,
        )

    async def _search(self, message: InboundMessage, query: str, replies: Replies) -> str:
        gateway = self._gateway_factory(message.tenant_id)
        rows = await gateway.search_by_name_contains(query, limit=self._search_limit)
        return await self._finish(
            message,
            Action.MENUS_SEARCH,
            True,
            {"query": query, "count": len(rows)},
            replies.search_results(rows),
        )

    # Helpers
    async def _reject(
        self, message: InboundMessage, action: Action, field: str, replies: Replies
    ) -> str:
        """Invalid answer: the session stays where it is."""
        return await self._finish(
            message, action, False, {"error": f"invalid_{field}"}, replies.invalid(field)
        )

    async def _finish(
        self,
        message: InboundMessage,
        action: Action,
        success: bool,
        details: dict,
        reply: str,
    ) -> str:
        await self._audit.record(message, action.value, success, details)
        return reply
