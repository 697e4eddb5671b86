"""SQLite storage implementation."""

import json
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Protocol

import aiosqlite

from ..config import resolve_db_path
from ..models import (
    AuditRecord,
    CatalogItem,
    InputType,
    ItemDraft,
    Session,
    SessionState,
    Tenant,
)


class ITenantStore(Protocol):
    """Tenant registry persistence."""

    async def save_tenant(self, tenant: Tenant) -> None:
        """Save a tenant and replace its authorized numbers."""
        ...

    async def get_tenant_by_phone(self, phone: str) -> Tenant | None:
        """Find the tenant a normalized phone number belongs to."""
        ...


class ICatalogStore(Protocol):
    """Catalog persistence. Every call is scoped by tenant_id."""

    async def insert_catalog_item(self, item: CatalogItem) -> None:
        """Insert a new item."""
        ...

    async def update_catalog_items(
        self,
        tenant_id: str,
        name_contains: str,
        *,
        price: Decimal | None = None,
        available: bool | None = None,
    ) -> list[CatalogItem]:
        """Update items whose name contains the fragment; return them."""
        ...

    async def search_catalog_items(
        self, tenant_id: str, name_contains: str, limit: int
    ) -> list[CatalogItem]:
        """Find items whose name contains the fragment, oldest first."""
        ...


class ISessionStore(Protocol):
    """Current dialogue session per (tenant, sender)."""

    async def get_session(self, tenant_id: str, sender: str) -> Session | None:
        """Get the session row, whatever its state."""
        ...

    async def save_session(self, session: Session, expected_version: int) -> bool:
        """Write the session if its stored version still matches."""
        ...


class IAuditStore(Protocol):
    """Append-only audit records."""

    async def insert_audit_record(self, record: AuditRecord) -> bool:
        """Insert a record. False when (tenant, message_id) already exists."""
        ...

    async def has_audit_record(self, tenant_id: str, message_id: str) -> bool:
        """Check for a record with this message id."""
        ...

    async def get_audit_records(
        self, tenant_id: str, limit: int = 100
    ) -> list[AuditRecord]:
        """Get audit records for a tenant (newest first)."""
        ...


class IStorage(ITenantStore, ICatalogStore, ISessionStore, IAuditStore, Protocol):
    """Persistent storage for all system data (SQLite)."""

    async def init(self) -> None:
        """Initialize database and create tables."""
        ...

    async def close(self) -> None:
        """Close database connection."""
        ...

    async def clear(self) -> None:
        """Clear all data."""
        ...


def _casefold(value: str | None) -> str | None:
    return value.casefold() if value is not None else None


def _parse_ts(value: str) -> datetime:
    ts = datetime.fromisoformat(value)
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# Case-insensitive (Unicode) substring match on item name
_NAME_CONTAINS = "instr(casefold(name), casefold(?)) > 0"


class Storage:
    """SQLite storage implementation."""

    def __init__(self, db_path: str | Path | None = None):
        if db_path is None:
            self._db_path = resolve_db_path()
        else:
            self._db_path = resolve_db_path(db_path)
        self._conn: aiosqlite.Connection | None = None

    async def init(self) -> None:
        """Initialize database and create tables."""
        self._conn = await aiosqlite.connect(self._db_path)
        await self._conn.create_function("casefold", 1, _casefold, deterministic=True)
        await self._conn.execute("PRAGMA foreign_keys = ON")

        schema_path = Path(__file__).parent / "schema.sql"
        with open(schema_path, "r", encoding="utf-8") as f:
            schema_sql = f.read()
        await self._conn.executescript(schema_sql)
        await self._conn.commit()

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    # Tenants
    async def save_tenant(self, tenant: Tenant) -> None:
        """Save a tenant and replace its authorized numbers."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        await self._conn.execute(
            "INSERT OR REPLACE INTO tenants (id, name) VALUES (?, ?)",
            (tenant.id, tenant.name),
        )
        await self._conn.execute(
            "DELETE FROM tenant_numbers WHERE tenant_id = ?", (tenant.id,)
        )
        for phone in tenant.whatsapp_numbers:
            await self._conn.execute(
                "INSERT OR REPLACE INTO tenant_numbers (phone, tenant_id) VALUES (?, ?)",
                (phone, tenant.id),
            )
        await self._conn.commit()

    async def get_tenant_by_phone(self, phone: str) -> Tenant | None:
        """Find the tenant a normalized phone number belongs to."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        cursor = await self._conn.execute(
            """
            SELECT t.id, t.name
            FROM tenants t
            JOIN tenant_numbers n ON n.tenant_id = t.id
            WHERE n.phone = ?
            """,
            (phone,),
        )
        row = await cursor.fetchone()
        if not row:
            return None

        num_cursor = await self._conn.execute(
            "SELECT phone FROM tenant_numbers WHERE tenant_id = ? ORDER BY phone",
            (row[0],),
        )
        numbers = [r[0] for r in await num_cursor.fetchall()]
        return Tenant(id=row[0], name=row[1], whatsapp_numbers=numbers)

    # Catalog
    async def insert_catalog_item(self, item: CatalogItem) -> None:
        """Insert a new item."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        created_at = item.created_at or datetime.now(timezone.utc)
        await self._conn.execute(
            """
            INSERT INTO catalog_items (id, tenant_id, name, price, available, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                item.id,
                item.tenant_id,
                item.name,
                str(item.price),
                int(item.available),
                created_at.isoformat(),
            ),
        )
        await self._conn.commit()
        item.created_at = created_at

    async def update_catalog_items(
        self,
        tenant_id: str,
        name_contains: str,
        *,
        price: Decimal | None = None,
        available: bool | None = None,
    ) -> list[CatalogItem]:
        """Update items whose name contains the fragment; return them."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        assignments = []
        params: list = []
        if price is not None:
            assignments.append("price = ?")
            params.append(str(price))
        if available is not None:
            assignments.append("available = ?")
            params.append(int(available))
        if not assignments:
            raise ValueError("Nothing to update")

        await self._conn.execute(
            f"""
            UPDATE catalog_items
            SET {', '.join(assignments)}
            WHERE tenant_id = ? AND {_NAME_CONTAINS}
            """,
            (*params, tenant_id, name_contains),
        )
        await self._conn.commit()

        return await self._select_items(tenant_id, name_contains, limit=None)

    async def search_catalog_items(
        self, tenant_id: str, name_contains: str, limit: int
    ) -> list[CatalogItem]:
        """Find items whose name contains the fragment, oldest first."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        return await self._select_items(tenant_id, name_contains, limit=limit)

    async def _select_items(
        self, tenant_id: str, name_contains: str, limit: int | None
    ) -> list[CatalogItem]:
        query = f"""
            SELECT id, tenant_id, name, price, available, created_at
            FROM catalog_items
            WHERE tenant_id = ? AND {_NAME_CONTAINS}
            ORDER BY created_at ASC, rowid ASC
        """
        params: list = [tenant_id, name_contains]
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        cursor = await self._conn.execute(query, params)
        rows = await cursor.fetchall()

        return [
            CatalogItem(
                id=row[0],
                tenant_id=row[1],
                name=row[2],
                price=Decimal(row[3]),
                available=bool(row[4]),
                created_at=_parse_ts(row[5]),
            )
            for row in rows
        ]

    # Sessions
    async def get_session(self, tenant_id: str, sender: str) -> Session | None:
        """Get the session row, whatever its state."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        cursor = await self._conn.execute(
            """
            SELECT tenant_id, sender, state, form_data, locale, version,
                   updated_at, expires_at
            FROM sessions
            WHERE tenant_id = ? AND sender = ?
            """,
            (tenant_id, sender),
        )
        row = await cursor.fetchone()

        if not row:
            return None

        return Session(
            tenant_id=row[0],
            sender=row[1],
            state=SessionState(row[2]),
            draft=ItemDraft.from_dict(json.loads(row[3])),
            locale=row[4],
            version=row[5],
            updated_at=_parse_ts(row[6]),
            expires_at=_parse_ts(row[7]),
        )

    async def save_session(self, session: Session, expected_version: int) -> bool:
        """Write the session if its stored version still matches.

        expected_version 0 means "no row yet". On success the stored version is
        expected_version + 1.
        """
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        values = (
            session.state.value,
            json.dumps(session.draft.to_dict(), ensure_ascii=False),
            session.locale,
            session.updated_at.isoformat(),
            session.expires_at.isoformat(),
        )

        if expected_version == 0:
            cursor = await self._conn.execute(
                """
                INSERT OR IGNORE INTO sessions
                (state, form_data, locale, updated_at, expires_at,
                 tenant_id, sender, version)
                VALUES (?, ?, ?, ?, ?, ?, ?, 1)
                """,
                (*values, session.tenant_id, session.sender),
            )
        else:
            cursor = await self._conn.execute(
                """
                UPDATE sessions
                SET state = ?, form_data = ?, locale = ?, updated_at = ?,
                    expires_at = ?, version = version + 1
                WHERE tenant_id = ? AND sender = ? AND version = ?
                """,
                (*values, session.tenant_id, session.sender, expected_version),
            )
        await self._conn.commit()
        return cursor.rowcount == 1

    # Audit
    async def insert_audit_record(self, record: AuditRecord) -> bool:
        """Insert a record. False when (tenant, message_id) already exists."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        created_at = record.created_at or datetime.now(timezone.utc)
        cursor = await self._conn.execute(
            """
            INSERT OR IGNORE INTO audit_records
            (id, tenant_id, sender, message_id, input_type, input_text,
             action, success, details, raw_payload, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record.id,
                record.tenant_id,
                record.sender,
                record.message_id,
                record.input_type.value,
                record.input_text,
                record.action,
                int(record.success),
                json.dumps(record.details, ensure_ascii=False, default=str),
                (
                    json.dumps(record.raw_payload, ensure_ascii=False)
                    if record.raw_payload is not None
                    else None
                ),
                created_at.isoformat(),
            ),
        )
        await self._conn.commit()
        record.created_at = created_at
        return cursor.rowcount == 1

    async def has_audit_record(self, tenant_id: str, message_id: str) -> bool:
        """Check for a record with this message id."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        cursor = await self._conn.execute(
            """
            SELECT 1 FROM audit_records
            WHERE tenant_id = ? AND message_id = ?
            LIMIT 1
            """,
            (tenant_id, message_id),
        )
        return await cursor.fetchone() is not None

    async def get_audit_records(
        self, tenant_id: str, limit: int = 100
    ) -> list[AuditRecord]:
        """Get audit records for a tenant (newest first)."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        cursor = await self._conn.execute(
            """
            SELECT id, tenant_id, sender, message_id, input_type, input_text,
                   action, success, details, raw_payload, created_at
            FROM audit_records
            WHERE tenant_id = ?
            ORDER BY created_at DESC, rowid DESC
            LIMIT ?
            """,
            (tenant_id, limit),
        )
        rows = await cursor.fetchall()

        return [
            AuditRecord(
                id=row[0],
                tenant_id=row[1],
                sender=row[2],
                message_id=row[3],
                input_type=InputType(row[4]),
                input_text=row[5],
                action=row[6],
                success=bool(row[7]),
                details=json.loads(row[8]),
                raw_payload=json.loads(row[9]) if row[9] is not None else None,
                created_at=_parse_ts(row[10]),
            )
            for row in rows
        ]

    # Lifecycle
    async def clear(self) -> None:
        """Clear all data."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        tables = [
            "audit_records",
            "sessions",
            "catalog_items",
            "tenant_numbers",
            "tenants",
        ]

        for table in tables:
            await self._conn.execute(f"DELETE FROM {table}")

        await self._conn.commit()
