"""Gateway to the record store holding inspection and payout reports.

Every read goes through the access filter, including the read that precedes an
update, so callers cannot fetch rows outside the caller's visibility. Writes
never accept a client-supplied identifier or creation timestamp and never
rewrite the creator of an existing row.
"""

import logging
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fielddesk.models.inspection import FieldInspectionReport
from fielddesk.models.payout import PayoutReport
from fielddesk.services.access_filter import SessionContext, can_edit, restrict

logger = logging.getLogger(__name__)

INSPECTIONS = "field_inspection_reports"
PAYOUTS = "payout_reports"

TABLES: dict[str, Any] = {
    INSPECTIONS: FieldInspectionReport,
    PAYOUTS: PayoutReport,
}

# Columns the store generates or owns
_SERVER_COLUMNS = frozenset({"id", "created_at"})
_OWNER_COLUMN = "created_by_user_id"


class RecordStoreError(Exception):
    """A read or write against the record store failed."""


class RecordNotFound(RecordStoreError):
    pass


class EditNotAllowed(RecordStoreError):
    pass


def model_for(table: str) -> Any:
    try:
        return TABLES[table]
    except KeyError:
        raise RecordStoreError(f"Unknown table: {table}") from None


def _column_names(model: Any) -> set[str]:
    return {c.key for c in model.__table__.columns}


def record_to_dict(record: Any) -> dict:
    """Plain column -> value mapping for a model instance."""
    return {c.key: getattr(record, c.key) for c in record.__table__.columns}


class RecordStore:
    """Filtered select, insert-with-generated-id, and update-by-id."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _column(self, model: Any, name: str):
        if name not in _column_names(model):
            raise RecordStoreError(f"Unknown column {name!r} on {model.__tablename__}")
        return getattr(model, name)

    def _writable(self, model: Any, values: dict) -> dict:
        columns = _column_names(model)
        unknown = set(values) - columns
        if unknown:
            raise RecordStoreError(
                f"Unknown column(s) {', '.join(sorted(unknown))} on {model.__tablename__}"
            )
        return {
            k: v for k, v in values.items()
            if k not in _SERVER_COLUMNS and k != _OWNER_COLUMN
        }

    async def select(
        self,
        table: str,
        ctx: SessionContext,
        *,
        eq: Optional[dict] = None,
        gte: Optional[dict] = None,
        lte: Optional[dict] = None,
    ) -> list:
        """Return rows of ``table`` visible to ``ctx`` matching the predicates.

        Predicates whose value is None or an empty string are ignored.
        Rows come back in store order.
        """
        model = model_for(table)
        stmt = restrict(select(model), model, ctx)
        for col, value in (eq or {}).items():
            if value not in (None, ""):
                stmt = stmt.where(self._column(model, col) == value)
        for col, value in (gte or {}).items():
            if value not in (None, ""):
                stmt = stmt.where(self._column(model, col) >= value)
        for col, value in (lte or {}).items():
            if value not in (None, ""):
                stmt = stmt.where(self._column(model, col) <= value)

        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as exc:
            raise RecordStoreError(str(exc)) from exc
        return list(result.scalars().all())

    async def get(self, table: str, ctx: SessionContext, record_id: str) -> Any:
        """Fetch one visible row by id; RecordNotFound when absent or hidden."""
        model = model_for(table)
        stmt = restrict(select(model).where(model.id == record_id), model, ctx)
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as exc:
            raise RecordStoreError(str(exc)) from exc
        record = result.scalar_one_or_none()
        if record is None:
            raise RecordNotFound(f"Record {record_id} not found in {table}")
        return record

    async def insert(self, table: str, ctx: SessionContext, values: dict) -> Any:
        if ctx.profile is None:
            raise EditNotAllowed("No signed-in profile")
        model = model_for(table)
        record = model(**self._writable(model, values), created_by_user_id=ctx.user_id)
        try:
            self.db.add(record)
            await self.db.flush()
            await self.db.refresh(record)
        except SQLAlchemyError as exc:
            await self.db.rollback()
            raise RecordStoreError(str(getattr(exc, "orig", None) or exc)) from exc
        logger.info("Inserted %s id=%s by %s", table, record.id, ctx.user_id)
        return record

    async def update(self, table: str, ctx: SessionContext, record_id: str, values: dict) -> Any:
        model = model_for(table)
        changes = self._writable(model, values)
        record = await self.get(table, ctx, record_id)
        if not can_edit(ctx, record):
            raise EditNotAllowed(f"Not allowed to edit record {record_id}")

        for key, value in changes.items():
            setattr(record, key, value)
        try:
            await self.db.flush()
            await self.db.refresh(record)
        except SQLAlchemyError as exc:
            await self.db.rollback()
            raise RecordStoreError(str(getattr(exc, "orig", None) or exc)) from exc
        logger.info("Updated %s id=%s by %s", table, record.id, ctx.user_id)
        return record
