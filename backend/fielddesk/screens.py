"""Per-page controllers for the dashboard and the two report lists.

A screen is built with the record store and the caller's SessionContext and
owns the view state of one page: the fetched rows, the open form, and the
load/submit state machine

    IDLE -> LOADING -> LOADED | FAILED
    LOADED -> SUBMITTING -> LOADED (refreshed) | FAILED (form kept)

Each fetch takes a request token. Only the most recent request may write its
result into the screen, and nothing is written after close().
"""

import enum
import logging
from datetime import date
from typing import Any, Optional

from fielddesk.constants import DEFAULT_INVOICE_STATUS, STATES
from fielddesk.services import export_service
from fielddesk.services.access_filter import SessionContext, can_edit
from fielddesk.models.error_log import FailedAction
from fielddesk.services.dashboard import DashboardSummary, summarize
from fielddesk.services.error_logger import log_report_failure
from fielddesk.services.mail_compose import report_mailto
from fielddesk.services.payout_calculator import apply_field_change, compute
from fielddesk.services.record_store import (
    INSPECTIONS,
    PAYOUTS,
    EditNotAllowed,
    RecordNotFound,
    RecordStore,
    RecordStoreError,
    record_to_dict,
)

logger = logging.getLogger(__name__)


class ScreenState(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"
    SUBMITTING = "submitting"


class Screen:
    """Shared fetch bookkeeping."""

    def __init__(self, store: RecordStore, ctx: SessionContext):
        self.store = store
        self.ctx = ctx
        self.state = ScreenState.IDLE
        self.error: Optional[str] = None
        self._request_seq = 0
        self._closed = False

    @property
    def has_identity(self) -> bool:
        return self.ctx.profile is not None

    def _begin_fetch(self) -> int:
        self._request_seq += 1
        self.state = ScreenState.LOADING
        return self._request_seq

    def _is_current(self, token: int) -> bool:
        return not self._closed and token == self._request_seq

    def close(self) -> None:
        """Stop accepting fetch results (page left or torn down)."""
        self._closed = True


class ReportScreen(Screen):
    table: str = ""
    export_stem: str = ""
    export_columns: list[str] = []
    sheet_name: str = "Report"

    def __init__(self, store: RecordStore, ctx: SessionContext):
        super().__init__(store, ctx)
        self.rows: list = []
        self.filters: dict = {}
        self.form: Optional[dict] = None
        self.editing_id: Optional[str] = None

    # ── Listing ─────────────────────────────────────────

    def default_form(self) -> dict:
        raise NotImplementedError

    def predicates(self) -> dict:
        """Store predicates (eq/gte/lte) for the current filters."""
        return {}

    def set_filters(self, **filters: Any) -> None:
        self.filters = {k: v for k, v in filters.items() if v not in (None, "")}

    async def load(self) -> list:
        if self._closed:
            return self.rows
        if not self.has_identity:
            logger.debug("No profile yet; skipping %s fetch", self.table)
            return self.rows

        token = self._begin_fetch()
        try:
            rows = await self.store.select(self.table, self.ctx, **self.predicates())
        except RecordStoreError as exc:
            await log_report_failure(exc, action=FailedAction.FETCH, table=self.table, ctx=self.ctx)
            if self._is_current(token):
                self.state = ScreenState.FAILED
                self.error = str(exc)
            return self.rows

        if not self._is_current(token):
            logger.debug("Discarding superseded %s fetch #%d", self.table, token)
            return self.rows

        self.rows = rows
        self.state = ScreenState.LOADED
        self.error = None
        return rows

    def can_edit(self, record: Any) -> bool:
        return can_edit(self.ctx, record)

    # ── Form ────────────────────────────────────────────

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None

    def new_form(self) -> dict:
        self.form = self.default_form()
        self.editing_id = None
        return self.form

    def open_edit(self, record: Any) -> dict:
        if not self.can_edit(record):
            raise EditNotAllowed("You can only edit reports you created")
        values = dict(record) if isinstance(record, dict) else record_to_dict(record)
        self.form = values
        self.editing_id = values["id"]
        return self.form

    async def open_edit_by_id(self, record_id: str) -> dict:
        try:
            record = await self.store.get(self.table, self.ctx, record_id)
        except (RecordNotFound, EditNotAllowed):
            raise
        except RecordStoreError as exc:
            await log_report_failure(
                exc, action=FailedAction.FETCH, table=self.table, ctx=self.ctx, record_id=record_id,
            )
            raise
        return self.open_edit(record)

    def set_field(self, name: str, value: Any) -> dict:
        if self.form is None:
            self.new_form()
        self.form = {**self.form, name: value}
        return self.form

    def build_payload(self) -> dict:
        """Values sent to the store for the open form.

        A new record carries no id or creation timestamp and is stamped with
        the caller as creator. An edit always carries the existing id and
        keeps the original creator.
        """
        if self.form is None:
            raise ValueError("No form is open")
        if not self.has_identity:
            raise EditNotAllowed("No signed-in profile")

        payload = dict(self.form)
        payload.pop("created_at", None)
        if self.is_editing:
            payload["id"] = self.editing_id
        else:
            payload.pop("id", None)
            payload["created_by_user_id"] = self.ctx.user_id
        return payload

    async def submit(self, refresh: bool = True) -> Any:
        """Insert or update the open form.

        On failure the form is kept for correction and ``error`` holds the
        message to show the user; None is returned.
        """
        payload = self.build_payload()
        self.state = ScreenState.SUBMITTING
        try:
            if self.is_editing:
                record_id = payload.pop("id")
                payload.pop("created_by_user_id", None)
                record = await self.store.update(self.table, self.ctx, record_id, payload)
            else:
                record = await self.store.insert(self.table, self.ctx, payload)
        except RecordStoreError as exc:
            await log_report_failure(
                exc, action=FailedAction.SAVE, table=self.table, ctx=self.ctx, record_id=self.editing_id,
            )
            self.state = ScreenState.FAILED
            self.error = f"Error saving report:\n{exc}"
            return None

        self.form = None
        self.editing_id = None
        self.error = None
        self.state = ScreenState.LOADED
        if refresh:
            await self.load()
        return record

    # ── Export / mail ───────────────────────────────────

    def export(self, header: Any = None) -> bytes:
        rows = export_service.rows_for_export(self.rows, self.export_columns)
        company = getattr(header, "company_name", None) or None
        return export_service.export_excel(
            rows,
            columns=self.export_columns,
            sheet_name=self.sheet_name,
            title=self.sheet_name,
            creator=company,
        )

    def export_filename(self) -> str:
        return export_service.export_filename(self.export_stem)

    def email_link(self, to: str = "") -> str:
        if not self.ctx.is_admin:
            raise PermissionError("Only administrators can send reports by email")
        return report_mailto(self.table, to)


class InspectionReportsScreen(ReportScreen):
    table = INSPECTIONS
    export_stem = "Inspection_Reports"
    export_columns = export_service.INSPECTION_COLUMNS
    sheet_name = "Inspection Reports"

    def default_form(self) -> dict:
        return {
            "date": date.today(),
            "loan_ac_no": "",
            "customer_name": "",
            "loan_amount": 0,
            "location": "",
            "region": "",
            "lar_remarks": "",
            "state": STATES[0],
            "payment_status": "Pending",
            "invoice_status": DEFAULT_INVOICE_STATUS,
        }

    def predicates(self) -> dict:
        return {
            "eq": {"payment_status": self.filters.get("payment_status")},
            "gte": {"date": self.filters.get("start_date")},
            "lte": {"date": self.filters.get("end_date")},
        }

    def build_payload(self) -> dict:
        payload = super().build_payload()
        payload["loan_amount"] = float(payload.get("loan_amount") or 0)
        return payload


class PayoutReportsScreen(ReportScreen):
    table = PAYOUTS
    export_stem = "Payout_Reports"
    export_columns = export_service.PAYOUT_COLUMNS
    sheet_name = "Payout Reports"

    def default_form(self) -> dict:
        form = {
            "month": date.today().strftime("%Y-%m"),
            "financier": "",
            "loan_amount": 0,
            "payout_percentage": 0,
            "bank_details": "",
            "pan_no": "",
            "sm_name": "",
            "contact_no": "",
            "mail_sent": False,
            "payment_status": "Pending",
        }
        form.update(compute(0, 0).as_record_fields())
        return form

    def predicates(self) -> dict:
        return {
            "eq": {
                "month": self.filters.get("month"),
                "payment_status": self.filters.get("payment_status"),
            },
        }

    def set_field(self, name: str, value: Any) -> dict:
        if self.form is None:
            self.new_form()
        self.form = apply_field_change(self.form, name, value)
        return self.form


class DashboardScreen(Screen):
    def __init__(self, store: RecordStore, ctx: SessionContext):
        super().__init__(store, ctx)
        self.summary: Optional[DashboardSummary] = None

    @property
    def greeting_name(self) -> str:
        return self.ctx.profile.first_name if self.ctx.profile is not None else ""

    async def load(self) -> Optional[DashboardSummary]:
        if self._closed:
            return self.summary
        if not self.has_identity:
            logger.debug("No profile yet; skipping dashboard fetch")
            return self.summary

        token = self._begin_fetch()
        table = INSPECTIONS
        try:
            inspections = await self.store.select(INSPECTIONS, self.ctx)
            table = PAYOUTS
            payouts = await self.store.select(PAYOUTS, self.ctx)
        except RecordStoreError as exc:
            await log_report_failure(exc, action=FailedAction.FETCH, table=table, ctx=self.ctx)
            if self._is_current(token):
                self.state = ScreenState.FAILED
                self.error = str(exc)
            return self.summary

        if not self._is_current(token):
            logger.debug("Discarding superseded dashboard fetch #%d", token)
            return self.summary

        self.summary = summarize(inspections, payouts)
        self.state = ScreenState.LOADED
        self.error = None
        return self.summary
