"""Field inspection report model."""

import datetime as dt

from sqlalchemy import String, Numeric, Date, DateTime, Text, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column

from fielddesk.constants import DEFAULT_INVOICE_STATUS
from fielddesk.database import Base
from fielddesk.models.profile import new_uuid


class FieldInspectionReport(Base):
    __tablename__ = "field_inspection_reports"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    loan_ac_no: Mapped[str] = mapped_column(String(50), nullable=False)
    customer_name: Mapped[str] = mapped_column(String(200), nullable=False)
    loan_amount: Mapped[float] = mapped_column(Numeric(14, 2), nullable=False, default=0)
    location: Mapped[str] = mapped_column(String(200), default="", nullable=False)
    region: Mapped[str] = mapped_column(String(100), default="", nullable=False)
    state: Mapped[str] = mapped_column(String(100), default="", nullable=False)
    lar_remarks: Mapped[str] = mapped_column(Text, default="", nullable=False)
    payment_status: Mapped[str] = mapped_column(
        String(20), default="Pending", nullable=False, index=True,
    )
    invoice_status: Mapped[str] = mapped_column(
        String(50), default=DEFAULT_INVOICE_STATUS, nullable=False,
    )

    # Immutable after insert; drives row visibility
    created_by_user_id: Mapped[str] = mapped_column(
        ForeignKey("profiles.user_id"), nullable=False, index=True,
    )
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(),
    )
