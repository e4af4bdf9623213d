"""Payout report model."""

from datetime import datetime

from sqlalchemy import String, Numeric, Boolean, DateTime, Text, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column

from fielddesk.database import Base
from fielddesk.models.profile import new_uuid


class PayoutReport(Base):
    __tablename__ = "payout_reports"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    month: Mapped[str] = mapped_column(String(7), nullable=False, index=True)  # YYYY-MM
    financier: Mapped[str] = mapped_column(String(200), nullable=False)
    loan_amount: Mapped[float] = mapped_column(Numeric(14, 2), nullable=False, default=0)
    payout_percentage: Mapped[float] = mapped_column(Numeric(5, 2), nullable=False, default=0)

    # Derived by the payout calculator
    amount_paid: Mapped[float] = mapped_column(Numeric(14, 2), nullable=False, default=0)
    less_tds: Mapped[float] = mapped_column(Numeric(14, 2), nullable=False, default=0)
    nett_amount: Mapped[float] = mapped_column(Numeric(14, 2), nullable=False, default=0)

    bank_details: Mapped[str] = mapped_column(Text, default="", nullable=False)
    pan_no: Mapped[str] = mapped_column(String(20), default="", nullable=False)
    sm_name: Mapped[str] = mapped_column(String(200), default="", nullable=False)
    contact_no: Mapped[str] = mapped_column(String(30), default="", nullable=False)
    mail_sent: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    payment_status: Mapped[str] = mapped_column(
        String(20), default="Pending", nullable=False, index=True,
    )

    created_by_user_id: Mapped[str] = mapped_column(
        ForeignKey("profiles.user_id"), nullable=False, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(),
    )
