"""Pydantic schemas for request/response validation."""

import datetime as dt
from typing import Optional, Literal
from pydantic import BaseModel, EmailStr, Field


PaymentStatus = Literal["Pending", "Paid", "Overdue"]
PayoutStatus = Literal["Pending", "Paid", "Processing"]


# ── Auth ──────────────────────────────────────────────

class ProfileLogin(BaseModel):
    email: EmailStr
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class ProfileResponse(BaseModel):
    user_id: str
    role: str
    full_name: str
    email: Optional[str] = None
    status: str = "active"
    is_admin: bool = False

    model_config = {"from_attributes": True}


# ── Field Inspection Reports ─────────────────────────

class InspectionReportCreate(BaseModel):
    date: dt.date
    loan_ac_no: str = Field(min_length=1, max_length=50)
    customer_name: str = Field(min_length=1, max_length=200)
    loan_amount: float = Field(default=0, ge=0)
    location: str = Field(default="", max_length=200)
    region: str = Field(default="", max_length=100)
    state: str = Field(default="", max_length=100)
    lar_remarks: str = ""
    payment_status: PaymentStatus = "Pending"
    invoice_status: str = Field(default="Pending", max_length=50)


class InspectionReportUpdate(BaseModel):
    """All fields optional; only the ones sent are changed."""
    date: Optional[dt.date] = None
    loan_ac_no: Optional[str] = Field(None, min_length=1, max_length=50)
    customer_name: Optional[str] = Field(None, min_length=1, max_length=200)
    loan_amount: Optional[float] = Field(None, ge=0)
    location: Optional[str] = Field(None, max_length=200)
    region: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    lar_remarks: Optional[str] = None
    payment_status: Optional[PaymentStatus] = None
    invoice_status: Optional[str] = Field(None, max_length=50)


class InspectionReportResponse(BaseModel):
    id: str
    date: dt.date
    loan_ac_no: str
    customer_name: str
    loan_amount: float
    location: str
    region: str
    state: str
    lar_remarks: str
    payment_status: str
    invoice_status: str
    created_by_user_id: str
    created_at: Optional[dt.datetime] = None
    can_edit: bool = False

    model_config = {"from_attributes": True}


# ── Payout Reports ───────────────────────────────────

class PayoutReportCreate(BaseModel):
    month: str = Field(pattern=r"^\d{4}-(0[1-9]|1[0-2])$")
    financier: str = Field(min_length=1, max_length=200)
    loan_amount: float = Field(default=0, ge=0)
    payout_percentage: float = Field(default=0, ge=0, le=100)
    bank_details: str = ""
    pan_no: str = Field(default="", max_length=20)
    sm_name: str = Field(default="", max_length=200)
    contact_no: str = Field(default="", max_length=30)
    mail_sent: bool = False
    payment_status: PayoutStatus = "Pending"


class PayoutReportUpdate(BaseModel):
    """Derived amounts are never accepted; they follow loan amount and percentage."""
    month: Optional[str] = Field(None, pattern=r"^\d{4}-(0[1-9]|1[0-2])$")
    financier: Optional[str] = Field(None, min_length=1, max_length=200)
    loan_amount: Optional[float] = Field(None, ge=0)
    payout_percentage: Optional[float] = Field(None, ge=0, le=100)
    bank_details: Optional[str] = None
    pan_no: Optional[str] = Field(None, max_length=20)
    sm_name: Optional[str] = Field(None, max_length=200)
    contact_no: Optional[str] = Field(None, max_length=30)
    mail_sent: Optional[bool] = None
    payment_status: Optional[PayoutStatus] = None


class PayoutReportResponse(BaseModel):
    id: str
    month: str
    financier: str
    loan_amount: float
    payout_percentage: float
    amount_paid: float
    less_tds: float
    nett_amount: float
    bank_details: str
    pan_no: str
    sm_name: str
    contact_no: str
    mail_sent: bool
    payment_status: str
    created_by_user_id: str
    created_at: Optional[dt.datetime] = None
    can_edit: bool = False

    model_config = {"from_attributes": True}


class PayoutCalculationRequest(BaseModel):
    loan_amount: float = Field(ge=0)
    payout_percentage: float = Field(ge=0, le=100)


class PayoutCalculationResponse(BaseModel):
    amount_paid: float
    less_tds: float
    nett_amount: float
    withholding_rate: float


# ── Dashboard ────────────────────────────────────────

class RegionCount(BaseModel):
    name: str
    count: int


class StatusSlice(BaseModel):
    name: str
    value: int


class DashboardResponse(BaseModel):
    greeting_name: str
    inspections: int
    volume: float
    total_payouts: int
    pending: int
    paid: int
    regions: list[RegionCount]
    payout_status: list[StatusSlice]


# ── Misc ─────────────────────────────────────────────

class MailLinkResponse(BaseModel):
    mailto: str
    filename: str


class HeaderDetailsUpdate(BaseModel):
    company_name: str = Field(default="", max_length=200)
    address: str = Field(default="", max_length=500)
    contact_email: str = Field(default="", max_length=255)
    logo_url: str = Field(default="", max_length=500)


class HeaderDetailsResponse(HeaderDetailsUpdate):
    id: Optional[str] = None

    model_config = {"from_attributes": True}


class LookupsResponse(BaseModel):
    states: list[str]
    payment_statuses: list[str]
    payout_statuses: list[str]
