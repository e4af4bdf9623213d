"""User profile model for administrators and field agents."""

import enum
import uuid
from datetime import datetime

from sqlalchemy import String, Enum, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from fielddesk.database import Base


class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    FIELD_AGENT = "FIELD_AGENT"


class ProfileStatus(str, enum.Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    DEACTIVATED = "deactivated"


def new_uuid() -> str:
    return str(uuid.uuid4())


class UserProfile(Base):
    __tablename__ = "profiles"

    user_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    email: Mapped[str | None] = mapped_column(String(255), unique=True, index=True, nullable=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    role: Mapped[Role] = mapped_column(
        Enum(Role), default=Role.FIELD_AGENT, nullable=False,
    )
    status: Mapped[str] = mapped_column(
        String(30), default=ProfileStatus.ACTIVE.value, nullable=False, index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(),
    )

    # ── Helpers ──────────────────────────────────────────

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def first_name(self) -> str:
        parts = (self.full_name or "").split()
        return parts[0] if parts else ""

    def is_status_active(self) -> bool:
        return self.status == ProfileStatus.ACTIVE.value
