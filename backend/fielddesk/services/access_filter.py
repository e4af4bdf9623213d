"""Row-level visibility and edit rules for report records.

Administrators see and edit every record. Field agents see and edit only the
records they created. A context without a profile sees nothing.

This is not a security boundary on its own: the gateway re-applies it on every
read and update, and the store should carry an equivalent row policy.
"""

from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy import Select, false

from fielddesk.models.profile import Role, UserProfile


@dataclass(frozen=True)
class SessionContext:
    """The current caller as handed to every screen and gateway call."""

    profile: Optional[UserProfile]
    is_admin: bool = False

    @classmethod
    def from_profile(cls, profile: Optional[UserProfile]) -> "SessionContext":
        if profile is None:
            return cls(profile=None, is_admin=False)
        return cls(profile=profile, is_admin=profile.role == Role.ADMIN)

    @property
    def user_id(self) -> Optional[str]:
        return self.profile.user_id if self.profile is not None else None


def restrict(query: Select, model: Any, ctx: SessionContext) -> Select:
    """Constrain ``query`` to the rows ``ctx`` may read.

    Fails closed: a missing identity yields a query that matches no rows.
    """
    if ctx.profile is None or not ctx.user_id:
        return query.where(false())
    if ctx.is_admin:
        return query
    return query.where(model.created_by_user_id == ctx.user_id)


def can_edit(ctx: SessionContext, record: Any) -> bool:
    """True when ``ctx`` may edit ``record`` (a model instance or a dict)."""
    if ctx.profile is None:
        return False
    if ctx.is_admin:
        return True
    if isinstance(record, dict):
        creator = record.get("created_by_user_id")
    else:
        creator = getattr(record, "created_by_user_id", None)
    return creator is not None and creator == ctx.user_id
