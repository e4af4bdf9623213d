"""SQLAlchemy models for the FieldDesk report service."""

from fielddesk.models.profile import UserProfile, Role, ProfileStatus
from fielddesk.models.inspection import FieldInspectionReport
from fielddesk.models.payout import PayoutReport
from fielddesk.models.header import HeaderDetails
from fielddesk.models.error_log import ErrorLog, ErrorSeverity, FailedAction

__all__ = [
    "UserProfile",
    "Role",
    "ProfileStatus",
    "FieldInspectionReport",
    "PayoutReport",
    "HeaderDetails",
    "ErrorLog",
    "ErrorSeverity",
    "FailedAction",
]
