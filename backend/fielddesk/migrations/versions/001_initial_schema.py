"""001 – Profiles, field inspection reports, payout reports, header details, error logs.

Revision ID: 001
"""

from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ── Profiles ─────────────────────────────────────────────
    op.create_table(
        "profiles",
        sa.Column("user_id", sa.String(36), primary_key=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("role", sa.Enum("ADMIN", "FIELD_AGENT", name="role"), nullable=False),
        sa.Column("status", sa.String(30), server_default="active", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_profiles_email", "profiles", ["email"], unique=True)
    op.create_index("ix_profiles_status", "profiles", ["status"])

    # ── Field inspection reports ─────────────────────────────
    op.create_table(
        "field_inspection_reports",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("loan_ac_no", sa.String(50), nullable=False),
        sa.Column("customer_name", sa.String(200), nullable=False),
        sa.Column("loan_amount", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("location", sa.String(200), nullable=False, server_default=""),
        sa.Column("region", sa.String(100), nullable=False, server_default=""),
        sa.Column("state", sa.String(100), nullable=False, server_default=""),
        sa.Column("lar_remarks", sa.Text(), nullable=False, server_default=""),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default="Pending"),
        sa.Column("invoice_status", sa.String(50), nullable=False, server_default="Pending"),
        sa.Column("created_by_user_id", sa.String(36), sa.ForeignKey("profiles.user_id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_field_inspection_reports_date", "field_inspection_reports", ["date"])
    op.create_index(
        "ix_field_inspection_reports_payment_status", "field_inspection_reports", ["payment_status"],
    )
    op.create_index(
        "ix_field_inspection_reports_created_by_user_id", "field_inspection_reports", ["created_by_user_id"],
    )

    # ── Payout reports ───────────────────────────────────────
    op.create_table(
        "payout_reports",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("month", sa.String(7), nullable=False),
        sa.Column("financier", sa.String(200), nullable=False),
        sa.Column("loan_amount", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("payout_percentage", sa.Numeric(5, 2), nullable=False, server_default="0"),
        sa.Column("amount_paid", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("less_tds", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("nett_amount", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("bank_details", sa.Text(), nullable=False, server_default=""),
        sa.Column("pan_no", sa.String(20), nullable=False, server_default=""),
        sa.Column("sm_name", sa.String(200), nullable=False, server_default=""),
        sa.Column("contact_no", sa.String(30), nullable=False, server_default=""),
        sa.Column("mail_sent", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default="Pending"),
        sa.Column("created_by_user_id", sa.String(36), sa.ForeignKey("profiles.user_id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_payout_reports_month", "payout_reports", ["month"])
    op.create_index("ix_payout_reports_payment_status", "payout_reports", ["payment_status"])
    op.create_index("ix_payout_reports_created_by_user_id", "payout_reports", ["created_by_user_id"])

    # ── Header details ───────────────────────────────────────
    op.create_table(
        "header_details",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("company_name", sa.String(200), nullable=False, server_default=""),
        sa.Column("address", sa.String(500), nullable=False, server_default=""),
        sa.Column("contact_email", sa.String(255), nullable=False, server_default=""),
        sa.Column("logo_url", sa.String(500), nullable=False, server_default=""),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # ── Error logs ───────────────────────────────────────────
    op.create_table(
        "error_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "severity",
            sa.Enum("WARNING", "ERROR", "CRITICAL", name="errorseverity"),
            nullable=False,
        ),
        sa.Column(
            "action",
            sa.Enum("FETCH", "SAVE", "EXPORT", "REQUEST", name="failedaction"),
            nullable=False,
        ),
        sa.Column("error_type", sa.String(200), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("traceback", sa.Text(), nullable=True),
        sa.Column("origin", sa.String(500), nullable=True),
        sa.Column("report_table", sa.String(50), nullable=True),
        sa.Column("record_id", sa.String(36), nullable=True),
        sa.Column("user_id", sa.String(36), nullable=True),
        sa.Column("request_method", sa.String(10), nullable=True),
        sa.Column("request_path", sa.String(500), nullable=True),
        sa.Column("status_code", sa.Integer(), nullable=True),
        sa.Column("response_time_ms", sa.Float(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_error_logs_created_at", "error_logs", ["created_at"])
    op.create_index("ix_error_logs_severity", "error_logs", ["severity"])
    op.create_index("ix_error_logs_report_table", "error_logs", ["report_table"])


def downgrade() -> None:
    op.drop_table("error_logs")
    op.drop_table("header_details")
    op.drop_table("payout_reports")
    op.drop_table("field_inspection_reports")
    op.drop_table("profiles")
    op.execute("DROP TYPE IF EXISTS failedaction")
    op.execute("DROP TYPE IF EXISTS errorseverity")
    op.execute("DROP TYPE IF EXISTS role")
