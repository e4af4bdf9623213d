"""Tests for row visibility and edit authorization."""

from sqlalchemy import select

from fielddesk.models.inspection import FieldInspectionReport
from fielddesk.models.payout import PayoutReport
from fielddesk.models.profile import Role
from fielddesk.services.access_filter import SessionContext, can_edit, restrict

from conftest import make_profile


def _sql(stmt) -> str:
    return str(stmt.compile(compile_kwargs={"literal_binds": True}))


class TestSessionContext:
    def test_admin_flag_from_role(self):
        ctx = SessionContext.from_profile(make_profile("a", Role.ADMIN))
        assert ctx.is_admin is True
        assert ctx.user_id == "a"

    def test_agent_is_not_admin(self):
        ctx = SessionContext.from_profile(make_profile("b"))
        assert ctx.is_admin is False

    def test_missing_profile(self):
        ctx = SessionContext.from_profile(None)
        assert ctx.profile is None
        assert ctx.user_id is None
        assert ctx.is_admin is False


class TestRestrict:
    def test_admin_query_unchanged(self, admin_ctx):
        base = select(FieldInspectionReport)
        assert _sql(restrict(base, FieldInspectionReport, admin_ctx)) == _sql(base)

    def test_agent_constrained_to_own_rows(self, agent_ctx):
        sql = _sql(restrict(select(PayoutReport), PayoutReport, agent_ctx))
        assert "payout_reports.created_by_user_id = 'agent-1'" in sql

    def test_applies_to_both_tables(self, agent_ctx):
        for model in (FieldInspectionReport, PayoutReport):
            sql = _sql(restrict(select(model), model, agent_ctx))
            assert f"{model.__tablename__}.created_by_user_id = 'agent-1'" in sql

    def test_keeps_existing_predicates(self, agent_ctx):
        base = select(FieldInspectionReport).where(FieldInspectionReport.payment_status == "Paid")
        sql = _sql(restrict(base, FieldInspectionReport, agent_ctx))
        assert "payment_status = 'Paid'" in sql
        assert "created_by_user_id = 'agent-1'" in sql

    def test_missing_identity_fails_closed(self, anonymous_ctx):
        sql = _sql(restrict(select(FieldInspectionReport), FieldInspectionReport, anonymous_ctx))
        assert "WHERE" in sql
        assert "created_by_user_id" not in sql.split("WHERE", 1)[1]

    def test_admin_flag_without_profile_still_fails_closed(self):
        ctx = SessionContext(profile=None, is_admin=True)
        sql = _sql(restrict(select(PayoutReport), PayoutReport, ctx))
        assert "WHERE" in sql


class TestCanEdit:
    def test_admin_edits_anything(self, admin_ctx):
        assert can_edit(admin_ctx, {"created_by_user_id": "someone-else"})

    def test_creator_edits_own(self, agent_ctx):
        assert can_edit(agent_ctx, {"created_by_user_id": "agent-1"})

    def test_agent_cannot_edit_others(self, agent_ctx):
        assert not can_edit(agent_ctx, {"created_by_user_id": "agent-2"})

    def test_no_profile_cannot_edit(self, anonymous_ctx):
        assert not can_edit(anonymous_ctx, {"created_by_user_id": None})

    def test_model_instance(self, agent_ctx):
        record = FieldInspectionReport(created_by_user_id="agent-1")
        assert can_edit(agent_ctx, record)

    def test_missing_creator_not_editable_by_agent(self, agent_ctx):
        assert not can_edit(agent_ctx, {})
