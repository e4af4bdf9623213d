"""API tests against the FastAPI app with an in-memory database.

Each request gets a session from the test engine in place of the configured
database; profiles are authenticated with freshly minted access tokens.
"""

import io

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from openpyxl import load_workbook

from fielddesk.auth_utils import create_access_token, create_refresh_token, hash_password
from fielddesk.database import get_db
from fielddesk.main import app
from fielddesk.models.profile import Role, UserProfile


def _auth(user_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}


ADMIN = _auth("admin-1")
AGENT = _auth("agent-1")
OTHER = _auth("agent-2")

INSPECTION = {
    "date": "2026-04-15",
    "loan_ac_no": "LN-4410",
    "customer_name": "Sunita Deshmukh",
    "loan_amount": 325000,
    "location": "Nashik",
    "region": "West",
    "state": "Maharashtra",
    "lar_remarks": "Borrower available",
    "payment_status": "Pending",
}

PAYOUT = {
    "month": "2026-04",
    "financier": "HDFC Bank",
    "loan_amount": 100000,
    "payout_percentage": 5,
    "pan_no": "ABCDE1234F",
    "sm_name": "Rahul",
}


@pytest_asyncio.fixture
async def client(session_factory, profiles):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# ── Health / auth ─────────────────────────────────────────────────

class TestAuth:

    @pytest.mark.asyncio
    async def test_health(self, client):
        resp = await client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "healthy"
        assert resp.headers["X-Content-Type-Options"] == "nosniff"

    @pytest.mark.asyncio
    async def test_reports_require_token(self, client):
        resp = await client.get("/api/inspections")
        assert resp.status_code in (401, 403)

    @pytest.mark.asyncio
    async def test_invalid_token(self, client):
        resp = await client.get("/api/payouts", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_refresh_token_is_not_an_access_token(self, client):
        token = create_refresh_token({"sub": "agent-1"})
        resp = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_login_and_me(self, client, db):
        db.add(UserProfile(
            user_id="agent-9",
            email="priya@example.com",
            hashed_password=hash_password("field-pass-123"),
            full_name="Priya Iyer",
            role=Role.FIELD_AGENT,
        ))
        await db.commit()

        resp = await client.post("/api/auth/login", json={"email": "priya@example.com", "password": "field-pass-123"})
        assert resp.status_code == 200
        tokens = resp.json()
        assert tokens["token_type"] == "bearer"

        me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {tokens['access_token']}"})
        assert me.status_code == 200
        assert me.json()["full_name"] == "Priya Iyer"
        assert me.json()["is_admin"] is False

        refreshed = await client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert refreshed.status_code == 200

    @pytest.mark.asyncio
    async def test_wrong_password(self, client, db):
        db.add(UserProfile(
            user_id="agent-10",
            email="dev@example.com",
            hashed_password=hash_password("right"),
            full_name="Dev Anand",
        ))
        await db.commit()
        resp = await client.post("/api/auth/login", json={"email": "dev@example.com", "password": "wrong"})
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_suspended_profile_rejected(self, client, db):
        db.add(UserProfile(
            user_id="agent-11",
            email="gone@example.com",
            hashed_password="x",
            full_name="Gone Away",
            status="suspended",
        ))
        await db.commit()
        resp = await client.get("/api/inspections", headers=_auth("agent-11"))
        assert resp.status_code == 403


# ── Inspection reports ────────────────────────────────────────────

class TestInspections:

    @pytest.mark.asyncio
    async def test_create_stamps_creator(self, client):
        resp = await client.post("/api/inspections", json={**INSPECTION, "id": "mine"}, headers=AGENT)
        assert resp.status_code == 201
        body = resp.json()
        assert body["id"] != "mine"
        assert body["created_by_user_id"] == "agent-1"
        assert body["invoice_status"] == "Pending"
        assert body["can_edit"] is True

    @pytest.mark.asyncio
    async def test_visibility(self, client):
        await client.post("/api/inspections", json=INSPECTION, headers=AGENT)

        assert (await client.get("/api/inspections", headers=OTHER)).json() == []

        mine = (await client.get("/api/inspections", headers=AGENT)).json()
        assert len(mine) == 1

        everyone = (await client.get("/api/inspections", headers=ADMIN)).json()
        assert len(everyone) == 1
        assert everyone[0]["can_edit"] is True

    @pytest.mark.asyncio
    async def test_filters(self, client):
        await client.post("/api/inspections", json=INSPECTION, headers=AGENT)
        await client.post(
            "/api/inspections",
            json={**INSPECTION, "date": "2026-05-20", "payment_status": "Paid"},
            headers=AGENT,
        )

        paid = (await client.get("/api/inspections", params={"payment_status": "Paid"}, headers=AGENT)).json()
        assert [r["date"] for r in paid] == ["2026-05-20"]

        april = (await client.get(
            "/api/inspections",
            params={"start_date": "2026-04-01", "end_date": "2026-04-30"},
            headers=AGENT,
        )).json()
        assert [r["date"] for r in april] == ["2026-04-15"]

    @pytest.mark.asyncio
    async def test_unknown_status_filter_rejected(self, client):
        resp = await client.get("/api/inspections", params={"payment_status": "Lost"}, headers=AGENT)
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_other_agent_cannot_edit(self, client):
        created = (await client.post("/api/inspections", json=INSPECTION, headers=AGENT)).json()
        resp = await client.put(f"/api/inspections/{created['id']}", json={"lar_remarks": "x"}, headers=OTHER)
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_admin_edit_keeps_creator(self, client):
        created = (await client.post("/api/inspections", json=INSPECTION, headers=AGENT)).json()
        resp = await client.put(
            f"/api/inspections/{created['id']}",
            json={"payment_status": "Paid"},
            headers=ADMIN,
        )
        assert resp.status_code == 200
        assert resp.json()["payment_status"] == "Paid"
        assert resp.json()["created_by_user_id"] == "agent-1"
        assert resp.json()["customer_name"] == INSPECTION["customer_name"]

    @pytest.mark.asyncio
    async def test_missing_required_field(self, client):
        body = {k: v for k, v in INSPECTION.items() if k != "customer_name"}
        resp = await client.post("/api/inspections", json=body, headers=AGENT)
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_export(self, client):
        await client.post("/api/inspections", json=INSPECTION, headers=AGENT)
        resp = await client.get("/api/inspections/export", headers=AGENT)
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
        assert 'filename="Inspection_Reports_' in resp.headers["content-disposition"]
        ws = load_workbook(io.BytesIO(resp.content)).active
        assert ws.max_row == 2
        assert ws.cell(row=2, column=2).value == "LN-4410"

    @pytest.mark.asyncio
    async def test_email_link_admin_only(self, client):
        assert (await client.get("/api/inspections/email-link", headers=AGENT)).status_code == 403
        resp = await client.get("/api/inspections/email-link", headers=ADMIN)
        assert resp.status_code == 200
        assert resp.json()["mailto"].startswith("mailto:")
        assert resp.json()["filename"].endswith(".xlsx")


# ── Payout reports ────────────────────────────────────────────────

class TestPayouts:

    @pytest.mark.asyncio
    async def test_create_derives_amounts(self, client):
        resp = await client.post("/api/payouts", json=PAYOUT, headers=AGENT)
        assert resp.status_code == 201
        body = resp.json()
        assert body["amount_paid"] == pytest.approx(5000)
        assert body["less_tds"] == pytest.approx(500)
        assert body["nett_amount"] == pytest.approx(4500)

    @pytest.mark.asyncio
    async def test_stored_amounts_follow_stored_inputs(self, client):
        resp = await client.post(
            "/api/payouts",
            json={**PAYOUT, "loan_amount": 100000, "payout_percentage": 5.555},
            headers=AGENT,
        )
        assert resp.status_code == 201

        row = (await client.get("/api/payouts", headers=AGENT)).json()[0]
        assert row["payout_percentage"] == pytest.approx(5.56)
        expected = row["loan_amount"] * row["payout_percentage"] / 100
        assert row["amount_paid"] == pytest.approx(expected, abs=0.005)
        assert row["less_tds"] == pytest.approx(expected * 0.10, abs=0.005)
        assert row["nett_amount"] == pytest.approx(expected * 0.90, abs=0.005)

    @pytest.mark.asyncio
    async def test_calculate_uses_stored_precision(self, client):
        resp = await client.post(
            "/api/payouts/calculate",
            json={"loan_amount": 100000, "payout_percentage": 5.555},
            headers=AGENT,
        )
        assert resp.json()["amount_paid"] == pytest.approx(5560)

    @pytest.mark.asyncio
    async def test_client_amounts_ignored(self, client):
        resp = await client.post(
            "/api/payouts",
            json={**PAYOUT, "amount_paid": 1, "nett_amount": 1},
            headers=AGENT,
        )
        assert resp.json()["amount_paid"] == pytest.approx(5000)

    @pytest.mark.asyncio
    async def test_percentage_out_of_range(self, client):
        resp = await client.post("/api/payouts", json={**PAYOUT, "payout_percentage": 150}, headers=AGENT)
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_edit_recalculates_only_on_inputs(self, client):
        created = (await client.post("/api/payouts", json=PAYOUT, headers=AGENT)).json()
        url = f"/api/payouts/{created['id']}"

        renamed = (await client.put(url, json={"financier": "Axis Bank"}, headers=AGENT)).json()
        assert renamed["financier"] == "Axis Bank"
        assert renamed["nett_amount"] == pytest.approx(4500)

        bumped = (await client.put(url, json={"payout_percentage": 10}, headers=AGENT)).json()
        assert bumped["amount_paid"] == pytest.approx(10000)
        assert bumped["less_tds"] == pytest.approx(1000)
        assert bumped["nett_amount"] == pytest.approx(9000)

    @pytest.mark.asyncio
    async def test_month_filter(self, client):
        await client.post("/api/payouts", json=PAYOUT, headers=AGENT)
        await client.post("/api/payouts", json={**PAYOUT, "month": "2026-05"}, headers=AGENT)
        rows = (await client.get("/api/payouts", params={"month": "2026-05"}, headers=AGENT)).json()
        assert [r["month"] for r in rows] == ["2026-05"]

    @pytest.mark.asyncio
    async def test_calculate_preview(self, client):
        resp = await client.post(
            "/api/payouts/calculate",
            json={"loan_amount": 250000, "payout_percentage": 1.5},
            headers=AGENT,
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["amount_paid"] == pytest.approx(3750)
        assert body["nett_amount"] == pytest.approx(3375)
        assert body["withholding_rate"] == pytest.approx(0.10)

    @pytest.mark.asyncio
    async def test_email_link(self, client):
        assert (await client.get("/api/payouts/email-link", headers=OTHER)).status_code == 403
        resp = await client.get("/api/payouts/email-link", headers=ADMIN)
        assert "subject=Payout%20Report" in resp.json()["mailto"]


# ── Dashboard and reference data ──────────────────────────────────

class TestDashboard:

    @pytest.mark.asyncio
    async def test_empty_dashboard(self, client):
        body = (await client.get("/api/dashboard", headers=AGENT)).json()
        assert body["greeting_name"] == "Vikram"
        assert body["inspections"] == 0
        assert body["regions"] == [{"name": "No Data", "count": 0}]

    @pytest.mark.asyncio
    async def test_dashboard_counts_visible_rows(self, client):
        await client.post("/api/inspections", json=INSPECTION, headers=AGENT)
        await client.post("/api/inspections", json={**INSPECTION, "region": ""}, headers=OTHER)
        await client.post("/api/payouts", json={**PAYOUT, "payment_status": "Paid"}, headers=AGENT)
        await client.post("/api/payouts", json=PAYOUT, headers=OTHER)

        mine = (await client.get("/api/dashboard", headers=AGENT)).json()
        assert mine["inspections"] == 1
        assert mine["volume"] == pytest.approx(325000)
        assert mine["paid"] == 1
        assert mine["pending"] == 0

        overall = (await client.get("/api/dashboard", headers=ADMIN)).json()
        assert overall["inspections"] == 2
        assert overall["total_payouts"] == 2
        assert {r["name"]: r["count"] for r in overall["regions"]} == {"West": 1, "Unknown": 1}
        assert overall["payout_status"] == [{"name": "Paid", "value": 1}, {"name": "Pending", "value": 1}]

    @pytest.mark.asyncio
    async def test_lookups(self, client):
        body = (await client.get("/api/lookups")).json()
        assert "Karnataka" in body["states"]
        assert body["payment_statuses"] == ["Pending", "Paid", "Overdue"]
        assert body["payout_statuses"] == ["Pending", "Paid", "Processing"]

    @pytest.mark.asyncio
    async def test_header_details(self, client):
        resp = await client.get("/api/header-details", headers=AGENT)
        assert resp.status_code == 200
        assert resp.json()["company_name"]

        update = {"company_name": "Acme Field Services", "address": "Pune"}
        assert (await client.put("/api/header-details", json=update, headers=AGENT)).status_code == 403
        saved = await client.put("/api/header-details", json=update, headers=ADMIN)
        assert saved.status_code == 200
        assert saved.json()["company_name"] == "Acme Field Services"
