"""Tests for the staff dashboard summary."""
from datetime import datetime, timezone

from marketplace.config import settings
from marketplace.models.account import AccountRole
from marketplace.services import dashboard_service
from tests.conftest import customer, provider, staff
from tests.test_events import make_event
from tests.test_proposals import make_proposal


class TestDashboardStats:

    def test_counts_and_revenue(self, client, db):
        carol = customer(client, "carol")
        first = make_event(client, carol, name="Launch")
        second = make_event(client, carol, name="Gala")
        client.put(f"/api/events/{second['id']}", json={"status": "confirmed"}, headers=carol)
        eve = staff(client, db, "eve", AccountRole.employee)

        accepted = make_proposal(client, eve, first["id"])
        client.post(f"/api/proposals/{accepted['id']}/send", headers=eve)
        client.post(f"/api/proposals/{accepted['id']}/decide", json={"outcome": "accepted"}, headers=carol)
        waiting = make_proposal(client, eve, second["id"])
        client.post(f"/api/proposals/{waiting['id']}/send", headers=eve)

        resp = client.get("/api/dashboard/stats", headers=eve)
        assert resp.status_code == 200
        stats = resp.json()
        assert stats["total_users"] == 2
        assert stats["active_events"] == 1
        assert stats["pending_events"] == 1
        assert stats["monthly_revenue"] == 74000
        assert stats["pending_approvals"] == 1
        assert [u["username"] for u in stats["recent_users"]] == ["eve", "carol"]
        assert [e["id"] for e in stats["recent_events"]] == [second["id"], first["id"]]

    def test_recent_lists_are_capped(self, client, db):
        headers = staff(client, db, "ada")
        for i in range(7):
            customer(client, f"user{i}")
        stats = client.get("/api/dashboard/stats", headers=headers).json()
        assert stats["total_users"] == 8
        assert len(stats["recent_users"]) == 5
        assert stats["recent_users"][0]["username"] == "user6"

    def test_empty_marketplace(self, client, db):
        stats = client.get("/api/dashboard/stats", headers=staff(client, db, "ada")).json()
        assert stats["monthly_revenue"] == 0
        assert stats["recent_events"] == []

    def test_customer_and_provider_denied(self, client, db):
        assert client.get("/api/dashboard/stats", headers=customer(client, "carol")).status_code == 403
        assert client.get("/api/dashboard/stats", headers=provider(client, db, "pat")).status_code == 403


class TestMonthStart:

    def test_utc(self, monkeypatch):
        monkeypatch.setattr(settings, "BUSINESS_TIMEZONE", "UTC")
        now = datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc)
        assert dashboard_service.month_start(now) == datetime(2026, 3, 1, tzinfo=timezone.utc)

    def test_business_timezone_behind_utc(self, monkeypatch):
        monkeypatch.setattr(settings, "BUSINESS_TIMEZONE", "America/New_York")
        # still February in New York
        now = datetime(2026, 3, 1, 3, 0, tzinfo=timezone.utc)
        assert dashboard_service.month_start(now) == datetime(2026, 2, 1, 5, 0, tzinfo=timezone.utc)
