"""Tests for the profile resolver and role-specific profile updates."""
from marketplace.models.account import AccountRole
from marketplace.models.activity import Activity
from marketplace.models.profile import AdminProfile, CustomerProfile
from marketplace.services import credential_service, profile_service
from tests.conftest import PASSWORD, create_staff, customer, provider, staff


class TestResolve:
    """One profile per account, created on first use."""

    def test_resolve_is_idempotent(self, db):
        account = create_staff(db, "ada")
        first = profile_service.resolve(db, account)
        second = profile_service.resolve(db, account)
        assert first == second
        assert first.role == AccountRole.admin
        assert db.query(AdminProfile).filter(AdminProfile.account_id == account.id).count() == 1

    def test_resolve_creates_missing_profile(self, db):
        account = credential_service.register(db, "ada", "ada@example.com", PASSWORD, AccountRole.admin)
        db.commit()
        assert profile_service.find_profile(db, account) is None

        ctx = profile_service.resolve(db, account)
        profile = db.get(AdminProfile, ctx.profile_id)
        assert profile.account_id == account.id
        assert profile.name == "ada"


class TestProfileApi:
    """GET / POST /api/profile."""

    def test_get_own_profile(self, client):
        headers = customer(client, "carol")
        resp = client.get("/api/profile", headers=headers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["role"] == "customer"
        assert body["profile"]["name"] == "carol"

    def test_customer_updates_profile(self, client, db):
        headers = customer(client, "carol")
        resp = client.post("/api/profile", json={"company": "Acme Events", "city": "Lisbon"}, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["profile"]["company"] == "Acme Events"

        profile = db.query(CustomerProfile).one()
        assert profile.city == "Lisbon"
        activity = db.query(Activity).filter(Activity.action == "profile_update").one()
        assert activity.payload == {"fields": ["city", "company"]}

    def test_field_from_another_role_rejected(self, client):
        headers = customer(client, "carol")
        resp = client.post("/api/profile", json={"display_name": "Not mine"}, headers=headers)
        assert resp.status_code == 422

    def test_provider_cannot_self_verify(self, client, db):
        headers = provider(client, db, "pat")
        resp = client.post("/api/profile", json={"verified": True}, headers=headers)
        assert resp.status_code == 422

    def test_provider_updates_languages(self, client, db):
        headers = provider(client, db, "pat")
        resp = client.post("/api/profile", json={"languages": ["en", "pt"], "team_size": 4}, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["profile"]["languages"] == ["en", "pt"]
        assert resp.json()["profile"]["team_size"] == 4

    def test_staff_profile(self, client, db):
        headers = staff(client, db, "eve", AccountRole.employee)
        resp = client.post("/api/profile", json={"department": "Sales"}, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["role"] == "employee"
        assert resp.json()["profile"]["department"] == "Sales"

    def test_unauthenticated(self, client):
        assert client.get("/api/profile").status_code == 401
