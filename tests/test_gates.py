"""Route gates: page permission checks and role floors."""

import uuid

import pytest
from sqlalchemy.exc import SQLAlchemyError

from backoffice.models import Campaign, UserRole
from backoffice.rbac import dependencies
from backoffice.rbac.dependencies import declared_page_keys, require_page_permission
from backoffice.rbac.permission_seed import find_undeclared_pages
from tests.utils import create_user, login, remove_row, set_flags


async def make_campaign(db, name="Spring Sale") -> Campaign:
    campaign = Campaign(id=uuid.uuid4(), name=name, status="active")
    db.add(campaign)
    await db.commit()
    return campaign


class TestPageGate:
    async def test_allowed_request_reaches_handler(self, client, db):
        manager = await create_user(db, "manager", UserRole.MANAGER)
        headers = await login(db, manager)

        resp = await client.get("/api/campaigns", headers=headers)
        assert resp.status_code == 200

    async def test_denied_request_names_the_action(self, client, db):
        manager = await create_user(db, "manager", UserRole.MANAGER)
        headers = await login(db, manager)
        campaign = await make_campaign(db)

        resp = await client.delete(f"/api/campaigns/{campaign.id}", headers=headers)

        assert resp.status_code == 403
        assert resp.json() == {
            "message": "Access denied. You don't have delete permission for this page."
        }

    async def test_denied_request_has_no_side_effects(self, client, db):
        manager = await create_user(db, "manager", UserRole.MANAGER)
        headers = await login(db, manager)
        campaign = await make_campaign(db)

        await client.delete(f"/api/campaigns/{campaign.id}", headers=headers)
        await client.post("/api/campaigns", json={"name": "Sneaky"}, headers=headers)

        campaign_id = campaign.id
        db.expire_all()
        assert await db.get(Campaign, campaign_id) is not None
        resp = await client.get("/api/campaigns", headers=headers)
        assert [c["name"] for c in resp.json()] == ["Spring Sale"]

    async def test_unauthenticated_request_is_401(self, client):
        resp = await client.get("/api/campaigns")
        assert resp.status_code == 401

    async def test_store_failure_is_500_not_403(self, client, db, monkeypatch):
        manager = await create_user(db, "manager", UserRole.MANAGER)
        headers = await login(db, manager)

        async def broken(*args, **kwargs):
            raise SQLAlchemyError("permission table unavailable")

        monkeypatch.setattr(dependencies, "evaluate", broken)

        resp = await client.get("/api/campaigns", headers=headers)
        assert resp.status_code == 500
        assert resp.json() == {"message": "Permission check failed"}

    async def test_missing_token_stops_before_gate(self, client, monkeypatch):
        """Identity resolution rejects the request before any permission lookup."""
        async def unreachable(*args, **kwargs):
            raise AssertionError("evaluate should not run")

        monkeypatch.setattr(dependencies, "evaluate", unreachable)

        page_gated = await client.get("/api/campaigns")
        role_floor = await client.get("/api/backup/info")

        assert page_gated.status_code == 401
        assert page_gated.json() == {"message": "Unauthorized"}
        assert role_floor.status_code == 401

    async def test_super_admin_without_bypass_follows_table(self, client, db):
        """Regular pages give super_admin no special treatment."""
        await set_flags(db, UserRole.SUPER_ADMIN, "campaigns")
        root = await create_user(db, "root", UserRole.SUPER_ADMIN)
        headers = await login(db, root)

        resp = await client.get("/api/campaigns", headers=headers)
        assert resp.status_code == 403

    async def test_super_admin_bypass_on_admin_page(self, client, db):
        """With no `admin` row at all, the bypassed admin routes still open."""
        await remove_row(db, UserRole.SUPER_ADMIN, "admin")
        root = await create_user(db, "root", UserRole.SUPER_ADMIN)
        headers = await login(db, root)

        resp = await client.get("/api/pages", headers=headers)
        assert resp.status_code == 200

    async def test_permission_change_applies_on_next_request(self, client, db):
        user = await create_user(db, "ivy", UserRole.USER)
        headers = await login(db, user)
        assert (await client.get("/api/campaigns", headers=headers)).status_code == 403

        await set_flags(db, UserRole.USER, "campaigns", can_view=True)
        assert (await client.get("/api/campaigns", headers=headers)).status_code == 200

    async def test_every_gated_page_is_seeded(self, client, db):
        assert {"admin", "campaigns", "finance", "work_reports"} <= declared_page_keys
        assert await find_undeclared_pages(db, declared_page_keys) == set()


class TestRoleFloor:
    @pytest.mark.parametrize("role", [UserRole.USER, UserRole.MANAGER, UserRole.ADMIN, UserRole.CLIENT])
    async def test_backup_requires_super_admin(self, client, db, role):
        user = await create_user(db, f"{role.value}-user", role)
        headers = await login(db, user)

        resp = await client.get("/api/backup/info", headers=headers)
        assert resp.status_code == 403
        assert resp.json() == {"message": "Super Admin access required"}

    async def test_super_admin_gets_backup_info(self, client, db):
        root = await create_user(db, "root", UserRole.SUPER_ADMIN)
        headers = await login(db, root)

        resp = await client.get("/api/backup/info", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["counts"]["pages"] == 10
        assert resp.json()["counts"]["users"] == 1

    async def test_client_users_require_admin(self, client, db):
        manager = await create_user(db, "manager", UserRole.MANAGER)
        headers = await login(db, manager)

        resp = await client.get("/api/client-users", headers=headers)
        assert resp.status_code == 403
        assert resp.json() == {"message": "Admin access required"}

    @pytest.mark.parametrize("role", [UserRole.ADMIN, UserRole.SUPER_ADMIN])
    async def test_admins_pass_the_admin_floor(self, client, db, role):
        user = await create_user(db, f"{role.value}-user", role)
        headers = await login(db, user)

        resp = await client.get("/api/client-users", headers=headers)
        assert resp.status_code == 200

    async def test_role_floor_ignores_page_table(self, client, db):
        """Emptying the admin page row does not affect role-floor routes."""
        await set_flags(db, UserRole.ADMIN, "admin")
        admin = await create_user(db, "admin", UserRole.ADMIN)
        headers = await login(db, admin)

        resp = await client.get("/api/client-users", headers=headers)
        assert resp.status_code == 200
