"""Client data scoping and per-record ownership."""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import select

from backoffice.core.errors import Forbidden
from backoffice.models import AdAccount, Campaign, FinanceProject, UserRole, WorkReport
from backoffice.rbac.context_resolver import (
    DataScope,
    apply_client_scope,
    ensure_owner_or_admin,
    in_client_scope,
    resolve_data_scope,
    scoped_client_id,
)
from tests.utils import create_client, create_user, login, principal_for, set_flags


async def seed_two_clients(db):
    c1 = await create_client(db, "Client One")
    c2 = await create_client(db, "Client Two")
    db.add_all([
        Campaign(id=uuid.uuid4(), name="C1 launch", client_id=c1.id, status="active"),
        Campaign(id=uuid.uuid4(), name="C1 retarget", client_id=c1.id, status="active"),
        Campaign(id=uuid.uuid4(), name="C2 launch", client_id=c2.id, status="active"),
        Campaign(id=uuid.uuid4(), name="Internal", client_id=None, status="active"),
    ])
    await db.commit()
    return c1, c2


async def make_report(db, owner) -> WorkReport:
    report = WorkReport(
        id=uuid.uuid4(),
        user_id=owner.id,
        title="Weekly sync",
        description="Prepared the campaign report",
        hours_worked=Decimal("2.50"),
        date=datetime(2026, 1, 5, tzinfo=timezone.utc),
        status="submitted",
    )
    db.add(report)
    await db.commit()
    return report


class TestClientScope:
    async def test_client_sees_only_own_campaigns(self, client, db):
        c1, _ = await seed_two_clients(db)
        buyer = await create_user(db, "c1-user", UserRole.CLIENT, client_id=c1.id)
        headers = await login(db, buyer)

        resp = await client.get("/api/campaigns", headers=headers)

        assert resp.status_code == 200
        assert sorted(c["name"] for c in resp.json()) == ["C1 launch", "C1 retarget"]
        assert {c["clientId"] for c in resp.json()} == {str(c1.id)}

    async def test_other_clients_campaign_is_not_found(self, client, db):
        c1, c2 = await seed_two_clients(db)
        buyer = await create_user(db, "c1-user", UserRole.CLIENT, client_id=c1.id)
        headers = await login(db, buyer)
        other = (
            await db.execute(select(Campaign).where(Campaign.client_id == c2.id))
        ).scalar_one()

        resp = await client.get(f"/api/campaigns/{other.id}", headers=headers)

        assert resp.status_code == 404
        assert resp.json() == {"message": "Campaign not found"}

    async def test_staff_see_every_campaign(self, client, db):
        await seed_two_clients(db)
        admin = await create_user(db, "admin", UserRole.ADMIN)
        headers = await login(db, admin)

        resp = await client.get("/api/campaigns", headers=headers)
        assert len(resp.json()) == 4

    async def test_ad_accounts_and_finance_are_scoped(self, client, db):
        c1, c2 = await seed_two_clients(db)
        db.add_all([
            AdAccount(id=uuid.uuid4(), platform="facebook", account_name="A1", account_id="act_1",
                      client_id=c1.id, spend_limit=Decimal("100"), status="active"),
            AdAccount(id=uuid.uuid4(), platform="facebook", account_name="A2", account_id="act_2",
                      client_id=c2.id, spend_limit=Decimal("100"), status="active"),
            FinanceProject(id=uuid.uuid4(), name="P1", client_id=c1.id, budget=Decimal("10"), status="active"),
            FinanceProject(id=uuid.uuid4(), name="P2", client_id=c2.id, budget=Decimal("10"), status="active"),
        ])
        await db.commit()
        buyer = await create_user(db, "c1-user", UserRole.CLIENT, client_id=c1.id)
        headers = await login(db, buyer)

        accounts = await client.get("/api/ad-accounts", headers=headers)
        projects = await client.get("/api/finance/projects", headers=headers)

        assert [a["accountName"] for a in accounts.json()] == ["A1"]
        assert [p["name"] for p in projects.json()] == ["P1"]

    async def test_scope_follows_current_client_binding(self, client, db):
        """Rebinding a client user takes effect without a new login."""
        c1, c2 = await seed_two_clients(db)
        buyer = await create_user(db, "c1-user", UserRole.CLIENT, client_id=c1.id)
        headers = await login(db, buyer)

        buyer.client_id = c2.id
        await db.commit()

        resp = await client.get("/api/campaigns", headers=headers)
        assert [c["name"] for c in resp.json()] == ["C2 launch"]

    async def test_resolve_data_scope(self, db):
        c1 = await create_client(db)
        buyer = await create_user(db, "c1-user", UserRole.CLIENT, client_id=c1.id)
        manager = await create_user(db, "manager", UserRole.MANAGER)

        buyer_scope = await resolve_data_scope(principal_for(buyer), db)
        manager_scope = await resolve_data_scope(principal_for(manager), db)

        assert buyer_scope.client_id == c1.id and buyer_scope.is_client_scoped
        assert manager_scope.client_id is None and not manager_scope.is_client_scoped

    def test_unscoped_statement_is_unchanged(self):
        stmt = select(Campaign)
        scope = DataScope(user_id=uuid.uuid4(), role=UserRole.ADMIN)
        assert apply_client_scope(stmt, Campaign, scope) is stmt

    def test_in_client_scope(self):
        c1, c2 = uuid.uuid4(), uuid.uuid4()
        scope = DataScope(user_id=uuid.uuid4(), role=UserRole.CLIENT, client_id=c1)
        assert in_client_scope(Campaign(name="x", client_id=c1), scope)
        assert not in_client_scope(Campaign(name="y", client_id=c2), scope)
        assert not in_client_scope(Campaign(name="z", client_id=None), scope)

    def test_scoped_client_id(self):
        c1, c2 = uuid.uuid4(), uuid.uuid4()
        bound = DataScope(user_id=uuid.uuid4(), role=UserRole.CLIENT, client_id=c1)
        staff = DataScope(user_id=uuid.uuid4(), role=UserRole.MANAGER)

        assert scoped_client_id(None, bound) == c1
        assert scoped_client_id(c1, bound) == c1
        assert scoped_client_id(c2, staff) == c2
        assert scoped_client_id(None, staff) is None
        with pytest.raises(Forbidden):
            scoped_client_id(c2, bound)


class TestClientScopedWrites:
    async def test_client_cannot_create_campaign_for_another_client(self, client, db):
        await set_flags(db, UserRole.CLIENT, "campaigns", can_view=True, can_edit=True)
        c1, c2 = await seed_two_clients(db)
        buyer = await create_user(db, "c1-user", UserRole.CLIENT, client_id=c1.id)
        headers = await login(db, buyer)

        resp = await client.post(
            "/api/campaigns", json={"name": "Hijack", "clientId": str(c2.id)}, headers=headers,
        )

        assert resp.status_code == 403
        assert resp.json() == {"message": "Cannot assign records to another client"}
        found = await db.execute(select(Campaign).where(Campaign.name == "Hijack"))
        assert found.scalar_one_or_none() is None

    async def test_client_create_defaults_to_own_client(self, client, db):
        await set_flags(db, UserRole.CLIENT, "campaigns", can_view=True, can_edit=True)
        c1, _ = await seed_two_clients(db)
        buyer = await create_user(db, "c1-user", UserRole.CLIENT, client_id=c1.id)
        headers = await login(db, buyer)

        resp = await client.post("/api/campaigns", json={"name": "Summer"}, headers=headers)

        assert resp.status_code == 201
        assert resp.json()["clientId"] == str(c1.id)

    async def test_client_cannot_move_campaign_to_another_client(self, client, db):
        await set_flags(db, UserRole.CLIENT, "campaigns", can_view=True, can_edit=True)
        c1, c2 = await seed_two_clients(db)
        c1_id, c2_id = c1.id, c2.id
        buyer = await create_user(db, "c1-user", UserRole.CLIENT, client_id=c1_id)
        headers = await login(db, buyer)
        own = (
            await db.execute(select(Campaign).where(Campaign.name == "C1 launch"))
        ).scalar_one()
        campaign_id = own.id

        resp = await client.put(
            f"/api/campaigns/{campaign_id}", json={"clientId": str(c2_id)}, headers=headers,
        )

        assert resp.status_code == 403
        db.expire_all()
        assert (await db.get(Campaign, campaign_id)).client_id == c1_id

    async def test_client_can_still_edit_own_campaign(self, client, db):
        await set_flags(db, UserRole.CLIENT, "campaigns", can_view=True, can_edit=True)
        c1, _ = await seed_two_clients(db)
        buyer = await create_user(db, "c1-user", UserRole.CLIENT, client_id=c1.id)
        headers = await login(db, buyer)
        own = (
            await db.execute(select(Campaign).where(Campaign.name == "C1 launch"))
        ).scalar_one()

        resp = await client.put(
            f"/api/campaigns/{own.id}",
            json={"name": "C1 relaunch", "clientId": str(c1.id)},
            headers=headers,
        )

        assert resp.status_code == 200
        assert resp.json()["name"] == "C1 relaunch"
        assert resp.json()["clientId"] == str(c1.id)

    async def test_client_cannot_create_ad_account_or_project_elsewhere(self, client, db):
        await set_flags(db, UserRole.CLIENT, "ad_accounts", can_view=True, can_edit=True)
        await set_flags(db, UserRole.CLIENT, "finance", can_view=True, can_edit=True)
        c1, c2 = await seed_two_clients(db)
        buyer = await create_user(db, "c1-user", UserRole.CLIENT, client_id=c1.id)
        headers = await login(db, buyer)

        account = await client.post(
            "/api/ad-accounts",
            json={
                "platform": "facebook",
                "accountName": "Foreign",
                "accountId": "act_9",
                "clientId": str(c2.id),
                "spendLimit": "50",
            },
            headers=headers,
        )
        project = await client.post(
            "/api/finance/projects",
            json={"name": "Foreign", "clientId": str(c2.id)},
            headers=headers,
        )

        assert account.status_code == 403
        assert project.status_code == 403

    async def test_unknown_client_is_rejected(self, client, db):
        admin = await create_user(db, "admin", UserRole.ADMIN)
        headers = await login(db, admin)
        ghost = str(uuid.uuid4())

        campaign = await client.post(
            "/api/campaigns", json={"name": "Ghost", "clientId": ghost}, headers=headers,
        )
        project = await client.post(
            "/api/finance/projects", json={"name": "Ghost", "clientId": ghost}, headers=headers,
        )

        assert campaign.status_code == 400
        assert campaign.json() == {"message": "Client not found"}
        assert project.status_code == 400
        assert project.json() == {"message": "Client not found"}

    async def test_update_to_unknown_client_is_rejected(self, client, db):
        await seed_two_clients(db)
        admin = await create_user(db, "admin", UserRole.ADMIN)
        headers = await login(db, admin)
        internal = (
            await db.execute(select(Campaign).where(Campaign.name == "Internal"))
        ).scalar_one()

        resp = await client.put(
            f"/api/campaigns/{internal.id}", json={"clientId": str(uuid.uuid4())}, headers=headers,
        )

        assert resp.status_code == 400
        assert resp.json() == {"message": "Client not found"}


class TestRecordOwnership:
    async def test_user_cannot_delete_someone_elses_report(self, client, db):
        """Page-level delete permission does not override ownership."""
        await set_flags(db, UserRole.USER, "work_reports", can_view=True, can_edit=True, can_delete=True)
        owner = await create_user(db, "u1", UserRole.USER)
        other = await create_user(db, "u2", UserRole.USER)
        report = await make_report(db, owner)
        headers = await login(db, other)

        resp = await client.delete(f"/api/work-reports/{report.id}", headers=headers)

        assert resp.status_code == 403
        assert resp.json() == {"message": "Access denied"}
        report_id = report.id
        db.expire_all()
        assert await db.get(WorkReport, report_id) is not None

    async def test_user_cannot_read_someone_elses_report(self, client, db):
        owner = await create_user(db, "u1", UserRole.USER)
        other = await create_user(db, "u2", UserRole.USER)
        report = await make_report(db, owner)
        headers = await login(db, other)

        resp = await client.get(f"/api/work-reports/{report.id}", headers=headers)
        assert resp.status_code == 403

    async def test_owner_can_delete_own_report(self, client, db):
        await set_flags(db, UserRole.USER, "work_reports", can_view=True, can_edit=True, can_delete=True)
        owner = await create_user(db, "u1", UserRole.USER)
        report = await make_report(db, owner)
        headers = await login(db, owner)

        resp = await client.delete(f"/api/work-reports/{report.id}", headers=headers)
        assert resp.status_code == 200

    async def test_admin_can_delete_any_report(self, client, db):
        owner = await create_user(db, "u1", UserRole.USER)
        admin = await create_user(db, "admin", UserRole.ADMIN)
        report = await make_report(db, owner)
        headers = await login(db, admin)

        resp = await client.delete(f"/api/work-reports/{report.id}", headers=headers)
        assert resp.status_code == 200

    async def test_missing_report_is_404(self, client, db):
        owner = await create_user(db, "u1", UserRole.USER)
        headers = await login(db, owner)

        resp = await client.get(f"/api/work-reports/{uuid.uuid4()}", headers=headers)
        assert resp.status_code == 404

    async def test_non_admin_lists_only_own_reports(self, client, db):
        u1 = await create_user(db, "u1", UserRole.USER)
        u2 = await create_user(db, "u2", UserRole.USER)
        await make_report(db, u1)
        await make_report(db, u2)
        headers = await login(db, u1)

        resp = await client.get("/api/work-reports", headers=headers)

        assert resp.status_code == 200
        assert [r["userId"] for r in resp.json()] == [str(u1.id)]

    async def test_non_admin_cannot_reassign_report(self, client, db):
        u1 = await create_user(db, "u1", UserRole.USER)
        u2 = await create_user(db, "u2", UserRole.USER)
        report = await make_report(db, u1)
        headers = await login(db, u1)

        resp = await client.put(
            f"/api/work-reports/{report.id}", json={"userId": str(u2.id)}, headers=headers,
        )

        assert resp.status_code == 403
        assert resp.json() == {"message": "Cannot change work report owner"}

    async def test_owner_can_update_own_report(self, client, db):
        u1 = await create_user(db, "u1", UserRole.USER)
        report = await make_report(db, u1)
        headers = await login(db, u1)

        resp = await client.put(
            f"/api/work-reports/{report.id}", json={"title": "Monthly sync"}, headers=headers,
        )

        assert resp.status_code == 200
        assert resp.json()["title"] == "Monthly sync"

    async def test_create_defaults_owner_to_caller(self, client, db):
        u1 = await create_user(db, "u1", UserRole.USER)
        headers = await login(db, u1)

        resp = await client.post(
            "/api/work-reports",
            json={
                "title": "Audit",
                "description": "Checked ad spend",
                "hoursWorked": "3.5",
                "date": "2026-02-01T09:00:00Z",
            },
            headers=headers,
        )

        assert resp.status_code == 201
        assert resp.json()["userId"] == str(u1.id)

    async def test_delete_all_is_admin_only(self, client, db):
        u1 = await create_user(db, "u1", UserRole.USER)
        admin = await create_user(db, "admin", UserRole.ADMIN)
        await make_report(db, u1)
        await make_report(db, u1)

        denied = await client.delete("/api/work-reports/all", headers=await login(db, u1))
        allowed = await client.delete("/api/work-reports/all", headers=await login(db, admin))

        assert denied.status_code == 403
        assert denied.json() == {"message": "Admin access required"}
        assert allowed.status_code == 200
        assert allowed.json()["deletedCount"] == 2

    async def test_ensure_owner_or_admin(self, db):
        owner = await create_user(db, "u1", UserRole.USER)
        other = await create_user(db, "u2", UserRole.MANAGER)
        admin = await create_user(db, "admin", UserRole.ADMIN)

        ensure_owner_or_admin(principal_for(owner), owner.id)
        ensure_owner_or_admin(principal_for(admin), owner.id)
        with pytest.raises(Forbidden):
            ensure_owner_or_admin(principal_for(other), owner.id)
