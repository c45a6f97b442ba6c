"""Bearer token → Principal resolution."""

from datetime import timedelta

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from backoffice.models import UserRole, UserSession
from backoffice.services import session_service
from tests.utils import bearer, create_user, login


class TestIdentityResolution:
    async def test_valid_session_resolves_principal(self, client, db):
        user = await create_user(db, "alice", UserRole.MANAGER)
        headers = await login(db, user)

        resp = await client.get("/api/auth/user", headers=headers)

        assert resp.status_code == 200
        assert resp.json() == {"id": str(user.id), "username": "alice", "role": "manager"}

    async def test_missing_token(self, client):
        resp = await client.get("/api/auth/user")
        assert resp.status_code == 401
        assert resp.json() == {"message": "Unauthorized"}

    async def test_unknown_token(self, client):
        resp = await client.get("/api/auth/user", headers=bearer("not-a-real-token"))
        assert resp.status_code == 401
        assert resp.json() == {"message": "Invalid or expired session"}

    async def test_expired_session_looks_like_missing_token(self, client, db):
        """An expired token gets the same 401 shape as no token at all."""
        user = await create_user(db, "bob", UserRole.USER)
        expired = await login(db, user, ttl=timedelta(seconds=-1))

        expired_resp = await client.get("/api/auth/user", headers=expired)
        missing_resp = await client.get("/api/auth/user")

        assert expired_resp.status_code == missing_resp.status_code == 401
        assert expired_resp.json().keys() == missing_resp.json().keys() == {"message"}
        assert expired_resp.json()["message"] == "Invalid or expired session"

    async def test_session_of_deleted_user(self, client, db):
        user = await create_user(db, "carol", UserRole.USER)
        headers = await login(db, user)
        await db.delete(user)
        await db.commit()

        resp = await client.get("/api/auth/user", headers=headers)

        assert resp.status_code == 401
        assert resp.json() == {"message": "Invalid or expired session"}

    async def test_role_change_applies_on_next_request(self, client, db):
        user = await create_user(db, "dave", UserRole.USER)
        headers = await login(db, user)

        user.role = UserRole.ADMIN
        await db.commit()

        resp = await client.get("/api/auth/user", headers=headers)
        assert resp.json()["role"] == "admin"

    async def test_session_store_failure_is_500(self, client, db, monkeypatch):
        user = await create_user(db, "erin", UserRole.USER)
        headers = await login(db, user)

        async def broken(token, db):
            raise SQLAlchemyError("connection lost")

        monkeypatch.setattr(session_service, "get_session_by_token", broken)

        resp = await client.get("/api/auth/user", headers=headers)
        assert resp.status_code == 500
        assert resp.json() == {"message": "Authentication error"}

    async def test_expired_session_row_is_removed(self, client, db):
        user = await create_user(db, "fay", UserRole.USER)
        headers = await login(db, user, ttl=timedelta(seconds=-1))

        await client.get("/api/auth/user", headers=headers)

        remaining = await db.scalar(select(func.count()).select_from(UserSession))
        assert remaining == 0
