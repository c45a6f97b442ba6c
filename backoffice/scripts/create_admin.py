"""
One-time bootstrap script — creates the first SUPER_ADMIN user.

Usage:
    uv run python -m backoffice.scripts.create_admin

You only need this ONCE. After the first super admin exists, all other
users are created from the admin panel (`POST /api/users`).
"""

import asyncio
import getpass

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from backoffice.core.config import settings
from backoffice.core.errors import InvalidInput
from backoffice.models.user import UserRole
from backoffice.services import user_service


async def create_admin() -> None:
    engine = create_async_engine(settings.DATABASE_URL, echo=False)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)

    async with session_factory() as session:
        # ── Collect input ────────────────────────────────────────────
        print("\n🔧  Back-office — First Super Admin Setup\n")
        username = input("  Username:  ").strip()
        name = input("  Full name: ").strip()
        password = getpass.getpass("  Password:  ")
        confirm = getpass.getpass("  Confirm:   ")

        if password != confirm:
            print("\n❌  Passwords do not match.")
            await engine.dispose()
            return

        if not username or not name or not password:
            print("\n❌  All fields are required.")
            await engine.dispose()
            return

        # ── Create the super admin ───────────────────────────────────
        try:
            user = await user_service.create_user(
                username=username,
                name=name,
                password=password,
                role=UserRole.SUPER_ADMIN,
                db=session,
            )
        except InvalidInput as exc:
            print(f"\n❌  {exc.message}")
            await engine.dispose()
            return

        user.menu_permission.admin_panel = True
        await session.commit()

        print(f"\n✅  Super admin created successfully!")
        print(f"    ID:       {user.id}")
        print(f"    Username: {user.username}")
        print(f"    Role:     {user.role.value}")
        print(f"\n   You can now log in via POST /api/auth/login\n")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(create_admin())
