"""
FastAPI application factory.

Assembles the app, registers all routers and error handlers, and wires
up lifecycle events.  Database schema is managed by Alembic — NOT
create_all.
"""

import logging

from fastapi import FastAPI

from backoffice.controllers.ad_account_controller import router as ad_account_router
from backoffice.controllers.admin_controller import router as admin_router
from backoffice.controllers.auth_controller import router as auth_router
from backoffice.controllers.backup_controller import router as backup_router
from backoffice.controllers.campaign_controller import router as campaign_router
from backoffice.controllers.client_controller import router as client_router
from backoffice.controllers.finance_controller import router as finance_router
from backoffice.controllers.permission_controller import router as permission_router
from backoffice.controllers.work_report_controller import router as work_report_router
from backoffice.core.config import settings
from backoffice.core.database import async_session_factory, engine
from backoffice.core.errors import register_exception_handlers
from backoffice.models import Base  # noqa: F401 — ensures all models are registered
from backoffice.rbac.dependencies import declared_page_keys

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    register_exception_handlers(app)

    # ── Register routers ─────────────────────────────────────────────
    app.include_router(auth_router)
    app.include_router(permission_router)
    app.include_router(admin_router)
    app.include_router(client_router)
    app.include_router(campaign_router)
    app.include_router(ad_account_router)
    app.include_router(finance_router)
    app.include_router(work_report_router)
    app.include_router(backup_router)

    # ── Startup / Shutdown ───────────────────────────────────────────
    @app.on_event("startup")
    async def on_startup() -> None:
        """Seed pages & role permissions, then check every gated page exists.

        NOTE: Database schema is managed by Alembic migrations.
        Run `alembic upgrade head` before starting the app.
        """
        from backoffice.rbac.permission_seed import find_undeclared_pages, seed

        async with async_session_factory() as session:
            if settings.SEED_ON_STARTUP:
                await seed(session)
                logger.info("Permission seed complete.")

            missing = await find_undeclared_pages(session, declared_page_keys)
            if missing:
                # Gates on these keys deny everyone until a Page row exists
                logger.warning("Gated pages with no Page row: %s", sorted(missing))

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        await engine.dispose()
        logger.info("Database engine disposed.")

    # ── Health check ─────────────────────────────────────────────────
    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
