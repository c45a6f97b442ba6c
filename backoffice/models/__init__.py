"""
Models package — import every model so SQLAlchemy's Base.metadata
knows about all tables (critical for `create_all` / Alembic).
"""

from backoffice.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from backoffice.models.client import Client
from backoffice.models.user import ADMIN_ROLES, User, UserRole
from backoffice.models.session import UserSession
from backoffice.models.page import Page
from backoffice.models.role_permission import RolePermission
from backoffice.models.user_menu_permission import MENU_FLAGS, UserMenuPermission
from backoffice.models.ad_account import AdAccount
from backoffice.models.campaign import Campaign
from backoffice.models.finance_project import FinanceProject
from backoffice.models.work_report import WorkReport

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "Client",
    "User",
    "UserRole",
    "ADMIN_ROLES",
    "UserSession",
    "Page",
    "RolePermission",
    "UserMenuPermission",
    "MENU_FLAGS",
    "AdAccount",
    "Campaign",
    "FinanceProject",
    "WorkReport",
]
