"""
Pydantic schemas for request / response serialization.

The admin frontend speaks camelCase (`pageKey`, `canView`, ...), so every
schema aliases its fields with `to_camel` and accepts either spelling on
input.  Administrative payloads are validated here, before anything
reaches the permission store.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, create_model, model_validator
from pydantic.alias_generators import to_camel

from backoffice.models.user import UserRole
from backoffice.models.user_menu_permission import MENU_FLAGS
from backoffice.rbac.evaluator import PageAction


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ── Auth ─────────────────────────────────────────────────────────────
class LoginRequest(CamelModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class PrincipalOut(CamelModel):
    id: uuid.UUID
    username: str
    role: UserRole


class LoginUserOut(PrincipalOut):
    name: str | None = None


class LoginResponse(CamelModel):
    user: LoginUserOut
    token: str
    expires_at: datetime


# ── Pages & role permissions ─────────────────────────────────────────
class PageOut(CamelModel):
    id: uuid.UUID
    page_key: str
    display_name: str
    path: str
    description: str | None = None
    is_active: bool


class RolePermissionOut(CamelModel):
    id: uuid.UUID
    role: UserRole
    page_id: uuid.UUID
    can_view: bool
    can_edit: bool
    can_delete: bool


class RolePermissionUpdate(CamelModel):
    model_config = ConfigDict(extra="forbid")

    can_view: bool | None = None
    can_edit: bool | None = None
    can_delete: bool | None = None


class RolePermissionBulkItem(RolePermissionUpdate):
    id: uuid.UUID


class BulkUpdateFailure(CamelModel):
    id: uuid.UUID
    reason: str


class BulkUpdateResult(CamelModel):
    updated: list[RolePermissionOut]
    failed: list[BulkUpdateFailure]


class PermissionGrantRequest(CamelModel):
    """Set one action flag for a (role, page) pair."""

    role: UserRole
    page_key: str = Field(min_length=1)
    action: PageAction
    allowed: bool


class PermissionCheckOut(CamelModel):
    has_permission: bool


# ── Users ────────────────────────────────────────────────────────────
class UserCreate(CamelModel):
    username: str = Field(min_length=1, max_length=128)
    name: str = Field(min_length=1)
    password: str = Field(min_length=3)
    role: UserRole = UserRole.USER
    client_id: uuid.UUID | None = None

    @model_validator(mode="after")
    def _client_binding(self) -> "UserCreate":
        if self.role == UserRole.CLIENT and self.client_id is None:
            raise ValueError("clientId is required for client users")
        return self


class UserUpdate(CamelModel):
    model_config = ConfigDict(extra="forbid")

    username: str | None = Field(default=None, min_length=1, max_length=128)
    name: str | None = None
    password: str | None = Field(default=None, min_length=3)
    role: UserRole | None = None
    client_id: uuid.UUID | None = None
    is_active: bool | None = None


class UserOut(CamelModel):
    id: uuid.UUID
    username: str
    name: str | None = None
    role: UserRole
    client_id: uuid.UUID | None = None
    is_active: bool
    created_at: datetime


# ── User menu permissions ────────────────────────────────────────────
MenuFlags = create_model(
    "MenuFlags",
    __base__=CamelModel,
    **{flag: (bool, False) for flag in MENU_FLAGS},
)

MenuFlagsUpdate = create_model(
    "MenuFlagsUpdate",
    __base__=CamelModel,
    **{flag: (bool | None, None) for flag in MENU_FLAGS},
)


class MenuPermissionCreate(MenuFlags):
    user_id: uuid.UUID


class MenuPermissionOut(MenuFlags):
    id: uuid.UUID
    user_id: uuid.UUID


class MenuFlagToggle(CamelModel):
    enabled: bool


# ── Clients & client users ───────────────────────────────────────────
class ClientCreate(CamelModel):
    name: str = Field(min_length=1, max_length=256)
    email: str | None = None
    phone: str | None = None


class ClientOut(CamelModel):
    id: uuid.UUID
    name: str
    email: str | None = None
    phone: str | None = None
    is_active: bool
    created_at: datetime


class ClientUserCreate(CamelModel):
    username: str = Field(min_length=1, max_length=128)
    name: str = Field(min_length=1)
    password: str = Field(min_length=3)
    client_id: uuid.UUID


# ── Campaigns ────────────────────────────────────────────────────────
class CampaignCreate(CamelModel):
    name: str = Field(min_length=1)
    client_id: uuid.UUID | None = None
    ad_account_id: uuid.UUID | None = None
    status: str = "active"
    start_date: datetime | None = None
    notes: str | None = None


class CampaignUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1)
    client_id: uuid.UUID | None = None
    ad_account_id: uuid.UUID | None = None
    status: str | None = None
    start_date: datetime | None = None
    notes: str | None = None


class CampaignOut(CamelModel):
    id: uuid.UUID
    name: str
    client_id: uuid.UUID | None = None
    ad_account_id: uuid.UUID | None = None
    status: str
    start_date: datetime | None = None
    notes: str | None = None
    created_at: datetime


# ── Ad accounts ──────────────────────────────────────────────────────
class AdAccountCreate(CamelModel):
    platform: str = Field(min_length=1)
    account_name: str = Field(min_length=1)
    account_id: str = Field(min_length=1)
    client_id: uuid.UUID | None = None
    spend_limit: Decimal = Field(ge=0)
    status: str = "active"


class AdAccountOut(CamelModel):
    id: uuid.UUID
    platform: str
    account_name: str
    account_id: str
    client_id: uuid.UUID | None = None
    spend_limit: Decimal
    status: str
    created_at: datetime


# ── Finance projects ─────────────────────────────────────────────────
class FinanceProjectCreate(CamelModel):
    name: str = Field(min_length=1)
    client_id: uuid.UUID
    budget: Decimal = Field(default=Decimal("0"), ge=0)
    status: str = "active"


class FinanceProjectOut(CamelModel):
    id: uuid.UUID
    name: str
    client_id: uuid.UUID
    budget: Decimal
    status: str
    created_at: datetime


# ── Work reports ─────────────────────────────────────────────────────
class WorkReportCreate(CamelModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    hours_worked: Decimal = Field(gt=0, lt=100)
    date: datetime
    status: str = "submitted"
    user_id: uuid.UUID | None = None


class WorkReportUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1)
    description: str | None = Field(default=None, min_length=1)
    hours_worked: Decimal | None = Field(default=None, gt=0, lt=100)
    date: datetime | None = None
    status: str | None = None
    user_id: uuid.UUID | None = None


class WorkReportOut(CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    description: str
    hours_worked: Decimal
    date: datetime
    status: str
    created_at: datetime


# ── Backup ───────────────────────────────────────────────────────────
class BackupInfoOut(CamelModel):
    generated_at: datetime
    counts: dict[str, int]


# ── Generic ──────────────────────────────────────────────────────────
class MessageResponse(CamelModel):
    message: str


class DeletedCountResponse(MessageResponse):
    deleted_count: int
