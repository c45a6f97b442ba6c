"""
Auth controller — login / logout / current user.

Controllers are THIN — they delegate to services and return schemas.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.database import get_db
from backoffice.rbac.identity import Principal, get_current_principal, get_current_token
from backoffice.schemas import LoginRequest, LoginResponse, LoginUserOut, MessageResponse, PrincipalOut
from backoffice.services import auth_service

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Exchange username + password for a bearer session token."""
    result = await auth_service.authenticate_user(body.username, body.password, db)
    return LoginResponse(
        user=LoginUserOut.model_validate(result["user"]),
        token=result["token"],
        expires_at=result["expires_at"],
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    principal: Principal = Depends(get_current_principal),
    token: str = Depends(get_current_token),
    db: AsyncSession = Depends(get_db),
):
    await auth_service.logout(token, db)
    return MessageResponse(message="Logged out successfully")


@router.get("/user", response_model=PrincipalOut)
async def current_user(principal: Principal = Depends(get_current_principal)):
    return PrincipalOut.model_validate(principal)
