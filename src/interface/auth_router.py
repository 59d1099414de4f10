"""Account routes: signup, login, and the caller's profile."""

from typing import Any

from fastapi import APIRouter, Depends, status

from src.domain.create_models import LoginRequest, UserCreate
from src.domain.update_models import ProfileUpdate
from src.domain.user import RequestContext
from src.interface.auth_guard import require_user
from src.services import user_service


router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(payload: UserCreate) -> dict[str, Any]:
    """Register a new account and return a bearer token."""
    result = await user_service.signup(payload=payload)
    return {"success": True, "data": result.to_public()}


@router.post("/login")
async def login(payload: LoginRequest) -> dict[str, Any]:
    """Exchange email and password for a bearer token."""
    result = await user_service.login(email=payload.email, password=payload.password)
    return {"success": True, "data": result.to_public()}


@router.get("/profile")
async def get_profile(ctx: RequestContext = Depends(require_user)) -> dict[str, Any]:
    """Return the caller's profile."""
    user = await user_service.get_profile(ctx=ctx)
    return {"success": True, "data": user.to_public()}


@router.put("/profile")
async def update_profile(payload: ProfileUpdate, ctx: RequestContext = Depends(require_user)) -> dict[str, Any]:
    """Update the caller's name, email, bio, or avatar."""
    user = await user_service.update_profile(ctx=ctx, payload=payload)
    return {"success": True, "data": user.to_public()}
