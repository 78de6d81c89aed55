"""
Authentication Endpoints

Sign-up, sign-in and sign-out. Signing in opens the session's inventory
state; signing out clears it.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from inventory_soft.domain.models import ProfileUpdate
from inventory_soft.errors import RecordNotFoundError
from inventory_soft.serving.api.dependencies import (
    get_auth_service,
    get_registry,
    get_state,
    get_token,
)
from inventory_soft.serving.api.schemas import ProfileResponse
from inventory_soft.services.auth import AuthService
from inventory_soft.state import InventoryState, SessionRegistry

router = APIRouter()


class SignUpRequest(BaseModel):
    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=1)
    name: str = Field(min_length=1, max_length=200)


class SignInRequest(BaseModel):
    email: str
    password: str


class SignInResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    owner_id: str
    expires_at: datetime


@router.post("/sign-up", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(
    body: SignUpRequest,
    auth: AuthService = Depends(get_auth_service),
) -> ProfileResponse:
    profile = await auth.sign_up(body.email, body.password, body.name)
    return ProfileResponse.model_validate(profile)


@router.post("/sign-in", response_model=SignInResponse)
async def sign_in(
    body: SignInRequest,
    auth: AuthService = Depends(get_auth_service),
    registry: SessionRegistry = Depends(get_registry),
) -> SignInResponse:
    session = await auth.sign_in(body.email, body.password)
    await registry.open(session.token, session.owner_id, session.expires_at)
    return SignInResponse(
        access_token=session.token,
        owner_id=session.owner_id,
        expires_at=session.expires_at,
    )


@router.post("/sign-out", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(
    token: str = Depends(get_token),
    auth: AuthService = Depends(get_auth_service),
    registry: SessionRegistry = Depends(get_registry),
) -> None:
    await auth.sign_out(token)
    registry.close(token)


@router.get("/me", response_model=ProfileResponse)
async def me(state: InventoryState = Depends(get_state)) -> ProfileResponse:
    if state.profile is None:
        raise RecordNotFoundError("profile", state.owner_id)
    return ProfileResponse.model_validate(state.profile)


@router.patch("/profile", response_model=ProfileResponse)
async def update_profile(
    body: ProfileUpdate,
    state: InventoryState = Depends(get_state),
) -> ProfileResponse:
    profile = await state.update_profile(body)
    return ProfileResponse.model_validate(profile)
