"""
Request Dependencies

Bearer token -> owner id -> that session's InventoryState.
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from inventory_soft.config import Settings
from inventory_soft.errors import AuthenticationError
from inventory_soft.services.auth import AuthService
from inventory_soft.state import InventoryState, SessionRegistry

bearer_scheme = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth


def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.registry


async def get_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Not signed in")
    return credentials.credentials


async def get_state(
    token: str = Depends(get_token),
    auth: AuthService = Depends(get_auth_service),
    registry: SessionRegistry = Depends(get_registry),
) -> InventoryState:
    """
    Inventory state of the caller's session.

    A token that no longer resolves has its state dropped before the error
    reaches the client.
    """
    try:
        session = await auth.session_for(token)
    except AuthenticationError:
        registry.close(token)
        raise
    return await registry.get(token, session.owner_id, session.expires_at)
