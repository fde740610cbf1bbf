# dependencies/auth.py
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt
import logging
import secrets
from typing import Optional
from uuid import UUID

from config import Settings, get_settings
from dependencies.services import get_profile_service
from models.profile import Profile, Role
from services.errors import AuthorizationError, ForbiddenError
from services.profile import ProfileService

logger = logging.getLogger(__name__)
security = HTTPBearer(auto_error=False)

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_settings)
) -> UUID:
    """Dependency that extracts and validates the user UUID from a Supabase JWT"""
    if not credentials:
        raise AuthorizationError("Not authenticated")

    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.jwt_secret,
            algorithms=["HS256"],
            audience="authenticated"
        )
    except jwt.JWTError as e:
        logger.error(f"JWT decode error: {str(e)}")
        raise AuthorizationError("Invalid authentication token")

    user_id = payload.get("sub")
    if not user_id:
        raise AuthorizationError("Invalid token: no user ID found")

    try:
        return UUID(user_id)
    except ValueError:
        raise AuthorizationError("Invalid user ID format")

async def require_franchise_manager(
    franchise_id: UUID,
    user_id: UUID = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service)
) -> Profile:
    """HQ may manage any franchise, an owner only their own"""
    profile = await profiles.get_profile(user_id)
    if not profile:
        raise ForbiddenError("No profile found for this user")

    if profile.role == Role.HQ.value:
        return profile
    if profile.role == Role.FRANCHISE_OWNER.value and profile.franchise_id == franchise_id:
        return profile

    logger.warning(f"User {user_id} ({profile.role}) denied access to franchise {franchise_id}")
    raise ForbiddenError("Not authorized to manage this franchise")

async def require_webhook_secret(request: Request, settings: Settings = Depends(get_settings)) -> None:
    """Shared-secret gate for inbound GHL calls, checked before the body is read"""
    supplied = request.headers.get(settings.webhook_secret_header)
    if not supplied or not settings.webhook_secret:
        raise AuthorizationError()
    if not secrets.compare_digest(supplied.encode(), settings.webhook_secret.encode()):
        logger.warning("Rejected GHL webhook call with a mismatched secret")
        raise AuthorizationError()
