# api/v1/profiles.py
from fastapi import APIRouter, Depends, File, UploadFile
from uuid import UUID
import logging

from dependencies.auth import get_current_user
from dependencies.services import get_profile_service
from models.profile import Avatar, DashboardRoute
from services.profile import ProfileService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profiles", tags=["profiles"])

@router.get("/me/dashboard")
async def get_dashboard_route(
    user_id: UUID = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
) -> DashboardRoute:
    """Where the signed-in user lands after login, by role"""
    return await service.dashboard_route(user_id)

@router.post("/me/avatar")
async def upload_avatar(
    file: UploadFile = File(...),
    user_id: UUID = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
) -> Avatar:
    data = await file.read()
    return await service.upload_avatar(user_id, file.filename, file.content_type, data)

@router.get("/me/avatar")
async def get_avatar(
    user_id: UUID = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
) -> Avatar:
    return await service.get_avatar(user_id)
