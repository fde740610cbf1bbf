# api/v1/invites.py
from fastapi import APIRouter, Depends
from typing import List
from uuid import UUID
import logging

from dependencies.auth import require_franchise_manager
from dependencies.services import get_invite_service
from models.invite import (
    DeactivateInstructor,
    DeactivationResult,
    InviteBuckets,
    InviteCreate,
    InviteResult,
)
from models.profile import InstructorEntry, Profile
from services.invite import InviteService

router = APIRouter(prefix="/franchises/{franchise_id}", tags=["invites"])
logger = logging.getLogger(__name__)

@router.post("/invites", status_code=201)
async def create_invite(
    franchise_id: UUID,
    invite: InviteCreate,
    issuer: Profile = Depends(require_franchise_manager),
    service: InviteService = Depends(get_invite_service)
) -> InviteResult:
    """Invite an instructor by name and email and notify GHL"""
    return await service.create_invite(
        franchise_id=franchise_id,
        issuer_id=issuer.id,
        full_name=invite.full_name,
        email=invite.email
    )

@router.get("/invites")
async def list_invites(
    franchise_id: UUID,
    _: Profile = Depends(require_franchise_manager),
    service: InviteService = Depends(get_invite_service)
) -> InviteBuckets:
    """Invites of the franchise grouped by status, newest first"""
    return await service.list_invites(franchise_id)

@router.post("/invites/{invite_id}/resend")
async def resend_invite(
    franchise_id: UUID,
    invite_id: UUID,
    _: Profile = Depends(require_franchise_manager),
    service: InviteService = Depends(get_invite_service)
) -> InviteResult:
    return await service.resend_invite(franchise_id, invite_id)

@router.get("/instructors")
async def list_instructors(
    franchise_id: UUID,
    _: Profile = Depends(require_franchise_manager),
    service: InviteService = Depends(get_invite_service)
) -> List[InstructorEntry]:
    """Instructor roster, flagged with whether each may be assigned to a class"""
    return await service.list_instructors(franchise_id)

@router.post("/instructors/deactivate")
async def deactivate_instructor(
    franchise_id: UUID,
    body: DeactivateInstructor,
    _: Profile = Depends(require_franchise_manager),
    service: InviteService = Depends(get_invite_service)
) -> DeactivationResult:
    return await service.deactivate_instructor(franchise_id, body.email)
