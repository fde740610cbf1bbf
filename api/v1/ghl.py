# api/v1/ghl.py
from fastapi import APIRouter, Depends, Request
import logging

from dependencies.auth import require_webhook_secret
from dependencies.services import get_invite_service
from models.invite import InviteCompletion, InviteCompletionResult
from services.errors import ValidationError
from services.invite import InviteService

router = APIRouter(prefix="/ghl", tags=["ghl"])
logger = logging.getLogger(__name__)

@router.post(
    "/instructor-completed",
    dependencies=[Depends(require_webhook_secret)],
    response_model_exclude_none=True
)
async def instructor_completed(
    request: Request,
    service: InviteService = Depends(get_invite_service)
) -> InviteCompletionResult:
    """Called by GHL once an invited instructor finished the registration form"""
    try:
        body = await request.json()
    except ValueError:
        body = None

    if not isinstance(body, dict):
        raise ValidationError("token and email are required")

    completion = InviteCompletion.model_validate(body)
    return await service.complete_invite(
        token=completion.token,
        email=completion.email,
        full_name=completion.full_name
    )
