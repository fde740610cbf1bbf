# models/invite.py
from pydantic import BaseModel, ConfigDict, field_validator
from datetime import datetime
from typing import List, Optional
from uuid import UUID
from enum import Enum

class InviteStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    INACTIVE = "inactive"
    EXPIRED = "expired"

class InviteCreate(BaseModel):
    full_name: str
    email: str

class Invite(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    franchise_id: UUID
    invited_by: UUID
    email: str
    full_name: Optional[str] = None
    status: InviteStatus
    token: str
    created_at: datetime
    completed_at: Optional[datetime] = None

class InviteResult(BaseModel):
    invite: Invite
    notified: bool
    message: str

class InviteBuckets(BaseModel):
    pending: List[Invite] = []
    active: List[Invite] = []
    inactive: List[Invite] = []
    expired: List[Invite] = []

class InviteCompletion(BaseModel):
    """Payload GoHighLevel posts once the registrant finished signing up"""
    model_config = ConfigDict(extra="ignore")

    token: str = ""
    email: str = ""
    full_name: Optional[str] = None

    @field_validator("token", "email", mode="before")
    @classmethod
    def _as_text(cls, v):
        return "" if v is None else str(v).strip()

    @field_validator("full_name", mode="before")
    @classmethod
    def _blank_name_is_absent(cls, v):
        if v is None:
            return None
        name = str(v).strip()
        return name or None

class InviteCompletionResult(BaseModel):
    ok: bool = True
    profile_promoted: bool = False
    warning: Optional[str] = None

class DeactivateInstructor(BaseModel):
    email: str

class DeactivationResult(BaseModel):
    invites_deactivated: int
    profile_demoted: bool
