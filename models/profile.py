# models/profile.py
from pydantic import BaseModel, ConfigDict
from typing import Optional
from uuid import UUID
from enum import Enum

from models.invite import InviteStatus

class Role(str, Enum):
    HQ = "hq"
    FRANCHISE_OWNER = "franchise_owner"
    INSTRUCTOR = "instructor"
    STUDENT = "student"
    PARENT = "parent"

class Profile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    role: Optional[str] = None
    franchise_id: Optional[UUID] = None
    email: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None

class InstructorEntry(BaseModel):
    id: UUID
    full_name: Optional[str] = None
    email: Optional[str] = None
    invite_status: Optional[InviteStatus] = None
    assignable: bool

class DashboardRoute(BaseModel):
    role: Optional[str] = None
    path: str

class Avatar(BaseModel):
    path: Optional[str] = None
    signed_url: Optional[str] = None
