# dependencies/services.py
from fastapi import Depends
from supabase import Client, create_client

from config import Settings, get_settings
from services.invite import InviteService
from services.notifier import CRMNotifier
from services.profile import ProfileService


def get_supabase(settings: Settings = Depends(get_settings)) -> Client:
    return create_client(
        supabase_url=settings.supabase_url,
        supabase_key=settings.supabase_key
    )


def get_notifier(settings: Settings = Depends(get_settings)) -> CRMNotifier:
    return CRMNotifier(settings)


def get_profile_service(
    supabase: Client = Depends(get_supabase),
    settings: Settings = Depends(get_settings)
) -> ProfileService:
    return ProfileService(supabase, settings)


def get_invite_service(
    supabase: Client = Depends(get_supabase),
    settings: Settings = Depends(get_settings),
    notifier: CRMNotifier = Depends(get_notifier)
) -> InviteService:
    return InviteService(supabase, settings, notifier)
