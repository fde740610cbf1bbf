# services/profile.py
from typing import List, Optional
from uuid import UUID
import logging
from fastapi import HTTPException
from supabase import Client

from config import Settings
from models.profile import Avatar, DashboardRoute, Profile, Role
from services.errors import StoreError, ValidationError

logger = logging.getLogger(__name__)

PROFILE_COLUMNS = "id, role, franchise_id, email, full_name, avatar_url"

DASHBOARD_ROUTES = {
    Role.HQ.value: "/dashboard/hq",
    Role.FRANCHISE_OWNER.value: "/dashboard/franchise",
    Role.INSTRUCTOR.value: "/dashboard/instructor",
    Role.STUDENT.value: "/dashboard/student",
    Role.PARENT.value: "/dashboard/parent",
}

SIGNED_URL_TTL_SECS = 60 * 60


def normalize_email(value: Optional[str]) -> str:
    return str(value or "").strip().lower()


def ilike_exact(value: str) -> str:
    """Escape LIKE wildcards so ilike behaves as case-insensitive equality"""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ProfileService:
    table_name = "profiles"

    def __init__(self, supabase: Client, settings: Settings):
        self.supabase = supabase
        self.bucket = settings.avatar_bucket

    async def get_profile(self, user_id: UUID) -> Optional[Profile]:
        try:
            result = self.supabase.table(self.table_name)\
                .select(PROFILE_COLUMNS)\
                .eq("id", str(user_id))\
                .limit(1)\
                .execute()
            return Profile.model_validate(result.data[0]) if result.data else None
        except Exception as e:
            logger.error(f"Error fetching profile {user_id}: {str(e)}")
            raise StoreError(f"Failed to fetch profile: {str(e)}")

    async def find_by_email(self, email: str) -> Optional[Profile]:
        """Case-insensitive email equality, emails on profiles are not guaranteed lowercase.

        PostgREST reads `*` in ilike patterns as a wildcard and it cannot be
        escaped, so the ilike result is only a candidate list; equality is
        decided here.
        """
        email = normalize_email(email)
        if not email:
            return None
        try:
            result = self.supabase.table(self.table_name)\
                .select(PROFILE_COLUMNS)\
                .ilike("email", ilike_exact(email))\
                .order("id")\
                .execute()

            matches = [row for row in result.data or [] if normalize_email(row.get("email")) == email]
            if not matches:
                return None
            if len(matches) > 1:
                logger.warning(f"{len(matches)} profiles share the email {email}, preferring the lowercase one")
                matches.sort(key=lambda row: row.get("email") != email)
            return Profile.model_validate(matches[0])
        except Exception as e:
            logger.error(f"Error looking up profile by email: {str(e)}")
            raise StoreError(str(e))

    async def promote_to_instructor(
        self,
        email: str,
        franchise_id: UUID,
        full_name: Optional[str] = None
    ) -> bool:
        """Make the profile owning this email an instructor of the franchise.

        Returns False when nobody has registered with the email yet. A
        supplied name overwrites the stored one, an absent name leaves it.
        """
        profile = await self.find_by_email(email)
        if not profile:
            logger.info(f"No profile for {normalize_email(email)} yet, nothing to promote")
            return False

        update_data = {
            "role": Role.INSTRUCTOR.value,
            "franchise_id": str(franchise_id),
        }
        if full_name:
            update_data["full_name"] = full_name

        try:
            self.supabase.table(self.table_name)\
                .update(update_data)\
                .eq("id", str(profile.id))\
                .execute()
        except Exception as e:
            logger.error(f"Error promoting profile {profile.id}: {str(e)}")
            raise StoreError(str(e))

        logger.info(f"Profile {profile.id} promoted to instructor of franchise {franchise_id}")
        return True

    async def demote_instructor(self, email: str, franchise_id: UUID) -> bool:
        """Reset an instructor of this franchise back to student"""
        profile = await self.find_by_email(email)
        if not profile or profile.role != Role.INSTRUCTOR.value or profile.franchise_id != franchise_id:
            return False

        try:
            self.supabase.table(self.table_name)\
                .update({"role": Role.STUDENT.value})\
                .eq("id", str(profile.id))\
                .execute()
        except Exception as e:
            logger.error(f"Error demoting profile {profile.id}: {str(e)}")
            raise StoreError(str(e))

        logger.info(f"Profile {profile.id} demoted to student")
        return True

    async def list_instructors(self, franchise_id: UUID) -> List[Profile]:
        try:
            result = self.supabase.table(self.table_name)\
                .select(PROFILE_COLUMNS)\
                .eq("role", Role.INSTRUCTOR.value)\
                .eq("franchise_id", str(franchise_id))\
                .order("full_name")\
                .execute()
            return [Profile.model_validate(row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching instructors: {str(e)}")
            raise StoreError(f"Failed to fetch instructors: {str(e)}")

    async def dashboard_route(self, user_id: UUID) -> DashboardRoute:
        profile = await self.get_profile(user_id)
        if not profile:
            return DashboardRoute(role=None, path="/")
        return DashboardRoute(role=profile.role, path=DASHBOARD_ROUTES.get(profile.role or "", "/"))

    # ---- avatars ----

    async def upload_avatar(
        self,
        user_id: UUID,
        filename: str,
        content_type: Optional[str],
        data: bytes
    ) -> Avatar:
        if not data:
            raise ValidationError("Avatar file is empty")

        ext = (filename or "").rsplit(".", 1)[-1].lower() if "." in (filename or "") else ""
        path = f"{user_id}/avatar.{ext or 'jpg'}"

        try:
            self.supabase.storage.from_(self.bucket).upload(
                path,
                data,
                file_options={
                    "content-type": content_type or "image/jpeg",
                    "cache-control": "3600",
                    "upsert": "true",
                }
            )

            self.supabase.table(self.table_name)\
                .update({"avatar_url": path})\
                .eq("id", str(user_id))\
                .execute()

            logger.info(f"Stored avatar for {user_id} at {path}")
            return Avatar(path=path, signed_url=self._signed_url(path))

        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Avatar upload failed for {user_id}: {str(e)}")
            raise StoreError(f"Avatar upload error: {str(e)}")

    async def get_avatar(self, user_id: UUID) -> Avatar:
        profile = await self.get_profile(user_id)
        if not profile or not profile.avatar_url:
            return Avatar()
        try:
            return Avatar(path=profile.avatar_url, signed_url=self._signed_url(profile.avatar_url))
        except Exception as e:
            logger.error(f"Avatar link failed for {user_id}: {str(e)}")
            raise StoreError(f"Avatar link error: {str(e)}")

    def _signed_url(self, path: str) -> Optional[str]:
        signed = self.supabase.storage.from_(self.bucket).create_signed_url(path, SIGNED_URL_TTL_SECS)
        return signed.get("signedURL") or signed.get("signedUrl")
