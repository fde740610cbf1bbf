# services/invite.py
from datetime import datetime, timedelta, timezone
import secrets
from typing import List, Optional
from uuid import UUID
import logging
from fastapi import HTTPException
from supabase import Client

from config import Settings
from models.invite import (
    DeactivationResult,
    Invite,
    InviteBuckets,
    InviteCompletionResult,
    InviteResult,
    InviteStatus,
)
from models.profile import InstructorEntry
from services.errors import ConflictError, NotFoundError, StoreError, ValidationError
from services.notifier import CRMNotifier
from services.profile import ProfileService, normalize_email

logger = logging.getLogger(__name__)

TOKEN_BYTES = 24  # 48 hex characters

SENT_MESSAGE = "Invite sent"
NOT_SENT_MESSAGE = "Invite created (but the GHL webhook failed, check the webhook and workflow)"


def generate_token() -> str:
    """Unguessable invite token, lowercase hex"""
    return secrets.token_hex(TOKEN_BYTES)


def _short(token: str) -> str:
    return f"{token[:6]}…"


class InviteService:
    table_name = "instructor_invites"
    franchise_table = "franchises"

    def __init__(self, supabase: Client, settings: Settings, notifier: Optional[CRMNotifier] = None):
        self.supabase = supabase
        self.settings = settings
        self.notifier = notifier or CRMNotifier(settings)
        self.profiles = ProfileService(supabase, settings)

    # ---- issuance ----

    async def create_invite(
        self,
        franchise_id: UUID,
        issuer_id: UUID,
        full_name: str,
        email: str
    ) -> InviteResult:
        """Create a pending invite, then announce it to GHL"""
        full_name = (full_name or "").strip()
        email = normalize_email(email)

        if not full_name:
            raise ValidationError("Enter instructor name.")
        if not email or "@" not in email:
            raise ValidationError("Enter a valid email address.")

        try:
            existing = await self._invites_for_email(franchise_id, email)
            if any(i.status in (InviteStatus.PENDING, InviteStatus.ACTIVE) for i in existing):
                raise ConflictError("That email already has an invite (pending or active).")

            data = {
                "franchise_id": str(franchise_id),
                "invited_by": str(issuer_id),
                "email": email,
                "full_name": full_name,
                "status": InviteStatus.PENDING.value,
                "token": generate_token(),
            }

            result = self.supabase.table(self.table_name)\
                .insert(data)\
                .execute()

            if not result.data:
                raise StoreError("Failed to create invite")

            invite = Invite.model_validate(result.data[0])

        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating invite: {str(e)}")
            raise StoreError(f"Failed to create invite: {str(e)}")

        logger.info(f"Created invite {invite.id} for {email} in franchise {franchise_id}")
        return await self._announce(invite)

    async def resend_invite(self, franchise_id: UUID, invite_id: UUID) -> InviteResult:
        """Announce a still-pending invite to GHL again"""
        invite = await self.get_invite(franchise_id, invite_id)
        if invite.status != InviteStatus.PENDING:
            raise ConflictError(f"invite {invite.status.value}")
        return await self._announce(invite)

    async def _announce(self, invite: Invite) -> InviteResult:
        franchise_name = await self._franchise_name(invite.franchise_id)
        notified = await self.notifier.notify_invite_created(invite, franchise_name)
        return InviteResult(
            invite=invite,
            notified=notified,
            message=SENT_MESSAGE if notified else NOT_SENT_MESSAGE
        )

    async def _franchise_name(self, franchise_id: UUID) -> str:
        try:
            result = self.supabase.table(self.franchise_table)\
                .select("id, name")\
                .eq("id", str(franchise_id))\
                .limit(1)\
                .execute()
            return (result.data[0].get("name") or "") if result.data else ""
        except Exception as e:
            logger.warning(f"Could not load franchise {franchise_id}: {str(e)}")
            return ""

    # ---- completion ----

    async def complete_invite(
        self,
        token: str,
        email: str,
        full_name: Optional[str] = None
    ) -> InviteCompletionResult:
        """Redeem an invite token on behalf of the CRM.

        The invite transition is the success criterion. Promoting a matching
        profile afterwards is best-effort: PostgREST gives no transaction
        spanning both writes, so a failure there is reported as a warning on
        an otherwise successful result.
        """
        token = (token or "").strip()
        email = normalize_email(email)
        if not token or not email:
            raise ValidationError("token and email are required")

        try:
            result = self.supabase.table(self.table_name)\
                .select("*")\
                .eq("token", token)\
                .limit(1)\
                .execute()

            if not result.data:
                logger.info(f"No invite for token {_short(token)}")
                raise NotFoundError("invite not found")

            invite = Invite.model_validate(result.data[0])

        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error loading invite for token {_short(token)}: {str(e)}")
            raise StoreError(f"Failed to load invite: {str(e)}")

        if invite.status == InviteStatus.INACTIVE:
            raise ConflictError("invite inactive")

        try:
            invite = await self._expire_if_stale(invite)
        except Exception as e:
            logger.error(f"Error expiring invite {invite.id}: {str(e)}")
            raise StoreError(str(e))

        if invite.status == InviteStatus.EXPIRED:
            raise ConflictError("invite expired")

        try:
            self.supabase.table(self.table_name)\
                .update({
                    "status": InviteStatus.ACTIVE.value,
                    "completed_at": datetime.now(timezone.utc).isoformat(),
                })\
                .eq("id", str(invite.id))\
                .execute()
        except Exception as e:
            logger.error(f"Error activating invite {invite.id}: {str(e)}")
            raise StoreError(str(e))

        logger.info(f"Invite {invite.id} is now active")

        try:
            promoted = await self.profiles.promote_to_instructor(email, invite.franchise_id, full_name)
        except Exception as e:
            logger.warning(f"Invite {invite.id} activated but profile promotion failed: {str(e)}")
            return InviteCompletionResult(
                profile_promoted=False,
                warning=f"invite activated, profile not updated: {str(e)}"
            )

        return InviteCompletionResult(profile_promoted=promoted)

    # ---- deactivation ----

    async def deactivate_instructor(self, franchise_id: UUID, email: str) -> DeactivationResult:
        """Revoke every live invite for the email and demote the instructor profile"""
        email = normalize_email(email)
        if not email:
            raise ValidationError("Enter a valid email address.")

        try:
            result = self.supabase.table(self.table_name)\
                .update({"status": InviteStatus.INACTIVE.value})\
                .eq("franchise_id", str(franchise_id))\
                .eq("email", email)\
                .neq("status", InviteStatus.INACTIVE.value)\
                .execute()
        except Exception as e:
            logger.error(f"Error deactivating invites for {email}: {str(e)}")
            raise StoreError(str(e))

        count = len(result.data or [])
        demoted = await self.profiles.demote_instructor(email, franchise_id)

        logger.info(f"Deactivated {count} invite(s) for {email} in franchise {franchise_id}, demoted={demoted}")
        return DeactivationResult(invites_deactivated=count, profile_demoted=demoted)

    # ---- reads ----

    async def get_invite(self, franchise_id: UUID, invite_id: UUID) -> Invite:
        try:
            result = self.supabase.table(self.table_name)\
                .select("*")\
                .eq("id", str(invite_id))\
                .eq("franchise_id", str(franchise_id))\
                .limit(1)\
                .execute()

            if not result.data:
                raise NotFoundError("invite not found")

            return await self._expire_if_stale(Invite.model_validate(result.data[0]))

        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching invite {invite_id}: {str(e)}")
            raise StoreError(f"Failed to fetch invite: {str(e)}")

    async def get_invites(self, franchise_id: UUID) -> List[Invite]:
        """All invites of a franchise, newest first"""
        try:
            result = self.supabase.table(self.table_name)\
                .select("*")\
                .eq("franchise_id", str(franchise_id))\
                .order("created_at", desc=True)\
                .execute()

            return [await self._expire_if_stale(Invite.model_validate(row)) for row in result.data or []]

        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching invites: {str(e)}")
            raise StoreError(f"Failed to fetch invites: {str(e)}")

    async def list_invites(self, franchise_id: UUID) -> InviteBuckets:
        buckets = InviteBuckets()
        for invite in await self.get_invites(franchise_id):
            getattr(buckets, invite.status.value).append(invite)
        return buckets

    async def list_instructors(self, franchise_id: UUID) -> List[InstructorEntry]:
        """Instructor roster with the assignability each profile derives from its latest invite"""
        instructors = await self.profiles.list_instructors(franchise_id)
        invites = await self.get_invites(franchise_id)

        latest = {}
        for invite in sorted(invites, key=lambda i: i.created_at, reverse=True):
            latest.setdefault(normalize_email(invite.email), invite.status)

        entries = []
        for profile in instructors:
            status = latest.get(normalize_email(profile.email))
            entries.append(InstructorEntry(
                id=profile.id,
                full_name=profile.full_name,
                email=profile.email,
                invite_status=status,
                assignable=is_assignable(status),
            ))

        entries.sort(key=lambda e: (e.full_name or e.email or "").lower())
        return entries

    async def _invites_for_email(self, franchise_id: UUID, email: str) -> List[Invite]:
        result = self.supabase.table(self.table_name)\
            .select("*")\
            .eq("franchise_id", str(franchise_id))\
            .eq("email", email)\
            .execute()
        return [await self._expire_if_stale(Invite.model_validate(row)) for row in result.data or []]

    # ---- expiry ----

    def is_stale(self, invite: Invite) -> bool:
        """True for a pending invite older than the configured TTL"""
        ttl = self.settings.invite_ttl_days
        if not ttl or invite.status != InviteStatus.PENDING:
            return False
        created_at = invite.created_at
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return datetime.now(timezone.utc) - created_at > timedelta(days=ttl)

    async def _expire_if_stale(self, invite: Invite) -> Invite:
        if not self.is_stale(invite):
            return invite

        self.supabase.table(self.table_name)\
            .update({"status": InviteStatus.EXPIRED.value})\
            .eq("id", str(invite.id))\
            .eq("status", InviteStatus.PENDING.value)\
            .execute()

        logger.info(f"Invite {invite.id} expired after {self.settings.invite_ttl_days} days")
        return invite.model_copy(update={"status": InviteStatus.EXPIRED})


def is_assignable(latest_status: Optional[InviteStatus]) -> bool:
    """An instructor can take a class unless their latest invite was deactivated"""
    return latest_status != InviteStatus.INACTIVE
