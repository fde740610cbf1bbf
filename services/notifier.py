# services/notifier.py
import logging
from typing import Optional
import httpx

from config import Settings
from models.invite import Invite

logger = logging.getLogger(__name__)

INVITE_CREATED = "instructor_invite_created"


class CRMNotifier:
    """Posts invite events to the GoHighLevel inbound webhook.

    Delivery is best-effort: every failure is logged and reported as False,
    never raised, so the caller's already-committed invite stays valid.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.url = settings.notify_url
        self.app_url = settings.app_url
        self.timeout = settings.notify_timeout_secs
        self.transport = transport

    def registration_url(self, token: str) -> str:
        return f"{self.app_url}/register-instructor?token={token}"

    def invite_payload(self, invite: Invite, franchise_name: str) -> dict:
        return {
            "type": INVITE_CREATED,
            "invite_id": str(invite.id),
            "franchise_id": str(invite.franchise_id),
            "franchise_name": franchise_name,
            "invited_by": str(invite.invited_by),
            "full_name": invite.full_name,
            "email": invite.email,
            "token": invite.token,
            "registration_url": self.registration_url(invite.token),
        }

    async def notify_invite_created(self, invite: Invite, franchise_name: str = "") -> bool:
        if not self.url:
            logger.warning(f"GHL webhook URL not configured, invite {invite.id} not announced")
            return False

        payload = self.invite_payload(invite, franchise_name)
        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
                response = await client.post(
                    self.url,
                    json=payload,
                    headers={"Content-Type": "application/json"}
                )
                response.raise_for_status()

            logger.info(f"GHL notified of invite {invite.id}")
            return True

        except httpx.TimeoutException:
            logger.warning(f"GHL webhook timed out after {self.timeout}s for invite {invite.id}")
        except httpx.HTTPStatusError as e:
            logger.warning(f"GHL webhook returned {e.response.status_code} for invite {invite.id}")
        except httpx.HTTPError as e:
            logger.warning(f"Could not reach GHL for invite {invite.id}: {str(e)}")
        return False
