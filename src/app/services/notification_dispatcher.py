"""
Notification Dispatcher

Sends redemption links without holding up the request that issued them.
Each delivery runs as a detached asyncio task with its own failure logging;
the invitation row is already committed by the time dispatch is called.
"""

import asyncio
import logging
from typing import Set
from uuid import UUID

from src.app.services.email_sender import EmailSender
from src.app.services.invitation_email import (
    EmailMessage,
    build_redemption_link,
    render_invitation_email,
)
from src.domain.entities import Invitation

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    def __init__(self, sender: EmailSender, app_origin: str):
        self.sender = sender
        self.app_origin = app_origin
        self._in_flight: Set[asyncio.Task] = set()

    def dispatch(
        self,
        invitation: Invitation,
        raw_token: str,
        organization_name: str,
        reminder: bool = False,
    ) -> asyncio.Task:
        """Render now, deliver in the background. Never raises delivery errors."""
        link = build_redemption_link(self.app_origin, raw_token)
        message = render_invitation_email(invitation, organization_name, link, reminder)

        task = asyncio.create_task(self._deliver(invitation.id, invitation.email, message))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return task

    async def _deliver(self, invitation_id: UUID, to: str, message: EmailMessage) -> bool:
        try:
            await self.sender.send(to, message.subject, message.html)
        except Exception:
            # Detached task: nothing awaits it, so log here or lose the error
            logger.exception("Invitation email for %s could not be delivered", invitation_id)
            return False
        logger.info("Invitation email for %s delivered", invitation_id)
        return True

    @property
    def pending(self) -> int:
        return len(self._in_flight)

    async def drain(self) -> None:
        """Wait for in-flight deliveries (shutdown, tests)."""
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)
