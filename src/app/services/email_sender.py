from abc import ABC, abstractmethod


class NotificationDeliveryError(Exception):
    """The outbound email provider did not accept a message."""


class EmailSender(ABC):
    """Outbound transactional email - application layer"""

    @abstractmethod
    async def send(self, to: str, subject: str, html: str) -> None:
        """Send one message; raise NotificationDeliveryError on rejection"""
        pass
