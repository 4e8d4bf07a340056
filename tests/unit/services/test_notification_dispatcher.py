import asyncio
from unittest.mock import AsyncMock

import pytest

from src.app.services.email_sender import NotificationDeliveryError
from src.app.services.invitation_email import build_redemption_link
from src.app.services.notification_dispatcher import NotificationDispatcher

RAW_TOKEN = "ab" * 32


@pytest.mark.asyncio
async def test_dispatch_sends_link_to_invitee(make_invitation):
    sender = AsyncMock()
    dispatcher = NotificationDispatcher(sender, "https://app.example.com/")
    invitation = make_invitation(designation="CTO", department="Engineering")

    delivered = await dispatcher.dispatch(invitation, RAW_TOKEN, "Acme Corp")

    assert delivered is True
    to, subject, html = sender.send.await_args.args
    assert to == "jane@acme.com"
    assert subject == "You're invited to join Acme Corp on SMB Connect"
    assert f"https://app.example.com/register?token={RAW_TOKEN}" in html
    assert "Jane" in html
    assert "CTO" in html
    assert "Engineering" in html
    assert "48 hours" in html


@pytest.mark.asyncio
async def test_reminder_uses_reminder_subject(make_invitation):
    sender = AsyncMock()
    dispatcher = NotificationDispatcher(sender, "https://app.example.com")

    await dispatcher.dispatch(make_invitation(), RAW_TOKEN, "Acme Corp", reminder=True)

    assert sender.send.await_args.args[1] == "Reminder: Join Acme Corp on SMB Connect"


@pytest.mark.asyncio
async def test_delivery_failure_is_logged_not_raised(make_invitation, caplog):
    sender = AsyncMock()
    sender.send.side_effect = NotificationDeliveryError("provider down")
    dispatcher = NotificationDispatcher(sender, "https://app.example.com")
    invitation = make_invitation()

    delivered = await dispatcher.dispatch(invitation, RAW_TOKEN, "Acme Corp")

    assert delivered is False
    assert "could not be delivered" in caplog.text
    assert RAW_TOKEN not in caplog.text


@pytest.mark.asyncio
async def test_dispatch_does_not_wait_for_delivery(make_invitation):
    release = asyncio.Event()

    async def slow_send(to, subject, html):
        await release.wait()

    sender = AsyncMock()
    sender.send.side_effect = slow_send
    dispatcher = NotificationDispatcher(sender, "https://app.example.com")

    dispatcher.dispatch(make_invitation(), RAW_TOKEN, "Acme Corp")
    await asyncio.sleep(0)
    assert dispatcher.pending == 1

    release.set()
    await dispatcher.drain()
    assert dispatcher.pending == 0


def test_redemption_link_format():
    assert (
        build_redemption_link("http://localhost:5173", RAW_TOKEN)
        == f"http://localhost:5173/register?token={RAW_TOKEN}"
    )


def test_organization_name_is_escaped(make_invitation):
    from src.app.services.invitation_email import render_invitation_email

    message = render_invitation_email(
        make_invitation(), "<script>Acme</script>", "http://x/register?token=t"
    )

    assert "<script>" not in message.html
    assert "&lt;script&gt;" in message.html
