"""
Invitation email rendering.
"""

from dataclasses import dataclass
from html import escape
from typing import Optional

from src.domain.entities import INVITATION_TTL, Invitation

PRODUCT_NAME = "SMB Connect"
DEFAULT_ORGANIZATION_NAME = "the organization"


@dataclass(frozen=True)
class EmailMessage:
    subject: str
    html: str


def build_redemption_link(app_origin: str, raw_token: str) -> str:
    return f"{app_origin.rstrip('/')}/register?token={raw_token}"


def _detail_row(label: str, value: Optional[str]) -> str:
    if not value:
        return ""
    return f"<p><strong>{label}:</strong> {escape(value)}</p>"


def render_invitation_email(
    invitation: Invitation,
    organization_name: str,
    link: str,
    reminder: bool = False,
) -> EmailMessage:
    org = escape(organization_name)
    greeting = f"Hello {escape(invitation.first_name)}," if invitation.first_name else "Hello,"
    expiry_hours = int(INVITATION_TTL.total_seconds() // 3600)

    if reminder:
        subject = f"Reminder: Join {organization_name} on {PRODUCT_NAME}"
        heading = "Invitation Reminder"
        intro = (
            f"This is a reminder about your invitation to join <strong>{org}</strong> "
            f"on {PRODUCT_NAME}. We've generated a new registration link for you."
        )
    else:
        subject = f"You're invited to join {organization_name} on {PRODUCT_NAME}"
        heading = "You're Invited!"
        intro = f"You've been invited to join <strong>{org}</strong> on {PRODUCT_NAME}!"

    role = invitation.role.value.capitalize()
    details = "".join(
        [
            _detail_row("Role", role),
            _detail_row("Designation", invitation.designation),
            _detail_row("Department", invitation.department),
        ]
    )
    href = escape(link, quote=True)

    html = f"""<!DOCTYPE html>
<html>
  <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
    <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
      <h1 style="text-align: center;">{heading}</h1>
      <p>{greeting}</p>
      <p>{intro}</p>
      <div style="background: #fff; padding: 15px; border-left: 4px solid #667eea;">{details}</div>
      <p>Click the button below to complete your registration. This invitation expires in <strong>{expiry_hours} hours</strong>.</p>
      <p style="text-align: center;">
        <a href="{href}" style="background: #667eea; color: #fff; padding: 14px 28px; text-decoration: none; border-radius: 6px;">Complete Registration</a>
      </p>
      <p style="font-size: 12px; color: #666;">If the button doesn't work, copy and paste this link into your browser:<br><a href="{href}">{href}</a></p>
      <p style="font-size: 12px; color: #666;">This invitation link can only be used once. If you didn't expect this invitation, please contact your organization administrator.</p>
    </div>
  </body>
</html>
"""
    return EmailMessage(subject=subject, html=html)
