"""Outbound email for invitations."""

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Protocol

from finance_tracker.config import Settings, settings

logger = logging.getLogger(__name__)

ROLE_DESCRIPTIONS = {
    "OWNER": "full access and can manage the organization",
    "ADMIN": "manage members and all data",
    "MEMBER": "create and edit data",
    "VIEWER": "view-only access",
}


@dataclass
class InvitationEmail:
    """Everything needed to render an invitation email."""

    to: str
    organization_name: str
    inviter_name: str
    token: str
    role: str


class EmailDispatcher(Protocol):
    def send_invitation_email(self, email: InvitationEmail) -> None: ...


def render_invitation(email: InvitationEmail, config: Settings = settings) -> EmailMessage:
    """Build the plain-text/HTML invitation message."""
    accept_url = config.invitation_accept_url(email.token)
    description = ROLE_DESCRIPTIONS.get(email.role, "access")
    days = config.INVITATION_EXPIRE_DAYS

    message = EmailMessage()
    message["From"] = config.SMTP_FROM
    message["To"] = email.to
    message["Subject"] = f"You've been invited to join {email.organization_name}"
    message.set_content(
        f"{email.inviter_name} has invited you to join {email.organization_name} "
        f"as a {email.role}.\n\n"
        f"As a {email.role}, you will have {description}.\n\n"
        f"Accept the invitation here:\n{accept_url}\n\n"
        f"This invitation will expire in {days} days.\n"
        "If you didn't expect this invitation, you can safely ignore this email.\n"
    )
    message.add_alternative(
        f"<h1>You've Been Invited!</h1>"
        f"<p>{email.inviter_name} has invited you to join "
        f"<strong>{email.organization_name}</strong> as a <strong>{email.role}</strong>.</p>"
        f"<p>As a {email.role}, you will have {description}.</p>"
        f'<p><a href="{accept_url}">Accept Invitation</a></p>'
        f"<p>This invitation will expire in {days} days.</p>",
        subtype="html",
    )
    return message


class SmtpEmailDispatcher:
    """Delivers invitation emails over SMTP."""

    def __init__(self, config: Settings = settings):
        self.config = config

    def send_invitation_email(self, email: InvitationEmail) -> None:
        message = render_invitation(email, self.config)
        with smtplib.SMTP(self.config.SMTP_HOST, self.config.SMTP_PORT, timeout=10) as server:
            if self.config.SMTP_USE_TLS:
                server.starttls()
            if self.config.SMTP_USER:
                server.login(self.config.SMTP_USER, self.config.SMTP_PASSWORD)
            server.send_message(message)
        logger.info("Invitation email delivered to %s", email.to)


class ConsoleEmailDispatcher:
    """Development backend: logs the email instead of sending it."""

    def __init__(self, config: Settings = settings):
        self.config = config

    def send_invitation_email(self, email: InvitationEmail) -> None:
        message = render_invitation(email, self.config)
        logger.info(
            "Invitation email to %s (subject=%r) not sent: console email backend",
            email.to,
            message["Subject"],
        )


def get_email_dispatcher() -> EmailDispatcher:
    """FastAPI dependency returning the configured email backend."""
    if settings.EMAIL_BACKEND == "smtp":
        return SmtpEmailDispatcher(settings)
    return ConsoleEmailDispatcher(settings)
