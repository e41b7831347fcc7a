"""Transactional mail delivery for one-time signup codes."""

import html
import logging
from abc import ABC, abstractmethod
from typing import Optional

from python_http_client.exceptions import HTTPError
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from notetaking.config import Settings

logger = logging.getLogger(__name__)


class MailDeliveryError(Exception):
    """Raised when a mail backend could not hand off a message."""


class MailSender(ABC):
    """
    Abstract interface for sending one-time codes.

    Allows swapping SendGrid for another provider by implementing this
    interface.
    """

    @abstractmethod
    def send_otp(self, to_email: str, otp: str, name: str, expires_in_minutes: int) -> None:
        """
        Send a one-time code to a recipient.

        Args:
            to_email: Recipient address
            otp: The one-time code
            name: Recipient display name used in the greeting
            expires_in_minutes: Validity horizon quoted in the message

        Raises:
            MailDeliveryError: If the message could not be sent
        """
        pass


def render_otp_email(otp: str, name: str, expires_in_minutes: int) -> tuple[str, str]:
    """Build the subject and HTML body of a verification email."""
    subject = "Your Verification Code"
    html_content = (
        f"<p>Hi {html.escape(name)},</p>"
        f"<p>Your OTP is: <strong>{html.escape(otp)}</strong></p>"
        f"<p>It will expire in {expires_in_minutes} minutes.</p>"
    )
    return subject, html_content


class SendGridMailSender(MailSender):
    """SendGrid implementation."""

    def __init__(
        self,
        api_key: Optional[str],
        sender_email: Optional[str],
        timeout: Optional[float] = None,
    ):
        """
        Initialize the SendGrid sender.

        Args:
            api_key: SendGrid API key
            sender_email: Verified sender address
            timeout: Per-request timeout in seconds
        """
        self.api_key = api_key
        self.sender_email = sender_email
        self.timeout = timeout

    def send_otp(self, to_email: str, otp: str, name: str, expires_in_minutes: int) -> None:
        if not self.api_key or not self.sender_email:
            raise MailDeliveryError("SENDGRID_API_KEY and SENDER_EMAIL must be set")

        subject, html_content = render_otp_email(otp, name, expires_in_minutes)
        message = Mail(
            from_email=self.sender_email,
            to_emails=to_email,
            subject=subject,
            html_content=html_content,
        )

        client = SendGridAPIClient(self.api_key)
        client.client.timeout = self.timeout
        try:
            response = client.send(message)
        except HTTPError as e:
            logger.error(f"SendGrid rejected mail to {to_email}: {e}")
            raise MailDeliveryError(str(e)) from e
        except OSError as e:
            # socket errors and timeouts from urllib
            logger.error(f"SendGrid unreachable while mailing {to_email}: {e}")
            raise MailDeliveryError(str(e)) from e

        if response.status_code >= 300:
            raise MailDeliveryError(f"SendGrid returned status {response.status_code}")

        logger.info(f"Verification email sent to {to_email}, status code: {response.status_code}")


class ConsoleMailSender(MailSender):
    """Development backend that writes the code to the log instead of mailing it."""

    def send_otp(self, to_email: str, otp: str, name: str, expires_in_minutes: int) -> None:
        logger.warning(f"[console mail] OTP for {to_email} ({name}): {otp}, expires in {expires_in_minutes} min")


def build_mail_sender(settings: Settings) -> MailSender:
    """Create the mail backend selected by ``MAIL_BACKEND``."""
    backend = settings.MAIL_BACKEND.lower()
    if backend == "console":
        return ConsoleMailSender()
    if backend == "sendgrid":
        return SendGridMailSender(
            api_key=settings.SENDGRID_API_KEY,
            sender_email=settings.SENDER_EMAIL,
            timeout=settings.MAIL_TIMEOUT,
        )
    raise ValueError(f"Unknown MAIL_BACKEND: {settings.MAIL_BACKEND}")
