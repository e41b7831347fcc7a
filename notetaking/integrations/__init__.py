"""Remote collaborators: mail delivery and identity verification."""

from notetaking.integrations.identity import (
    IdentityVerifier,
    GoogleIdentityVerifier,
    VerifiedIdentity,
    IdentityVerificationError,
    IdentityProviderUnavailable,
    build_identity_verifier,
)
from notetaking.integrations.mail import (
    MailSender,
    SendGridMailSender,
    ConsoleMailSender,
    MailDeliveryError,
    build_mail_sender,
)

__all__ = [
    "IdentityVerifier",
    "GoogleIdentityVerifier",
    "VerifiedIdentity",
    "IdentityVerificationError",
    "IdentityProviderUnavailable",
    "build_identity_verifier",
    "MailSender",
    "SendGridMailSender",
    "ConsoleMailSender",
    "MailDeliveryError",
    "build_mail_sender",
]
