"""Google ID-token verification."""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import requests
from google.auth import exceptions as google_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token
from pydantic import BaseModel

from notetaking.config import Settings

logger = logging.getLogger(__name__)


class IdentityVerificationError(Exception):
    """The credential is invalid, expired, or issued for another audience."""


class IdentityProviderUnavailable(Exception):
    """The provider could not be reached or is not configured."""


class VerifiedIdentity(BaseModel):
    """Profile claims taken from a verified ID token."""

    subject: Optional[str] = None
    email: Optional[str] = None
    email_verified: bool = False
    name: Optional[str] = None
    picture: Optional[str] = None


class IdentityVerifier(ABC):
    """Abstract interface for verifying third-party identity credentials."""

    @abstractmethod
    def verify(self, credential: str) -> VerifiedIdentity:
        """
        Verify a credential and return its profile claims.

        Args:
            credential: Opaque ID token issued by the provider

        Returns:
            VerifiedIdentity with whatever claims the token carried

        Raises:
            IdentityVerificationError: If the token is rejected
            IdentityProviderUnavailable: If verification could not be attempted
        """
        pass


class _TimeoutRequest(google_requests.Request):
    """Transport adapter that applies a fixed timeout to certificate fetches."""

    def __init__(self, timeout: float, session: Optional[requests.Session] = None):
        super().__init__(session=session)
        self._timeout = timeout

    def __call__(self, url, method="GET", body=None, headers=None, timeout=None, **kwargs):
        return super().__call__(
            url, method=method, body=body, headers=headers, timeout=self._timeout, **kwargs
        )


class GoogleIdentityVerifier(IdentityVerifier):
    """Verifies Google ID tokens against Google's public certificates."""

    def __init__(self, client_id: Optional[str], timeout: float = 10.0):
        """
        Initialize the verifier.

        Args:
            client_id: OAuth web client id the token must be issued for
            timeout: Timeout in seconds for fetching Google's certificates
        """
        self.client_id = client_id
        self.timeout = timeout

    def verify(self, credential: str) -> VerifiedIdentity:
        if not self.client_id:
            # verify_oauth2_token skips the audience check without a client id
            raise IdentityProviderUnavailable("GOOGLE_CLIENT_ID is not configured")

        try:
            id_info = id_token.verify_oauth2_token(
                credential, _TimeoutRequest(self.timeout), self.client_id
            )
        except google_exceptions.TransportError as e:
            logger.error(f"Could not reach Google to verify ID token: {e}")
            raise IdentityProviderUnavailable(str(e)) from e
        except (ValueError, google_exceptions.GoogleAuthError) as e:
            logger.warning(f"Google ID token verification error: {e}")
            raise IdentityVerificationError(str(e)) from e

        return VerifiedIdentity(
            subject=id_info.get("sub"),
            email=id_info.get("email"),
            email_verified=id_info.get("email_verified") is True,
            name=id_info.get("name"),
            picture=id_info.get("picture"),
        )


def build_identity_verifier(settings: Settings) -> IdentityVerifier:
    return GoogleIdentityVerifier(
        client_id=settings.GOOGLE_CLIENT_ID,
        timeout=settings.IDENTITY_PROVIDER_TIMEOUT,
    )
