"""API dependencies for dependency injection."""

from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from notetaking.config import Settings, get_settings
from notetaking.db.session import get_db
from notetaking.integrations.identity import IdentityVerifier, build_identity_verifier
from notetaking.integrations.mail import MailSender, build_mail_sender
from notetaking.services.auth_service import AuthService
from notetaking.services.notes_service import NotesService
from notetaking.services.exceptions import AuthenticationError
from notetaking.models.user import User

# Missing credentials are reported as 401 by get_current_user, not 403
security = HTTPBearer(auto_error=False)


def get_mail_sender(settings: Settings = Depends(get_settings)) -> MailSender:
    """Get the configured mail backend."""
    return build_mail_sender(settings)


def get_identity_verifier(settings: Settings = Depends(get_settings)) -> IdentityVerifier:
    """Get the Google ID-token verifier."""
    return build_identity_verifier(settings)


def get_auth_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    mail_sender: MailSender = Depends(get_mail_sender),
    identity_verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> AuthService:
    """Get auth service instance."""
    return AuthService(db, settings, mail_sender, identity_verifier)


def get_notes_service(db: Session = Depends(get_db)) -> NotesService:
    """Get notes service instance."""
    return NotesService(db)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """
    Get the current authenticated user from the bearer token.

    Raises:
        HTTPException: 401 if the token is missing, invalid, expired, or
            its user no longer exists
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token, authorization denied",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return auth_service.resolve_user(credentials.credentials)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e.message),
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_current_user_id(current_user: User = Depends(get_current_user)) -> UUID:
    """Get the current user's ID."""
    return current_user.id
