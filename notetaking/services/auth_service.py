"""Authentication service: signup codes, login, Google sign-in and tokens."""

import hmac
import logging
import secrets
import string
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional
from uuid import UUID

import bcrypt
from jose import jwt, JWTError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from notetaking.config import Settings
from notetaking.integrations.identity import (
    IdentityVerifier,
    IdentityVerificationError,
    IdentityProviderUnavailable,
)
from notetaking.integrations.mail import MailSender, MailDeliveryError
from notetaking.models.user import User
from notetaking.schemas.user import TokenPayload
from notetaking.services.exceptions import (
    AuthenticationError,
    ConflictError,
    DeliveryError,
    InvalidCredentialsError,
    InvalidIdentityCredentialError,
    InvalidOrExpiredOTPError,
    ServerError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)

# bcrypt ignores (or, in newer releases, rejects) input beyond 72 bytes
BCRYPT_MAX_BYTES = 72


@lru_cache(maxsize=1)
def _dummy_password_hash() -> bytes:
    """Hash compared against when no account matches, so rejections cost the same."""
    return bcrypt.hashpw(secrets.token_bytes(16), bcrypt.gensalt())


class AuthService:
    """
    Orchestrates the account lifecycle.

    Accounts move from no record, to a pending signup holding a one-time
    code, to an active account with a password or a linked Google
    identity. Remote failures from the mail sender and the identity
    verifier are translated into service errors here.
    """

    def __init__(
        self,
        db: Session,
        settings: Settings,
        mail_sender: Optional[MailSender] = None,
        identity_verifier: Optional[IdentityVerifier] = None,
    ):
        """
        Initialize the auth service.

        Args:
            db: SQLAlchemy database session
            settings: Application settings
            mail_sender: Backend used to deliver one-time codes
            identity_verifier: Verifier for Google ID tokens
        """
        self.db = db
        self.settings = settings
        self.mail_sender = mail_sender
        self.identity_verifier = identity_verifier

    # Lookups

    def get_user_by_id(self, user_id: UUID) -> User:
        """
        Get user by ID.

        Raises:
            UserNotFoundError: If user doesn't exist
        """
        user = self.db.query(User).filter(User.id == user_id).first()

        if not user:
            raise UserNotFoundError(user_id)

        return user

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    # Signup

    def request_signup_otp(self, email: str, name: str, deliver: bool = True) -> tuple[User, str]:
        """
        Issue a signup code for an email address.

        A fresh email gets a new pending record. An email that is still
        pending gets its code, expiry and name replaced, which invalidates
        the previous code.

        Args:
            email: Normalized email address
            name: Display name for the new account
            deliver: Send the code by mail; only the development endpoint
                passes False

        Returns:
            Tuple of the pending User and the issued code

        Raises:
            ConflictError: If an active account owns the email
            DeliveryError: If the code could not be mailed; the pending
                record is removed
        """
        user = self.get_user_by_email(email)
        if user and user.is_email_verified:
            raise ConflictError()

        otp = self._generate_otp()
        otp_expiry = self._now() + timedelta(minutes=self.settings.OTP_EXPIRE_MINUTES)

        if user:
            user.name = name
            user.otp = otp
            user.otp_expiry = otp_expiry
        else:
            user = User(
                email=email,
                name=name,
                otp=otp,
                otp_expiry=otp_expiry,
                is_email_verified=False,
            )
            self.db.add(user)

        self._commit_or_conflict()
        self.db.refresh(user)

        if deliver:
            try:
                self.mail_sender.send_otp(email, otp, name, self.settings.OTP_EXPIRE_MINUTES)
            except MailDeliveryError as e:
                logger.error(f"Failed to deliver signup OTP to {email}: {e}")
                self.db.delete(user)
                self.db.commit()
                raise DeliveryError() from e

        logger.info(f"Issued signup OTP for pending user {user.id}")
        return user, otp

    def verify_signup_otp(self, email: str, otp: str, password: str) -> User:
        """
        Activate a pending signup.

        Args:
            email: Normalized email address
            otp: Code submitted by the user
            password: Chosen password

        Returns:
            The now active User

        Raises:
            InvalidOrExpiredOTPError: For a wrong or expired code, an
                already verified account, or an unknown email
        """
        user = self.db.query(User).filter(
            User.email == email,
            User.is_email_verified.is_(False),
            User.otp_expiry > self._now(),
        ).first()

        if not user or not user.otp or not self._is_well_formed_otp(otp):
            raise InvalidOrExpiredOTPError()
        if not hmac.compare_digest(user.otp.encode("ascii"), otp.encode("ascii")):
            raise InvalidOrExpiredOTPError()

        user.hashed_password = self._hash_password(password)
        user.is_email_verified = True
        user.otp = None
        user.otp_expiry = None

        self.db.commit()
        self.db.refresh(user)

        logger.info(f"Verified signup for user {user.id}")
        return user

    def purge_expired_pending_signups(self, now: Optional[datetime] = None) -> int:
        """
        Delete pending signups whose code has expired.

        Returns:
            Number of records removed
        """
        cutoff = now or self._now()
        deleted = self.db.query(User).filter(
            User.is_email_verified.is_(False),
            User.otp_expiry < cutoff,
        ).delete(synchronize_session=False)
        self.db.commit()

        if deleted:
            logger.info(f"Purged {deleted} expired pending signups")
        return deleted

    # Login

    def authenticate_user(self, email: str, password: str) -> User:
        """
        Authenticate a user with email and password.

        Raises:
            InvalidCredentialsError: If the email has no active password
                account or the password does not match
        """
        user = self.get_user_by_email(email)

        if not user or user.is_pending or not user.hashed_password:
            # Pay for a hash comparison anyway so the response time does not
            # reveal whether the account exists
            bcrypt.checkpw(self._password_bytes(password), _dummy_password_hash())
            logger.info("Login rejected: no active password account")
            raise InvalidCredentialsError()

        if not self._verify_password(password, user.hashed_password):
            logger.info(f"Login rejected: wrong password for user {user.id}")
            raise InvalidCredentialsError()

        return user

    def authenticate_with_google(self, credential: str) -> User:
        """
        Sign in with a Google ID token, creating or linking the account.

        Returns:
            The signed-in User

        Raises:
            InvalidIdentityCredentialError: If the token is rejected, lacks
                subject, email or name, or its email is not verified
            ServerError: If Google could not be reached
            ConflictError: If a concurrent request created a clashing record
        """
        try:
            identity = self.identity_verifier.verify(credential)
        except IdentityVerificationError as e:
            raise InvalidIdentityCredentialError() from e
        except IdentityProviderUnavailable as e:
            raise ServerError("Identity provider unavailable") from e

        if not identity.subject or not identity.email or not identity.name:
            raise InvalidIdentityCredentialError("Google ID, email, and name are required")
        if not identity.email_verified:
            # An unverified address must not be matched against existing accounts
            logger.info(f"Google sign-in rejected: unverified email for subject {identity.subject}")
            raise InvalidIdentityCredentialError("Google email is not verified")

        email = identity.email.strip().lower()

        user = self.db.query(User).filter(User.google_id == identity.subject).first()
        if not user:
            user = self.get_user_by_email(email)

        if user:
            if not user.google_id:
                user.google_id = identity.subject
                user.is_email_verified = True
                user.otp = None
                user.otp_expiry = None
                if identity.picture:
                    user.avatar = identity.picture
                self._commit_or_conflict()
                self.db.refresh(user)
                logger.info(f"Linked Google identity to user {user.id}")
        else:
            user = User(
                google_id=identity.subject,
                email=email,
                name=identity.name,
                avatar=identity.picture,
                is_email_verified=True,
            )
            self.db.add(user)
            self._commit_or_conflict()
            self.db.refresh(user)
            logger.info(f"Created user {user.id} from Google sign-in")

        return user

    # Tokens

    def create_access_token(self, user_id: UUID, expires_delta: Optional[timedelta] = None) -> str:
        """
        Create a JWT access token for a user.

        Args:
            user_id: User ID
            expires_delta: Lifetime override; defaults to the configured lifetime

        Returns:
            JWT token string
        """
        if expires_delta is None:
            expires_delta = timedelta(minutes=self.settings.ACCESS_TOKEN_EXPIRE_MINUTES)

        payload = {
            "sub": str(user_id),
            "exp": self._now() + expires_delta,
        }

        return jwt.encode(payload, self.settings.SECRET_KEY, algorithm=self.settings.JWT_ALGORITHM)

    def verify_token(self, token: str) -> TokenPayload:
        """
        Verify a JWT token and extract payload.

        Raises:
            AuthenticationError: If token is invalid or expired
        """
        try:
            payload = jwt.decode(
                token, self.settings.SECRET_KEY, algorithms=[self.settings.JWT_ALGORITHM]
            )
            return TokenPayload(sub=payload.get("sub"), exp=payload.get("exp"))
        except JWTError as e:
            raise AuthenticationError(f"Invalid token: {str(e)}")

    def resolve_user(self, token: str) -> User:
        """
        Resolve the live user a bearer token was issued for.

        Raises:
            AuthenticationError: If the token is invalid, expired, or its
                user no longer exists
        """
        payload = self.verify_token(token)

        if not payload.sub:
            raise AuthenticationError("Invalid token payload")

        try:
            user_id = UUID(payload.sub)
        except ValueError:
            raise AuthenticationError("Invalid token payload")

        try:
            return self.get_user_by_id(user_id)
        except UserNotFoundError:
            raise AuthenticationError("User not found")

    # Helpers

    def _commit_or_conflict(self) -> None:
        """Commit, turning a unique-index violation into ConflictError."""
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Unique constraint rejected write: {e.orig}")
            raise ConflictError() from e

    def _generate_otp(self) -> str:
        return "".join(secrets.choice(string.digits) for _ in range(self.settings.OTP_LENGTH))

    def _is_well_formed_otp(self, otp: str) -> bool:
        # str.isdigit() also accepts non-ASCII digits
        return len(otp) == self.settings.OTP_LENGTH and all(c in string.digits for c in otp)

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    @staticmethod
    def _password_bytes(password: str) -> bytes:
        return password.encode("utf-8")[:BCRYPT_MAX_BYTES]

    def _hash_password(self, password: str) -> str:
        """Hash a password using bcrypt."""
        salt = bcrypt.gensalt()
        hashed = bcrypt.hashpw(self._password_bytes(password), salt)
        return hashed.decode("utf-8")

    def _verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash."""
        return bcrypt.checkpw(self._password_bytes(plain_password), hashed_password.encode("utf-8"))
