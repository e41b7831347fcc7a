"""Authentication endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from notetaking.api.dependencies import get_auth_service, get_current_user
from notetaking.config import Settings, get_settings
from notetaking.models.user import User
from notetaking.schemas.user import (
    SendOTPRequest,
    VerifyOTPRequest,
    LoginRequest,
    GoogleAuthRequest,
    AuthResponse,
    CurrentUserResponse,
    OTPIssuedResponse,
    UserPublic,
)
from notetaking.services.auth_service import AuthService
from notetaking.services.exceptions import (
    ConflictError,
    DeliveryError,
    InvalidCredentialsError,
    InvalidIdentityCredentialError,
    InvalidOrExpiredOTPError,
    ServerError,
)

router = APIRouter()


def _auth_response(auth_service: AuthService, user: User, message: str) -> AuthResponse:
    token = auth_service.create_access_token(user.id)
    return AuthResponse(message=message, token=token, user=UserPublic.model_validate(user))


def _issue_otp(auth_service: AuthService, data: SendOTPRequest, deliver: bool):
    try:
        return auth_service.request_signup_otp(data.email, data.name, deliver=deliver)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except DeliveryError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)


@router.post(
    "/send-otp",
    response_model=OTPIssuedResponse,
    response_model_exclude_none=True,
    summary="Request a signup code",
    description="Create a pending account for the email and mail it a one-time code.",
)
def send_otp(
    data: SendOTPRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> OTPIssuedResponse:
    """Issue and mail a signup code."""
    _issue_otp(auth_service, data, deliver=True)
    return OTPIssuedResponse(message="OTP sent successfully")


@router.post(
    "/test-otp",
    response_model=OTPIssuedResponse,
    response_model_exclude_none=True,
    summary="Request a signup code (development)",
    description="""
    In development mode the code is returned in the response instead of
    being mailed. In any other environment this behaves like /send-otp.
    """,
)
def test_otp(
    data: SendOTPRequest,
    settings: Settings = Depends(get_settings),
    auth_service: AuthService = Depends(get_auth_service),
) -> OTPIssuedResponse:
    """Issue a signup code, echoing it back in development."""
    if not settings.is_development:
        _issue_otp(auth_service, data, deliver=True)
        return OTPIssuedResponse(message="OTP sent successfully")

    user, otp = _issue_otp(auth_service, data, deliver=False)
    return OTPIssuedResponse(
        message="OTP generated successfully (development mode)",
        otp=otp,
        user_id=user.id,
    )


@router.post(
    "/verify-otp",
    response_model=AuthResponse,
    summary="Complete signup",
    description="Verify the emailed code, set the password and receive a token.",
)
def verify_otp(
    data: VerifyOTPRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Activate a pending signup."""
    try:
        user = auth_service.verify_signup_otp(data.email, data.otp, data.password)
    except InvalidOrExpiredOTPError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    return _auth_response(auth_service, user, "Signup successful")


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login to get access token",
    description="Authenticate with email and password to receive a JWT access token.",
)
def login(
    data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Login and get access token."""
    try:
        user = auth_service.authenticate_user(data.email, data.password)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    return _auth_response(auth_service, user, "Login successful")


@router.post(
    "/google",
    response_model=AuthResponse,
    summary="Sign in with Google",
    description="Verify a Google ID token, creating or linking the account as needed.",
)
def google_auth(
    data: GoogleAuthRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Sign in with a Google credential."""
    try:
        user = auth_service.authenticate_with_google(data.credential)
    except (InvalidIdentityCredentialError, ConflictError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except ServerError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)

    return _auth_response(auth_service, user, "Google authentication successful")


@router.get(
    "/curruser",
    response_model=CurrentUserResponse,
    summary="Get current user",
    description="Get the currently authenticated user's public profile.",
)
def get_current_user_profile(
    current_user: User = Depends(get_current_user),
) -> CurrentUserResponse:
    """Get current user information."""
    return CurrentUserResponse(user=UserPublic.model_validate(current_user))
