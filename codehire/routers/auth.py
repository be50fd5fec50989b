# codehire/routers/auth.py
from fastapi import APIRouter, Depends, Request, Response
from sqlmodel import Session

from codehire.core.auth import (
    SessionIssuer,
    clear_session_cookie,
    get_app_settings,
    get_session_issuer,
    get_session_token,
    require_auth,
    set_session_cookie,
)
from codehire.core.config import Settings
from codehire.core.email_client import EmailClient
from codehire.database import get_session
from codehire.models.user import User
from codehire.repositories.otp_repo import OtpRepository
from codehire.repositories.user_repo import UserRepository
from codehire.schemas.auth import (
    AuthOut,
    ChangePasswordIn,
    LoginIn,
    MeOut,
    MessageOut,
    SendOtpIn,
    SignupIn,
)
from codehire.services.auth_service import AuthService
from codehire.services.otp_service import OtpService

router = APIRouter(prefix="/auth", tags=["Auth"])


def get_email_client(request: Request) -> EmailClient:
    return request.app.state.email_client


def get_auth_service(settings: Settings = Depends(get_app_settings)) -> AuthService:
    otp_service = OtpService(OtpRepository(), ttl=settings.otp_ttl)
    return AuthService(
        UserRepository(),
        otp_service,
        expose_errors=not settings.is_production,
    )


@router.post("/send-otp", response_model=MessageOut)
def send_otp(
    payload: SendOtpIn,
    session: Session = Depends(get_session),
    email_client: EmailClient = Depends(get_email_client),
    service: AuthService = Depends(get_auth_service),
):
    """
    Email a 6-digit verification code (valid for OTP_TTL_MINUTES).

    Any earlier code for the same address stops working.
    """
    service.send_otp(session, email_client, payload)
    return MessageOut(message="Verification code sent to your email.")


@router.post("/signup", response_model=AuthOut)
def signup(
    payload: SignupIn,
    response: Response,
    session: Session = Depends(get_session),
    issuer: SessionIssuer = Depends(get_session_issuer),
    settings: Settings = Depends(get_app_settings),
    service: AuthService = Depends(get_auth_service),
):
    """
    Create the account with a verification code and start a session.

    Sets the `auth` cookie and also returns the token in the body.
    """
    user, token = service.signup(session, issuer, payload)
    set_session_cookie(response, token, settings)
    return AuthOut(user=user, token=token)


@router.post("/login", response_model=AuthOut)
def login(
    payload: LoginIn,
    response: Response,
    session: Session = Depends(get_session),
    issuer: SessionIssuer = Depends(get_session_issuer),
    settings: Settings = Depends(get_app_settings),
    service: AuthService = Depends(get_auth_service),
):
    """
    Log in with email + password.

    Unknown email and wrong password produce the same 401 response.
    """
    user, token = service.login(session, issuer, payload)
    set_session_cookie(response, token, settings)
    return AuthOut(user=user, token=token)


@router.get("/me", response_model=MeOut)
def me(
    token: str | None = Depends(get_session_token),
    session: Session = Depends(get_session),
    issuer: SessionIssuer = Depends(get_session_issuer),
    service: AuthService = Depends(get_auth_service),
):
    """Current user, or `{"user": null}` without a valid session. Never errors."""
    return MeOut(user=service.me(session, issuer, token))


@router.post("/change-password", response_model=MessageOut)
def change_password(
    payload: ChangePasswordIn,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    service: AuthService = Depends(get_auth_service),
):
    """
    Change the password of the logged-in user.

    Requires the current password. Existing sessions stay valid.
    """
    service.change_password(session, current_user, payload)
    return MessageOut(message="Password updated successfully")


@router.post("/logout", response_model=MessageOut)
def logout(
    response: Response,
    settings: Settings = Depends(get_app_settings),
):
    """
    Clear the session cookie.

    The token itself is not revoked and stays valid until it expires.
    """
    clear_session_cookie(response, settings)
    return MessageOut()
