# codehire/services/auth_service.py
import logging
import smtplib

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from codehire.core.auth import SessionIssuer
from codehire.core.email_client import EmailClient
from codehire.core.errors import (
    DependencyFailureError,
    EmailTakenError,
    FieldValidationError,
    InvalidCredentialsError,
    InvalidOrExpiredCodeError,
    UnauthorizedError,
)
from codehire.core.security import hash_password, verify_password
from codehire.core.validation import (
    check_email,
    check_name,
    check_otp,
    check_password,
    collect,
    raise_for_errors,
)
from codehire.models.user import User
from codehire.repositories.user_repo import UserRepository, normalize_email
from codehire.schemas.auth import ChangePasswordIn, LoginIn, SendOtpIn, SignupIn
from codehire.schemas.user import UserRead
from codehire.services.otp_service import OtpService

logger = logging.getLogger(__name__)

SEND_FAILED_MESSAGE = "Failed to send verification email. Please try again."


class AuthService:
    """
    Account and session orchestration.

    Signup is two-phase per email:
      1. send_otp: issue a code and mail it        (Unverified -> Code-Sent)
      2. signup:   consume the code, create user  (Code-Sent -> Active)

    Responsibilities:
      - validate form fields (all errors reported together)
      - own the transaction around repository calls
      - keep login failures indistinguishable
    """

    def __init__(
        self,
        user_repo: UserRepository,
        otp_service: OtpService,
        expose_errors: bool = False,
    ):
        self.user_repo = user_repo
        self.otp_service = otp_service
        # Relay error text reaches clients only outside production
        self.expose_errors = expose_errors

    # ----- Signup -----

    def send_otp(self, session: Session, email_client: EmailClient, payload: SendOtpIn) -> str:
        """
        Issue a verification code for the email and deliver it.

        Returns the email the code was sent to (normalized).

        Raises:
            FieldValidationError(400): missing / malformed email.
            DependencyFailureError(500): the email relay failed.
        """
        raise_for_errors(collect(email=check_email(payload.email)))
        email = normalize_email(payload.email)

        code = self.otp_service.issue(session, email)
        session.commit()

        try:
            email_client.send_otp_code(email, code)
        except (RuntimeError, smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to deliver verification code to %s: %s", email, exc)
            message = str(exc) if self.expose_errors else ""
            raise DependencyFailureError(
                message or SEND_FAILED_MESSAGE,
                errors={"email": "Failed to send email"},
            )
        return email

    def signup(self, session: Session, issuer: SessionIssuer, payload: SignupIn) -> tuple[UserRead, str]:
        """
        Complete signup with a previously issued code.

        Order of checks:
          1. field validation               -> 400
          2. email already registered       -> 409
          3. code missing/mismatch/expired  -> 400
          4. user insert (unique index)     -> 409 on a concurrent signup

        The code is consumed in the same transaction as the insert, so a
        409 at step 4 leaves the code usable.
        """
        raise_for_errors(
            collect(
                email=check_email(payload.email),
                otp=check_otp(payload.otp),
                name=check_name(payload.name),
                password=check_password(payload.password),
            )
        )
        email = normalize_email(payload.email)

        if self.user_repo.get_by_email(session, email) is not None:
            raise EmailTakenError()

        if not self.otp_service.consume(session, email, payload.otp):
            raise InvalidOrExpiredCodeError()

        user = self.user_repo.create(
            session,
            email=email,
            password_hash=hash_password(payload.password),
            name=payload.name,
        )
        session.commit()
        session.refresh(user)
        logger.info("Created account %s", user.id)

        return UserRead.model_validate(user), issuer.issue(user.id)

    # ----- Login -----

    def login(self, session: Session, issuer: SessionIssuer, payload: LoginIn) -> tuple[UserRead, str]:
        """
        Verify credentials and mint a session token.

        Raises:
            FieldValidationError(400): missing / malformed fields.
            InvalidCredentialsError(401): unknown email or wrong password
                (identical payload for both).
        """
        raise_for_errors(
            collect(
                email=check_email(payload.email),
                password=check_password(payload.password),
            )
        )

        user = self.user_repo.get_by_email(session, payload.email, include_password_hash=True)
        if user is None or not verify_password(payload.password, user.password_hash):
            raise InvalidCredentialsError()

        return UserRead.model_validate(user), issuer.issue(user.id)

    # ----- Session lookup -----

    def me(self, session: Session, issuer: SessionIssuer, token: str | None) -> UserRead | None:
        """Resolve a session token to a profile; any failure yields None."""
        if not token:
            return None
        try:
            user_id = issuer.verify(token)
        except UnauthorizedError:
            return None

        try:
            user = self.user_repo.get_by_id(session, user_id)
        except SQLAlchemyError as exc:
            logger.error("Session lookup failed for %s: %s", user_id, exc)
            return None
        if user is None:
            return None
        return UserRead.model_validate(user)

    # ----- Password change -----

    def change_password(self, session: Session, current_user: User, payload: ChangePasswordIn) -> None:
        """
        Replace the password after re-checking the current one.

        Other outstanding sessions remain valid.

        Raises:
            FieldValidationError(400): missing fields / weak new password /
                wrong current password.
            UnauthorizedError(401): the account no longer exists.
        """
        if not payload.current_password or not payload.new_password:
            raise FieldValidationError(
                "Current password and new password are required",
                errors=collect(
                    currentPassword=None if payload.current_password else "Current password is required",
                    newPassword=None if payload.new_password else "New password is required",
                ),
            )

        weak = check_password(payload.new_password, field_label="New password")
        if weak:
            raise FieldValidationError(weak, errors={"newPassword": weak})

        user = self.user_repo.get_by_id(session, current_user.id, include_password_hash=True)
        if user is None:
            raise UnauthorizedError("User not found")

        if not verify_password(payload.current_password, user.password_hash):
            message = "Current password is incorrect"
            raise FieldValidationError(message, errors={"currentPassword": message})

        self.user_repo.update_password(session, user, hash_password(payload.new_password))
        session.commit()
        logger.info("Password changed for %s", user.id)
