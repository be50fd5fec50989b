# codehire/schemas/auth.py
from codehire.schemas.user import CamelModel, UserRead

# Request fields are optional on purpose: missing values are reported by
# the service together with every other invalid field.


class SendOtpIn(CamelModel):
    email: str | None = None


class SignupIn(CamelModel):
    email: str | None = None
    password: str | None = None
    name: str | None = None
    otp: str | None = None


class LoginIn(CamelModel):
    email: str | None = None
    password: str | None = None


class ChangePasswordIn(CamelModel):
    current_password: str | None = None
    new_password: str | None = None


class AuthOut(CamelModel):
    """Returned by signup/login alongside the session cookie."""

    user: UserRead
    token: str


class MeOut(CamelModel):
    user: UserRead | None = None


class MessageOut(CamelModel):
    success: bool = True
    message: str | None = None
