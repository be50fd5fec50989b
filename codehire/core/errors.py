# codehire/core/errors.py
"""
Application error types.

Every error is an HTTPException so routers and services can raise them
directly. `main.create_app()` installs the handler that renders them as:

    {"error": "<summary>", "errors": {"<field>": "<message>"}}

`errors` is only present for field-level failures.
"""

from fastapi import HTTPException, status

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."


class AppError(HTTPException):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = GENERIC_ERROR_MESSAGE

    def __init__(
        self,
        message: str | None = None,
        errors: dict[str, str] | None = None,
    ):
        super().__init__(status_code=self.status_code, detail=message or self.message)
        self.errors = errors


class FieldValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Please fix the errors below"


class InvalidOrExpiredCodeError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid or expired verification code"

    def __init__(self):
        super().__init__(
            errors={"otp": "Invalid or expired code. Request a new one."},
        )


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


class InvalidCredentialsError(UnauthorizedError):
    # Same message for unknown email and wrong password
    message = "Invalid email or password"


class EmailTakenError(AppError):
    status_code = status.HTTP_409_CONFLICT
    message = "An account with this email already exists"

    def __init__(self):
        super().__init__(errors={"email": self.message})


class DependencyFailureError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ServiceUnavailableError(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    message = "Service temporarily unavailable"
