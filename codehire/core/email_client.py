# codehire/core/email_client.py
from __future__ import annotations

"""
Email client for the CodeHire backend.

Responsibilities:
  - Hold the SMTP configuration taken from Settings.
  - Provide send_email(...) plus the verification-code message.
  - Support both TLS (STARTTLS) and SSL connections.

Typical .env configuration (Gmail example with App Password):

    SMTP_HOST=smtp.gmail.com
    SMTP_PORT=465
    SMTP_USERNAME=noreply@codehire.ai
    SMTP_PASSWORD=<app password>
    SMTP_FROM_EMAIL=noreply@codehire.ai
    SMTP_FROM_NAME=CodeHire AI
    SMTP_USE_TLS=false
    SMTP_USE_SSL=true
"""

import logging
import smtplib
from email.message import EmailMessage

from codehire.core.config import Settings

logger = logging.getLogger(__name__)


class EmailClient:
    """
    Thin wrapper over smtplib.

    One instance is built per application in `create_app()`; a new SMTP
    connection is opened for every message.
    """

    def __init__(self, settings: Settings):
        self.host = settings.SMTP_HOST
        self.port = settings.SMTP_PORT
        self.username = settings.SMTP_USERNAME
        self.password = settings.SMTP_PASSWORD
        # Fallback: if FROM_EMAIL is not set, default to username
        self.from_email = settings.SMTP_FROM_EMAIL or settings.SMTP_USERNAME or ""
        self.from_name = settings.SMTP_FROM_NAME
        self.use_tls = settings.SMTP_USE_TLS
        self.use_ssl = settings.SMTP_USE_SSL
        self.otp_ttl_minutes = settings.OTP_TTL_MINUTES

    @property
    def configured(self) -> bool:
        return bool(self.host and self.username and self.password)

    def _create_smtp_client(self) -> smtplib.SMTP:
        """
        Create and return an SMTP client configured for TLS or SSL.

        Priority:
          - If use_ssl is True → use smtplib.SMTP_SSL (e.g., Gmail on 465).
          - Else → use smtplib.SMTP + optional STARTTLS if use_tls is True.
        """
        if self.use_ssl:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=30)

        server = smtplib.SMTP(self.host, self.port, timeout=30)
        if self.use_tls:
            server.starttls()
        return server

    def send_email(
        self,
        to_email: str,
        subject: str,
        text_body: str,
        html_body: str | None = None,
    ) -> None:
        """
        Send an email to a single recipient.

        Raises
        ------
        RuntimeError:
            If required SMTP configuration is missing.
        smtplib.SMTPException / OSError:
            If the underlying SMTP connection or send fails.
        """
        if not self.configured:
            raise RuntimeError(
                "Email is not configured. "
                "Set SMTP_HOST, SMTP_USERNAME and SMTP_PASSWORD in .env."
            )

        msg = EmailMessage()
        msg["From"] = (
            f"{self.from_name} <{self.from_email}>" if self.from_email else self.username
        )
        msg["To"] = to_email
        msg["Subject"] = subject

        # Always add a plain-text part
        msg.set_content(text_body)
        if html_body:
            msg.add_alternative(html_body, subtype="html")

        server = self._create_smtp_client()
        try:
            server.login(self.username, self.password)  # type: ignore[arg-type]
            server.send_message(msg)
        finally:
            try:
                server.quit()
            except smtplib.SMTPException:
                # Connection is being torn down anyway.
                pass

        logger.info("Sent email %r to %s", subject, to_email)

    def send_otp_code(self, to_email: str, code: str) -> None:
        """Deliver a signup verification code."""
        minutes = self.otp_ttl_minutes
        self.send_email(
            to_email=to_email,
            subject="Your CodeHire AI verification code",
            text_body=(
                f"Your CodeHire AI verification code is: {code}. "
                f"It expires in {minutes} minutes."
            ),
            html_body=(
                '<div style="font-family: sans-serif; max-width: 400px;">'
                "<h2>Verification code</h2>"
                "<p>Your verification code is:</p>"
                f'<p style="font-size: 28px; font-weight: bold; letter-spacing: 4px;">{code}</p>'
                f"<p>This code expires in {minutes} minutes.</p>"
                "<p>If you didn't request this, you can ignore this email.</p>"
                "</div>"
            ),
        )
