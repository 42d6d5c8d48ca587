"""
Reset-link delivery over SMTP.
"""
from __future__ import annotations

import logging
import os
import smtplib
from email.mime.text import MIMEText

log = logging.getLogger("email")


def _effective_from(email_from: str | None, email_user: str | None, smtp_server: str) -> str:
    # Gmail rewrites or rejects a From that differs from the authenticated user
    if "gmail" in (smtp_server or "").lower() and email_user:
        return email_user
    return email_from or email_user or "noreply@strategy-canvas.local"


def email_configured() -> bool:
    return bool(os.getenv("EMAIL_USER") and os.getenv("EMAIL_PASSWORD"))


def send_text_email(to_email: str, subject: str, body: str) -> None:
    email_user = os.getenv("EMAIL_USER")
    email_password = os.getenv("EMAIL_PASSWORD")
    email_from = os.getenv("EMAIL_FROM")
    smtp_server = os.getenv("SMTP_SERVER", "smtp.gmail.com")
    smtp_port = int(os.getenv("SMTP_PORT", "587"))

    if not (email_user and email_password):
        raise RuntimeError("Email credentials not configured. Set EMAIL_USER and EMAIL_PASSWORD.")

    msg = MIMEText(body)
    msg["Subject"] = subject
    msg["From"] = _effective_from(email_from, email_user, smtp_server)
    msg["To"] = to_email

    with smtplib.SMTP(smtp_server, smtp_port) as server:
        server.starttls()
        server.login(email_user, email_password)
        server.sendmail(msg["From"], [to_email], msg.as_string())


def build_reset_link(token: str, base_url: str | None = None) -> str:
    base = (os.getenv("PUBLIC_BASE_URL") or base_url or "http://localhost:8000").rstrip("/")
    return f"{base}/reset-password?token={token}"


def send_reset_email(to_email: str, reset_link: str) -> None:
    """
    Email the reset link. Without SMTP credentials (local development) the
    link is written to the log instead.
    """
    if not email_configured():
        log.info("Email not configured; reset link for %s: %s", to_email, reset_link)
        return

    send_text_email(
        to_email=to_email,
        subject="Reset your password",
        body=(
            "Use this link to reset your password:\n\n"
            f"{reset_link}\n\n"
            "The link expires in 1 hour. If you did not request this, ignore the email."
        ),
    )
    log.info("Sent reset link to %s", to_email)
