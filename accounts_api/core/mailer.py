"""
Email adapter for the accounts backend.

The default implementation uses SMTP, reading credentials from Settings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
import logging
import smtplib
import ssl
from urllib.parse import urlencode

from .config import Settings, get_settings
from .utils import absolute_url

logger = logging.getLogger(__name__)


class MailDeliveryError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@dataclass
class MailStatus:
    response: str
    accepted: list[str] = field(default_factory=list)


def _reset_bodies(reset_url: str) -> tuple[str, str]:
    html_body = f"""
    <p>Hello!</p>
    <p>We received a request to reset your password.</p>
    <p><a href="{reset_url}" style="background:#0ea5e9;color:#fff;padding:12px 18px;border-radius:8px;text-decoration:none;">Reset password</a></p>
    <p>The link is valid for one hour. If you did not ask for it, ignore this message.</p>
    """
    text_body = f"Use this link to reset your password: {reset_url}"
    return html_body, text_body


def send_email(subject: str, to_email: str, html_body: str, text_body: str | None = None, settings: Settings | None = None) -> MailStatus:
    """
    Send an e-mail with the SMTP credentials from Settings.
    Raises MailDeliveryError when SMTP is not configured or the server rejects the message.
    """
    settings = settings or get_settings()
    if not (
        settings.smtp_host
        and settings.smtp_user
        and settings.smtp_password
        and settings.smtp_from
        and settings.smtp_port
    ):
        logger.warning("SMTP configuration missing; cannot send to %s", to_email)
        raise MailDeliveryError("Mail transport is not configured")
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = settings.smtp_from
    msg["To"] = to_email
    plain = text_body or html_body
    msg.attach(MIMEText(plain, "plain", "utf-8"))
    msg.attach(MIMEText(html_body, "html", "utf-8"))
    port = settings.smtp_port or 465
    try:
        if port == 465:
            context = ssl.create_default_context()
            server = smtplib.SMTP_SSL(settings.smtp_host, port, context=context)
        else:
            server = smtplib.SMTP(settings.smtp_host, port)
        with server:
            if port != 465:
                server.ehlo()
                server.starttls(context=ssl.create_default_context())
            server.login(settings.smtp_user, settings.smtp_password)
            refused = server.sendmail(settings.smtp_from, [to_email], msg.as_string())
            code, reply = server.noop()
    except (smtplib.SMTPException, OSError) as exc:
        logger.warning("Failed to send mail to %s: %s", to_email, exc)
        raise MailDeliveryError(str(exc) or "Can't send mail") from exc
    accepted = [addr for addr in [to_email] if addr not in refused]
    reply_text = reply.decode("utf-8", "replace") if isinstance(reply, bytes) else str(reply)
    return MailStatus(response=f"{code} {reply_text}".strip(), accepted=accepted)


def send_reset_email(token: str, email: str, settings: Settings | None = None) -> MailStatus:
    """
    Deliver a password reset link carrying ``token`` to ``email``.

    The link targets the frontend page configured as PASSWORD_RESET_URL (a path
    under PUBLIC_BASE_URL or an absolute URL); that page posts the token and the
    new password to ``POST /users/password/reset``.
    """
    settings = settings or get_settings()
    page = absolute_url(settings.password_reset_url, settings.public_base_url)
    separator = "&" if "?" in page else "?"
    reset_url = f"{page}{separator}{urlencode({'token': token})}"
    html_body, text_body = _reset_bodies(reset_url)
    return send_email("Reset your password", email, html_body, text_body, settings=settings)
