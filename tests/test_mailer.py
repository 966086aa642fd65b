from __future__ import annotations

from dataclasses import replace
from email import message_from_string
import smtplib

import pytest

from accounts_api.core import mailer
from accounts_api.core.mailer import MailDeliveryError, send_reset_email


class FakeSMTP:
    instances: list["FakeSMTP"] = []

    def __init__(self, host, port, context=None):
        self.host = host
        self.port = port
        self.messages = []
        self.refuse = False
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def ehlo(self):
        pass

    def starttls(self, context=None):
        pass

    def login(self, user, password):
        if password == "bad":
            raise smtplib.SMTPAuthenticationError(535, b"Authentication failed")

    def sendmail(self, sender, recipients, message):
        self.messages.append((sender, recipients, message))
        return {}

    def noop(self):
        return 250, b"2.0.0 OK"


@pytest.fixture()
def smtp_settings(settings_env, monkeypatch):
    FakeSMTP.instances = []
    monkeypatch.setattr(mailer.smtplib, "SMTP", FakeSMTP)
    monkeypatch.setattr(mailer.smtplib, "SMTP_SSL", FakeSMTP)
    return replace(
        settings_env,
        smtp_host="smtp.example.com",
        smtp_port=587,
        smtp_user="mailer",
        smtp_password="secret",
        smtp_from="no-reply@example.com",
        public_base_url="https://shop.example.com",
    )


def test_missing_smtp_configuration_raises(settings_env):
    with pytest.raises(MailDeliveryError):
        send_reset_email("abc", "a@b.com", settings=settings_env)


def test_reset_mail_contains_link(smtp_settings):
    status = send_reset_email("abc123", "a@b.com", settings=smtp_settings)

    assert status.accepted == ["a@b.com"]
    assert status.response == "250 2.0.0 OK"
    sender, recipients, message = FakeSMTP.instances[-1].messages[0]
    assert sender == "no-reply@example.com"
    assert recipients == ["a@b.com"]
    parsed = message_from_string(message)
    bodies = [part.get_payload(decode=True).decode("utf-8") for part in parsed.walk() if not part.is_multipart()]
    assert parsed["Subject"] == "Reset your password"
    assert all("https://shop.example.com/reset-password?token=abc123" in body for body in bodies)


def test_smtp_failure_is_wrapped(smtp_settings):
    with pytest.raises(MailDeliveryError) as exc:
        send_reset_email("abc123", "a@b.com", settings=replace(smtp_settings, smtp_password="bad"))
    assert "Authentication failed" in exc.value.message


def test_reset_link_uses_configured_page(smtp_settings):
    settings = replace(smtp_settings, password_reset_url="https://app.example.com/account/reset?src=mail")
    send_reset_email("abc123", "a@b.com", settings=settings)

    _, _, message = FakeSMTP.instances[-1].messages[0]
    parsed = message_from_string(message)
    bodies = [part.get_payload(decode=True).decode("utf-8") for part in parsed.walk() if not part.is_multipart()]
    assert all("https://app.example.com/account/reset?src=mail&token=abc123" in body for body in bodies)
