"""Tests for mail delivery and background dispatch."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from notekeeper.core.settings import Settings
from notekeeper.services.mail_templates import reset_password_email, verification_code_email
from notekeeper.services.mailer import Notifier


def _settings(**overrides: object) -> Settings:
    values: dict[str, object] = {
        "SECRET_KEY": "test",
        "SMTP_HOST": "smtp.example.com",
        "SMTP_USERNAME": "mailer",
        "SMTP_PASSWORD": "secret",
        "SMTP_ENABLED": "auto",
    }
    values.update(overrides)
    return Settings(**values)


def test_smtp_enabled_modes() -> None:
    assert _settings().smtp_enabled is True
    assert _settings(SMTP_ENABLED="false").smtp_enabled is False
    assert _settings(SMTP_HOST="").smtp_enabled is False
    assert _settings(SMTP_HOST="", SMTP_ENABLED="true").smtp_enabled is True


@pytest.mark.asyncio
async def test_send_logs_instead_of_sending_when_disabled(mocker) -> None:
    smtp_send = mocker.patch("notekeeper.services.mailer.aiosmtplib.send", new_callable=mocker.AsyncMock)
    log = mocker.Mock()
    notifier = Notifier(_settings(SMTP_ENABLED="false"), log=log)

    await notifier.send(" user@example.com ", "Email verification", "<p>hi</p>")

    smtp_send.assert_not_called()
    log.info.assert_called_once()
    assert "user@example.com" in log.info.call_args.args


@pytest.mark.asyncio
async def test_send_uses_smtp_settings(mocker) -> None:
    smtp_send = mocker.patch("notekeeper.services.mailer.aiosmtplib.send", new_callable=mocker.AsyncMock)
    notifier = Notifier(_settings(SMTP_PORT=2525), log=mocker.Mock())

    await notifier.send("user@example.com", "Reset Password", "<p>link</p>")

    smtp_send.assert_awaited_once()
    message = smtp_send.call_args.args[0]
    assert message["To"] == "user@example.com"
    assert message["Subject"] == "Reset Password"
    assert smtp_send.call_args.kwargs["hostname"] == "smtp.example.com"
    assert smtp_send.call_args.kwargs["port"] == 2525


@pytest.mark.asyncio
async def test_dispatch_logs_failures_without_raising(mocker) -> None:
    mocker.patch(
        "notekeeper.services.mailer.aiosmtplib.send",
        new_callable=mocker.AsyncMock,
        side_effect=OSError("connection refused"),
    )
    log = mocker.Mock()
    notifier = Notifier(_settings(), log=log)

    task = notifier.dispatch("user@example.com", "Email verification", "<p>123456</p>")
    assert notifier.pending == 1
    await notifier.drain()

    assert task.done() and task.exception() is None
    log.exception.assert_called_once()
    assert notifier.pending == 0


def test_templates_escape_user_values() -> None:
    now = datetime(2026, 1, 1, tzinfo=UTC)
    subject, html = verification_code_email("<script>", "123456", "http://app", now)
    assert subject == "Email verification"
    assert "<script>" not in html and "123456" in html

    subject, html = reset_password_email("Eve", "eve@example.com", "http://app/r/abc", "http://app", now)
    assert subject == "Reset Password"
    assert 'href="http://app/r/abc"' in html
