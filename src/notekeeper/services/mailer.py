"""Mail delivery for verification codes and reset links.

Without SMTP credentials (or with ``SMTP_ENABLED=false``) messages are logged
instead of sent, so local development needs no mail server.
"""

from __future__ import annotations

import asyncio
import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import aiosmtplib

from notekeeper.core.settings import Settings, settings

logger = logging.getLogger(__name__)


class Notifier:
    """Sends mail and schedules best-effort background deliveries."""

    def __init__(
        self,
        app_settings: Settings | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self.settings = app_settings or settings
        self.logger = log or logger
        self._pending: set[asyncio.Task[None]] = set()

    async def send(self, address: str, subject: str, html: str) -> None:
        """Deliver one message; raises on SMTP failure."""
        recipient = address.strip()
        if not self.settings.smtp_enabled:
            self.logger.info("[DEV] Would send email to %s: %s", recipient, subject)
            return

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.settings.smtp_from_email
        msg["To"] = recipient
        msg.attach(MIMEText(html, "html"))

        await aiosmtplib.send(
            msg,
            hostname=self.settings.smtp_host,
            port=self.settings.smtp_port,
            username=self.settings.smtp_username,
            password=self.settings.smtp_password,
            start_tls=self.settings.smtp_use_tls,
        )
        self.logger.info("Email sent to %s: %s", recipient, subject)

    def dispatch(self, address: str, subject: str, html: str) -> asyncio.Task[None]:
        """Send in the background; failures are logged and never re-raised."""
        task = asyncio.create_task(self._deliver(address, subject, html))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _deliver(self, address: str, subject: str, html: str) -> None:
        try:
            await self.send(address, subject, html)
        except Exception:
            self.logger.exception("Email send failed for %s: %s", address.strip(), subject)

    async def drain(self) -> None:
        """Wait for scheduled deliveries to finish (used on shutdown)."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    @property
    def pending(self) -> int:
        return len(self._pending)


_NOTIFIER: Notifier | None = None


def get_notifier() -> Notifier:
    """Return the process-wide notifier."""
    global _NOTIFIER
    if _NOTIFIER is None:
        _NOTIFIER = Notifier()
    return _NOTIFIER
