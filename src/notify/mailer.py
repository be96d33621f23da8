"""E-mail operator alerts over SMTP."""

import asyncio
import logging
import os
import smtplib
import ssl
from email.message import EmailMessage

from src.core.config import AlertConfig
from src.notify.base import LogAlerter, OperatorAlerter

logger = logging.getLogger(__name__)


class EmailAlerter(OperatorAlerter):
    """Sends a plain-text alert e-mail. The SMTP password comes from the environment."""

    def __init__(self, config: AlertConfig) -> None:
        self._config = config

    async def notify_operator(self, reason: str) -> None:
        try:
            await asyncio.to_thread(self._send, reason)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send operator alert e-mail: %s", e)
            return
        logger.info("Operator alert sent to %s", ", ".join(self._config.recipients))

    def build_message(self, reason: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self._config.sender or self._config.username
        msg["To"] = ", ".join(self._config.recipients)
        msg["Subject"] = self._config.subject
        msg.set_content(reason)
        return msg

    def _send(self, reason: str) -> None:
        config = self._config
        password = os.environ.get(config.password_env, "")
        with smtplib.SMTP(config.host, config.port, timeout=30) as server:
            if config.use_tls:
                server.starttls(context=ssl.create_default_context())
            if config.username and password:
                server.login(config.username, password)
            server.send_message(self.build_message(reason))


def build_alerter(config: AlertConfig) -> OperatorAlerter:
    """E-mail alerter when enabled with recipients, otherwise log-only."""
    if config.enabled and config.recipients:
        return EmailAlerter(config)
    if config.enabled:
        logger.warning("Alerts enabled but no recipients configured, logging only")
    return LogAlerter()
