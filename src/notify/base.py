"""Operator alert interface."""

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class OperatorAlerter(ABC):
    """Delivers a human-facing alert. Delivery failures are never raised."""

    @abstractmethod
    async def notify_operator(self, reason: str) -> None:
        """Send the alert."""


class LogAlerter(OperatorAlerter):
    """Fallback used when e-mail alerts are disabled: log only."""

    async def notify_operator(self, reason: str) -> None:
        logger.error("OPERATOR ALERT: %s", reason)
