"""Shared state for one engine run, owned by the orchestrator."""

from dataclasses import dataclass

from src.core.config import Settings
from src.core.reference import ReferenceLists
from src.notify.base import OperatorAlerter
from src.pipeline.ledger import DedupLedger
from src.pipeline.retrier import RetrierPool
from src.platforms.base import RecruitingPlatform


@dataclass
class RunContext:
    """Everything a job worker needs, passed by reference instead of globals."""

    settings: Settings
    reference: ReferenceLists
    platform: RecruitingPlatform
    alerter: OperatorAlerter
    ledger: DedupLedger
    retriers: RetrierPool

    @classmethod
    def create(
        cls,
        settings: Settings,
        reference: ReferenceLists,
        platform: RecruitingPlatform,
        alerter: OperatorAlerter,
    ) -> "RunContext":
        """Build a context with a fresh ledger and retrier pool."""
        return cls(
            settings=settings,
            reference=reference,
            platform=platform,
            alerter=alerter,
            ledger=DedupLedger(),
            retriers=RetrierPool(platform, settings.pacing.resume_retry_interval_s),
        )
