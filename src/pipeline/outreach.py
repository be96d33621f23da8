"""Outreach sequencer: greet ranked candidates one by one for a single job.

Order of operations per candidate:
  1. Skip if already in the dedup ledger (or being greeted by another job)
  2. Send the greeting
  3. Daily quota exhausted → stop the whole list, nothing marked
  4. Otherwise mark as contacted (even on transport errors, to never double-send)
  5. Success → launch a resume retrier
  6. Pause before the next candidate
"""

import asyncio
import logging
from dataclasses import dataclass

from src.core.errors import QuotaExceededError, TransportError
from src.core.schemas import JobRequisition, RankedCandidate
from src.pipeline.ledger import DedupLedger
from src.pipeline.retrier import RetrierPool
from src.pipeline.scorer import sort_by_weight
from src.platforms.base import RecruitingPlatform

logger = logging.getLogger(__name__)


@dataclass
class OutreachReport:
    """Counters for one outreach pass."""

    greeted: int = 0
    skipped_contacted: int = 0
    send_errors: int = 0
    quota_exhausted: bool = False


class OutreachSequencer:
    """Sequential, paced greeting of one job's ranked candidates."""

    def __init__(
        self,
        platform: RecruitingPlatform,
        ledger: DedupLedger,
        retriers: RetrierPool,
        greeting_delay_s: float,
    ) -> None:
        self._platform = platform
        self._ledger = ledger
        self._retriers = retriers
        self._greeting_delay_s = greeting_delay_s

    async def run(
        self,
        job: JobRequisition,
        candidates: list[RankedCandidate],
    ) -> OutreachReport:
        """Greet candidates in descending weight order until done or out of quota."""
        report = OutreachReport()
        ranked = sort_by_weight(candidates)
        logger.info("Job '%s': %d candidates queued for outreach", job.job_name, len(ranked))

        for candidate in ranked:
            geek_id = candidate.geek_id
            if self._ledger.exists(geek_id) or not self._ledger.try_reserve(geek_id):
                logger.debug(
                    "Job '%s': skipping %s, already contacted (job %s)",
                    job.job_name, candidate.profile.name,
                    self._ledger.contacted_by(geek_id) or "in flight",
                )
                report.skipped_contacted += 1
                continue

            try:
                logger.info(
                    "Job '%s': greeting %s (weight %d)",
                    job.job_name, candidate.profile.name, candidate.weight,
                )
                try:
                    await self._platform.send_greeting(job.job_id, candidate.handles)
                except QuotaExceededError:
                    logger.info(
                        "Job '%s': daily outreach quota reached, stopping", job.job_name,
                    )
                    report.quota_exhausted = True
                    break
                except TransportError as e:
                    logger.warning(
                        "Job '%s': greeting %s failed, treating as attempted: %s",
                        job.job_name, candidate.profile.name, e,
                    )
                    self._ledger.mark(geek_id, job.job_id)
                    report.send_errors += 1
                else:
                    self._ledger.mark(geek_id, job.job_id)
                    report.greeted += 1
                    self._retriers.spawn(candidate)
            finally:
                self._ledger.release(geek_id)

            await asyncio.sleep(self._greeting_delay_s)

        logger.info(
            "Job '%s': outreach done: %d greeted, %d skipped, %d send errors%s",
            job.job_name, report.greeted, report.skipped_contacted, report.send_errors,
            ", quota exhausted" if report.quota_exhausted else "",
        )
        return report
