"""Job worker: collect candidates for a fixed window, then run outreach.

Candidates accumulate unbounded and undeduplicated across polls; a later
poll may carry fresher status fields for the same person. Dedup happens
only at outreach time through the ledger.
"""

import asyncio
import logging
from datetime import datetime

from src.core.errors import TransportError
from src.core.schemas import JobOutcome, JobRequisition, RankedCandidate
from src.pipeline.context import RunContext
from src.pipeline.outreach import OutreachSequencer
from src.pipeline.scorer import rank_candidate

logger = logging.getLogger(__name__)


class JobWorker:
    """One worker per job requisition.

    ``outcome`` is updated as the worker progresses so partial counters
    survive a fatal error.
    """

    def __init__(self, context: RunContext, job: JobRequisition) -> None:
        self._context = context
        self._job = job
        self.outcome = JobOutcome(job_id=job.job_id, job_name=job.job_name)

    async def run(self) -> JobOutcome:
        """Collect, then greet. SessionInvalidError propagates to the caller."""
        candidates = await self.collect()

        pacing = self._context.settings.pacing
        sequencer = OutreachSequencer(
            self._context.platform,
            self._context.ledger,
            self._context.retriers,
            pacing.greeting_delay_s,
        )
        report = await sequencer.run(self._job, candidates)

        self.outcome.greeted = report.greeted
        self.outcome.skipped_contacted = report.skipped_contacted
        self.outcome.send_errors = report.send_errors
        self.outcome.quota_exhausted = report.quota_exhausted
        self.outcome.finished_at = datetime.now()
        return self.outcome

    async def collect(self) -> list[RankedCandidate]:
        """Poll on a fixed interval until the collection window elapses."""
        pacing = self._context.settings.pacing
        collected: list[RankedCandidate] = []
        logger.info(
            "Job '%s': collecting for %.0fs (poll every %.0fs)",
            self._job.job_name, pacing.collection_window_s, pacing.poll_interval_s,
        )

        window = asyncio.timeout(pacing.collection_window_s)
        try:
            async with window:
                while True:
                    await asyncio.sleep(pacing.poll_interval_s)
                    batch = await self.poll_once()
                    collected.extend(batch)
                    self.outcome.collected = len(collected)
        except TimeoutError:
            if not window.expired():
                raise

        logger.info(
            "Job '%s': window closed after %d polls, %d candidates collected",
            self._job.job_name, self.outcome.polls, len(collected),
        )
        return collected

    async def poll_once(self) -> list[RankedCandidate]:
        """Fetch one page and keep the eligible candidates, scored.

        Transport errors yield an empty batch; the next tick retries.
        """
        self.outcome.polls += 1
        try:
            profiles = await self._context.platform.list_recommended(self._job.job_id)
        except TransportError as e:
            logger.warning("Job '%s': poll failed: %s", self._job.job_name, e)
            return []

        reference = self._context.reference
        rubric = self._context.settings.rubric
        batch: list[RankedCandidate] = []
        for profile in profiles:
            logger.debug(
                "Candidate %s expects '%s'", profile.name, profile.expect_position,
            )
            ranked = rank_candidate(profile, self._job.job_name, reference, rubric)
            if ranked is None:
                continue
            logger.debug("Candidate %s queued, weight %d", profile.name, ranked.weight)
            batch.append(ranked)
        return batch
