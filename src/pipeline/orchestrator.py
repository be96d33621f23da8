"""Orchestrator: fans out one job worker per requisition and isolates failures.

Data flow:
  1. One concurrent worker per job, all started together
  2. Worker collects ranked candidates for the collection window
  3. Worker greets them in order, spawning resume retriers
  4. Fatal errors stay job-scoped; an invalid session alerts the operator once
     per rejected credential version

The run completes when every job's outreach pass finishes; spawned resume
retriers keep running in ``context.retriers``.
"""

import asyncio
import json
import logging
from datetime import datetime

from src.core.errors import SessionInvalidError
from src.core.schemas import JobOutcome, JobRequisition
from src.pipeline.context import RunContext
from src.pipeline.worker import JobWorker

logger = logging.getLogger(__name__)


class Orchestrator:
    """Runs every configured job concurrently."""

    def __init__(self, context: RunContext) -> None:
        self._context = context
        self._alerted_versions: set[int] = set()

    async def run(self) -> list[JobOutcome]:
        """Run all jobs. Returns one outcome per job, in configuration order."""
        jobs = self._context.reference.jobs
        logger.info("Starting %d job worker(s)", len(jobs))
        tasks = [
            asyncio.create_task(self._run_job(job), name=f"job-{job.job_id}")
            for job in jobs
        ]
        return list(await asyncio.gather(*tasks))

    async def _run_job(self, job: JobRequisition) -> JobOutcome:
        """Job-worker boundary: every failure becomes a failed outcome."""
        logger.info("Sourcing for job '%s' (%s)", job.job_name, job.job_id)
        worker = JobWorker(self._context, job)
        try:
            return await worker.run()
        except SessionInvalidError as e:
            logger.error("Job '%s' aborted: %s", job.job_name, e)
            await self._alert_session_invalid(e)
            return _failed(worker.outcome, str(e))
        except Exception as e:
            logger.exception("Job '%s' crashed", job.job_name)
            return _failed(worker.outcome, f"{type(e).__name__}: {e}")

    async def _alert_session_invalid(self, error: SessionInvalidError) -> None:
        """Notify the operator once per rejected credential version."""
        if error.credential_version in self._alerted_versions:
            logger.debug(
                "Credential version %d already reported", error.credential_version,
            )
            return
        self._alerted_versions.add(error.credential_version)
        reason = (
            f"Recruiting platform session is no longer valid "
            f"(detected by job {error.job_id}). Please refresh the cookie file."
        )
        try:
            await self._context.alerter.notify_operator(reason)
        except Exception:
            logger.exception("Operator alert for job %s failed", error.job_id)


async def run_all_jobs(context: RunContext) -> list[JobOutcome]:
    """Run every configured job through collection and outreach."""
    return await Orchestrator(context).run()


def export_outcomes_json(outcomes: list[JobOutcome]) -> str:
    """Export job outcomes as a JSON string."""
    data = [json.loads(o.model_dump_json()) for o in outcomes]
    return json.dumps(data, indent=2, ensure_ascii=False)


def _failed(outcome: JobOutcome, error: str) -> JobOutcome:
    return outcome.model_copy(update={
        "status": "failed",
        "error": error,
        "finished_at": datetime.now(),
    })
