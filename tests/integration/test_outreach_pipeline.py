"""Integration test: full orchestration with a fake platform (no network)."""

import json

import pytest

from fakes import FakePlatform, RecordingAlerter, fast_settings, make_profile

from src.core.errors import FriendRelationPendingError, QuotaExceededError, SessionInvalidError
from src.core.reference import ReferenceLists
from src.core.schemas import JobRequisition, RankedCandidate
from src.pipeline.context import RunContext
from src.pipeline.orchestrator import Orchestrator, export_outcomes_json, run_all_jobs
from src.pipeline.worker import JobWorker

BACKEND = JobRequisition(job_id="job-be", job_name="Backend Engineer")
DATA = JobRequisition(job_id="job-data", job_name="Data Engineer")
MOBILE = JobRequisition(job_id="job-mobile", job_name="iOS Engineer")


def _reference(*jobs: JobRequisition) -> ReferenceLists:
    return ReferenceLists(
        jobs=jobs,
        school_985=("浙江大学",),
        school_211=("浙江大学",),
        good_companies=("阿里巴巴",),
    )


def _context(platform: FakePlatform, *jobs: JobRequisition) -> tuple[RunContext, RecordingAlerter]:
    alerter = RecordingAlerter()
    context = RunContext.create(fast_settings(), _reference(*jobs), platform, alerter)
    return context, alerter


class TestFullPipeline:
    """End-to-end: poll → score → rank → greet → resume retry."""

    async def test_jobs_run_in_parallel_and_complete(self) -> None:
        platform = FakePlatform(pages={
            "job-be": [make_profile("be1", expect_position="backend"), make_profile("be2")],
            "job-data": [make_profile("d1", school="浙江大学")],
        })
        context, alerter = _context(platform, BACKEND, DATA)

        outcomes = await run_all_jobs(context)
        await context.retriers.join()

        assert [o.job_id for o in outcomes] == ["job-be", "job-data"]
        assert all(o.status == "completed" for o in outcomes)
        assert outcomes[0].greeted == 2
        assert outcomes[1].greeted == 1
        assert sorted(g for _, g in platform.greeted) == ["be1", "be2", "d1"]
        assert len(context.ledger) == 3
        assert alerter.reasons == []
        assert sorted(platform.resume_calls) == ["sec-be1", "sec-be2", "sec-d1"]

    async def test_candidate_shared_by_two_jobs_greeted_once(self) -> None:
        shared = make_profile("shared", degree="硕士")
        platform = FakePlatform(pages={"job-be": [shared], "job-data": [shared]})
        context, _ = _context(platform, BACKEND, DATA)

        outcomes = await run_all_jobs(context)
        await context.retriers.cancel_all()

        assert [g for _, g in platform.greeted].count("shared") == 1
        assert sum(o.greeted for o in outcomes) == 1

    async def test_quota_stops_only_that_job(self) -> None:
        platform = FakePlatform(
            pages={
                "job-be": [make_profile("a", degree="硕士"), make_profile("b")],
                "job-data": [make_profile("c")],
            },
            greeting_errors={"a": QuotaExceededError()},
        )
        context, _ = _context(platform, BACKEND, DATA)

        outcomes = await run_all_jobs(context)
        await context.retriers.cancel_all()

        be, data = outcomes
        assert be.quota_exhausted is True
        assert be.greeted == 0
        assert ("job-be", "b") not in platform.greeting_calls
        assert data.greeted == 1
        assert context.ledger.exists("a") is False

    async def test_retriers_outlive_outreach(self) -> None:
        platform = FakePlatform(
            pages={"job-be": [make_profile("slow")]},
            resume_script={"sec-slow": [FriendRelationPendingError()] * 10 + [None]},
        )
        context, _ = _context(platform, BACKEND)

        await run_all_jobs(context)
        assert context.retriers.pending == 1

        await context.retriers.join()
        assert context.retriers.resolved == 1
        assert len(platform.resume_calls) == 11


class TestFailureIsolation:
    async def test_session_invalid_fails_only_its_job(self) -> None:
        platform = FakePlatform(
            pages={"job-data": [make_profile("d1")]},
            list_errors={"job-be": SessionInvalidError("job-be", 1)},
        )
        context, alerter = _context(platform, BACKEND, DATA)

        be, data = await run_all_jobs(context)
        await context.retriers.join()

        assert be.status == "failed"
        assert "no longer valid" in be.error
        assert be.finished_at is not None
        assert data.status == "completed"
        assert data.greeted == 1
        assert len(alerter.reasons) == 1
        assert "job-be" in alerter.reasons[0]

    async def test_one_alert_per_credential_version(self) -> None:
        platform = FakePlatform(list_errors={
            "job-be": SessionInvalidError("job-be", 7),
            "job-data": SessionInvalidError("job-data", 7),
            "job-mobile": SessionInvalidError("job-mobile", 8),
        })
        context, alerter = _context(platform, BACKEND, DATA, MOBILE)

        outcomes = await Orchestrator(context).run()

        assert all(o.failed for o in outcomes)
        assert len(alerter.reasons) == 2

    async def test_failing_alerter_is_job_scoped(self) -> None:
        class BrokenAlerter(RecordingAlerter):
            async def notify_operator(self, reason: str) -> None:
                await super().notify_operator(reason)
                raise RuntimeError("alert backend down")

        platform = FakePlatform(
            pages={"job-data": [make_profile("d1")]},
            list_errors={"job-be": SessionInvalidError("job-be", 1)},
        )
        alerter = BrokenAlerter()
        context = RunContext.create(fast_settings(), _reference(BACKEND, DATA), platform, alerter)

        be, data = await run_all_jobs(context)
        await context.retriers.join()

        assert len(alerter.reasons) == 1
        assert be.status == "failed"
        assert "no longer valid" in be.error
        assert data.status == "completed"
        assert data.greeted == 1

    async def test_unexpected_crash_is_job_scoped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        platform = FakePlatform(pages={"job-data": [make_profile("d1")]})
        context, alerter = _context(platform, BACKEND, DATA)
        original = JobWorker.poll_once

        async def _poll_once(self: JobWorker) -> list[RankedCandidate]:
            if self.outcome.job_id == "job-be":
                raise RuntimeError("boom")
            return await original(self)

        monkeypatch.setattr(JobWorker, "poll_once", _poll_once)

        be, data = await run_all_jobs(context)
        await context.retriers.join()

        assert be.status == "failed"
        assert be.error == "RuntimeError: boom"
        assert data.status == "completed"
        assert data.greeted == 1
        assert alerter.reasons == []


class TestExport:
    async def test_export_outcomes_json(self) -> None:
        platform = FakePlatform(pages={"job-be": [make_profile("be1")]})
        context, _ = _context(platform, BACKEND)

        outcomes = await run_all_jobs(context)
        await context.retriers.join()
        data = json.loads(export_outcomes_json(outcomes))

        assert len(data) == 1
        assert data[0]["job_id"] == "job-be"
        assert data[0]["job_name"] == "Backend Engineer"
        assert data[0]["greeted"] == 1
        assert data[0]["status"] == "completed"

    def test_export_empty(self) -> None:
        assert json.loads(export_outcomes_json([])) == []
