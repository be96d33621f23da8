"""Static reference lists: job requisitions and scoring allow-lists.

File formats (one entry per line, blank lines ignored):
  jobs.txt     : ``<job id> // <job name>``
  985.txt      : school names
  211.txt      : school names
  company.txt  : company names
"""

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from src.core.config import JobEntry, ReferenceConfig
from src.core.schemas import JobRequisition

logger = logging.getLogger(__name__)

JOB_LINE_SEPARATOR = "//"


class ReferenceLists(BaseModel):
    """Allow-lists consulted by the scorer plus the requisitions to source for."""

    model_config = ConfigDict(frozen=True)

    jobs: tuple[JobRequisition, ...] = ()
    school_985: tuple[str, ...] = ()
    school_211: tuple[str, ...] = ()
    good_companies: tuple[str, ...] = ()


def load_reference_lists(
    config: ReferenceConfig,
    inline_jobs: list[JobEntry] | None = None,
) -> ReferenceLists:
    """Load every reference file and merge inline job entries.

    Raises:
        ValueError: If no job requisition could be resolved.
    """
    jobs = _merge_jobs(_read_jobs(config.jobs_path), inline_jobs or [])
    if not jobs:
        msg = f"no jobs configured (checked {config.jobs_path} and settings 'jobs')"
        raise ValueError(msg)

    return ReferenceLists(
        jobs=tuple(jobs),
        school_985=tuple(_read_lines(config.school_985_path)),
        school_211=tuple(_read_lines(config.school_211_path)),
        good_companies=tuple(_read_lines(config.companies_path)),
    )


def parse_job_line(line: str) -> JobRequisition | None:
    """Parse a ``<job id> // <job name>`` line. Returns None for unusable lines."""
    job_id, _, job_name = line.partition(JOB_LINE_SEPARATOR)
    job_id = job_id.strip()
    if not job_id:
        return None
    return JobRequisition(job_id=job_id, job_name=job_name.strip())


def _read_jobs(path: str) -> list[JobRequisition]:
    jobs: list[JobRequisition] = []
    for line in _read_lines(path):
        job = parse_job_line(line)
        if job is None:
            logger.debug("Ignoring job line without an id: %r", line)
            continue
        jobs.append(job)
    return jobs


def _merge_jobs(
    from_file: list[JobRequisition],
    inline: list[JobEntry],
) -> list[JobRequisition]:
    """File entries first, inline entries override by job id."""
    merged: dict[str, JobRequisition] = {job.job_id: job for job in from_file}
    for entry in inline:
        merged[entry.job_id] = JobRequisition(job_id=entry.job_id, job_name=entry.job_name)
    return list(merged.values())


def _read_lines(path: str) -> list[str]:
    """Read non-blank stripped lines. Missing or unreadable file → empty list."""
    file_path = Path(path)
    if not file_path.exists():
        logger.warning("Reference file not found: %s", path)
        return []
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning("Failed to read reference file %s: %s", path, e)
        return []
    return [line.strip() for line in text.splitlines() if line.strip()]
