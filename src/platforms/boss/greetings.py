"""Automatic greeting setup: enable it and give every job a greeting message."""

import logging

from src.core.config import GreetingConfig
from src.core.errors import TransportError
from src.platforms.boss.client import BossClient

logger = logging.getLogger(__name__)


def render_greeting(template: str, job_name: str) -> str:
    return template.replace("{job_name}", job_name)


async def configure_greetings(client: BossClient, config: GreetingConfig) -> int:
    """Enable auto-greeting and save a greeting for jobs that have none yet.

    Jobs that already carry a greeting are left untouched. Failures are logged
    per job and do not stop the remaining jobs.

    Returns:
        Number of jobs whose greeting was saved.
    """
    if await client.enable_auto_greeting():
        logger.info("Automatic greeting enabled")
    else:
        logger.warning("Platform did not confirm enabling automatic greeting")

    saved = 0
    for job in await client.list_greeting_jobs():
        if job.job_greeting:
            logger.debug("Job '%s' already has a greeting", job.job_name)
            continue
        content = render_greeting(config.template, job.job_name)
        try:
            ok = await client.save_job_greeting(job, content)
        except TransportError as e:
            logger.warning("Failed to save greeting for '%s': %s", job.job_name, e)
            continue
        if ok:
            saved += 1
            logger.info("Greeting set for job '%s'", job.job_name)
        else:
            logger.warning("Platform rejected greeting for job '%s'", job.job_name)
    return saved
