"""Resume retriers: keep asking a greeted candidate for a resume until they reply.

There is no retry cap and no deadline. A retrier lives until the candidate's
friend relation is established, some other platform response arrives, or
the process cancels it.
"""

import asyncio
import logging

from src.core.errors import FriendRelationPendingError, PlatformError, TransportError
from src.core.schemas import RankedCandidate
from src.platforms.base import RecruitingPlatform

logger = logging.getLogger(__name__)


class ResumeRetrier:
    """Polls ``request_resume`` on a fixed interval for one candidate."""

    def __init__(
        self,
        platform: RecruitingPlatform,
        candidate: RankedCandidate,
        interval_s: float,
    ) -> None:
        self._platform = platform
        self._candidate = candidate
        self._interval_s = interval_s
        self.attempts = 0

    async def run(self) -> int:
        """Retry until a response other than FriendRelationPending arrives.

        Transport errors carry no platform response and are retried on the
        next tick.

        Returns:
            Number of attempts made.
        """
        name = self._candidate.profile.name
        security_id = self._candidate.handles.security_id
        while True:
            await asyncio.sleep(self._interval_s)
            self.attempts += 1
            try:
                await self._platform.request_resume(security_id)
            except FriendRelationPendingError:
                logger.debug(
                    "Resume request for %s pending friend relation (attempt %d)",
                    name, self.attempts,
                )
                continue
            except TransportError as e:
                logger.warning(
                    "Resume request for %s failed (attempt %d): %s",
                    name, self.attempts, e,
                )
                continue
            except PlatformError as e:
                logger.info("Resume request for %s ended with %s", name, e)
                return self.attempts
            logger.info("Resume requested from %s after %d attempt(s)", name, self.attempts)
            return self.attempts


class RetrierPool:
    """Owns the background retrier tasks so they are not garbage collected.

    Tasks are unsupervised: nothing waits on them unless ``join`` is called.
    """

    def __init__(self, platform: RecruitingPlatform, interval_s: float) -> None:
        self._platform = platform
        self._interval_s = interval_s
        self._tasks: set[asyncio.Task[int]] = set()
        self.resolved = 0

    def spawn(self, candidate: RankedCandidate) -> asyncio.Task[int]:
        retrier = ResumeRetrier(self._platform, candidate, self._interval_s)
        task = asyncio.create_task(
            retrier.run(), name=f"resume-retrier-{candidate.geek_id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def join(self) -> None:
        """Wait until every spawned retrier (including later spawns) finishes."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def cancel_all(self) -> int:
        """Cancel outstanding retriers. Returns how many were cancelled."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        if tasks:
            logger.info("Cancelled %d pending resume retrier(s)", len(tasks))
        return len(tasks)

    def _on_done(self, task: asyncio.Task[int]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Resume retrier %s crashed: %r", task.get_name(), exc)
            return
        self.resolved += 1
