"""Process-wide record of candidates already contacted.

Write-once per candidate id, no eviction. A separate in-flight reservation
keeps two job sequencers from greeting the same candidate at the same time.
"""

import logging
import threading
from datetime import datetime

logger = logging.getLogger(__name__)


class DedupLedger:
    """Concurrency-safe set of contacted candidate ids.

    Usage::

        ledger = DedupLedger()
        if not ledger.exists(geek_id) and ledger.try_reserve(geek_id):
            try:
                ...  # greet
                ledger.mark(geek_id, job_id)
            finally:
                ledger.release(geek_id)
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._contacted: dict[str, tuple[str, datetime]] = {}
        self._in_flight: set[str] = set()

    def exists(self, geek_id: str) -> bool:
        with self._lock:
            return geek_id in self._contacted

    def mark(self, geek_id: str, job_id: str = "") -> bool:
        """Record the candidate as contacted.

        Returns True on first mark; later marks keep the original record.
        """
        with self._lock:
            if geek_id in self._contacted:
                return False
            self._contacted[geek_id] = (job_id, datetime.now())
        logger.debug("Marked %s as contacted (job %s)", geek_id, job_id)
        return True

    def try_reserve(self, geek_id: str) -> bool:
        """Claim the candidate for a greeting attempt.

        Returns False if already contacted or another attempt holds it.
        """
        with self._lock:
            if geek_id in self._contacted or geek_id in self._in_flight:
                return False
            self._in_flight.add(geek_id)
            return True

    def release(self, geek_id: str) -> None:
        with self._lock:
            self._in_flight.discard(geek_id)

    def contacted_by(self, geek_id: str) -> str | None:
        """Job id that contacted the candidate, or None."""
        with self._lock:
            record = self._contacted.get(geek_id)
        return record[0] if record else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._contacted)
