"""Session credential store with file-change hot reload.

The cookie file may hold either a raw ``Cookie`` header value or a JSON
array of browser cookies (as written by scripts/extract_cookies.py).
Readers only ever see the latest published value.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class CredentialStore:
    """Latest published session credential plus a version counter.

    Usage::

        store = CredentialStore("config/cookie.txt")
        store.load()
        watcher = asyncio.create_task(store.watch(2.0))
        headers["cookie"] = store.current
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._value = ""
        self._version = 0
        self._mtime_ns: int | None = None

    @property
    def current(self) -> str:
        return self._value

    @property
    def version(self) -> int:
        """Incremented each time a new credential is published."""
        return self._version

    def publish(self, value: str) -> None:
        """Replace the credential. Identical values do not bump the version."""
        value = value.strip()
        if value == self._value:
            return
        self._value = value
        self._version += 1
        logger.info("Session credential updated (version %d)", self._version)

    def load(self) -> bool:
        """Read the cookie file and publish its content.

        Returns True if the file was read. On failure the previous value is kept.
        """
        try:
            self._mtime_ns = self._path.stat().st_mtime_ns
            text = self._path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning("Failed to read credential file %s: %s", self._path, e)
            return False
        self.publish(parse_cookie_text(text))
        return True

    def changed_on_disk(self) -> bool:
        try:
            mtime_ns = self._path.stat().st_mtime_ns
        except OSError:
            return False
        return mtime_ns != self._mtime_ns

    async def watch(self, interval_s: float) -> None:
        """Reload the credential whenever the file's modification time changes.

        Runs until cancelled.
        """
        logger.debug("Watching %s for credential changes", self._path)
        while True:
            await asyncio.sleep(interval_s)
            if self.changed_on_disk():
                logger.info("Credential file %s changed, reloading", self._path)
                self.load()


def parse_cookie_text(text: str) -> str:
    """Turn cookie file content into a ``Cookie`` header value."""
    stripped = text.strip()
    if not stripped.startswith("["):
        return stripped
    try:
        data: Any = json.loads(stripped)
    except json.JSONDecodeError:
        return stripped
    pairs = [
        f"{c['name']}={c['value']}"
        for c in data
        if isinstance(c, dict) and "name" in c and "value" in c
    ]
    return "; ".join(pairs)
