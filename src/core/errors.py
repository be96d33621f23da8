"""Failures reported by the recruiting platform client."""


class PlatformError(Exception):
    """Base class for every classified platform failure."""


class SessionInvalidError(PlatformError):
    """The session credential was rejected; fatal for the job that saw it."""

    def __init__(self, job_id: str = "", credential_version: int = 0) -> None:
        self.job_id = job_id
        self.credential_version = credential_version
        super().__init__(
            f"session credential (version {credential_version}) is no longer valid"
        )


class QuotaExceededError(PlatformError):
    """The account's daily outreach cap has been reached."""


class FriendRelationPendingError(PlatformError):
    """A resume was requested before the candidate replied."""


class TransportError(PlatformError):
    """Network failure, unexpected HTTP status or undecodable payload."""
