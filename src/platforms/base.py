"""Abstract base class for recruiting platform clients."""

from abc import ABC, abstractmethod

from src.core.schemas import CandidateProfile, ContactHandles


class RecruitingPlatform(ABC):
    """Remote operations the outreach engine drives.

    Implementations raise the classified errors from ``src.core.errors``.
    """

    @property
    @abstractmethod
    def platform_id(self) -> str:
        """Unique identifier for this platform (e.g. 'boss')."""

    @abstractmethod
    async def list_recommended(self, job_id: str) -> list[CandidateProfile]:
        """Fetch one page of recommended candidates for a job.

        Raises:
            SessionInvalidError: The session credential was rejected.
            TransportError: The request or its payload failed.
        """

    @abstractmethod
    async def send_greeting(self, job_id: str, handles: ContactHandles) -> None:
        """Send the initial greeting to a candidate.

        Raises:
            QuotaExceededError: The daily outreach cap is exhausted.
            TransportError: The request failed.
        """

    @abstractmethod
    async def request_resume(self, security_id: str) -> None:
        """Ask a contacted candidate for their resume.

        Raises:
            FriendRelationPendingError: The candidate has not replied yet.
            TransportError: The request failed.
        """

    @abstractmethod
    async def accept_resume(self, message_id: str, security_id: str) -> None:
        """Accept a resume the candidate offered in a chat message.

        Raises:
            TransportError: The request failed.
        """
