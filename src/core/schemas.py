"""Core data models for the recruiter outreach engine."""

from datetime import datetime
from enum import IntEnum

from pydantic import BaseModel, ConfigDict, Field


class JobRequisition(BaseModel):
    """An open position being sourced for."""

    model_config = ConfigDict(frozen=True)

    job_id: str
    job_name: str


class ColleagueContact(IntEnum):
    """Whether a colleague on the same account has already reached the candidate."""

    NONE = 0
    PENDING = 1
    COMPLETED = 2


class WorkEntry(BaseModel):
    """One employment history entry."""

    model_config = ConfigDict(frozen=True)

    company: str = ""
    position: str = ""


class ContactHandles(BaseModel):
    """Opaque platform identifiers needed to greet a candidate and ask for a resume."""

    model_config = ConfigDict(frozen=True)

    encrypt_geek_id: str = ""
    lid: str = ""
    security_id: str = ""
    expect_id: int = 0


class CandidateProfile(BaseModel):
    """Snapshot of a recommended candidate as returned by one poll.

    Frozen. A new instance is built on every poll.
    """

    model_config = ConfigDict(frozen=True)

    geek_id: str
    name: str = ""
    degree: str = ""
    school: str = ""
    works: tuple[WorkEntry, ...] = ()
    work_years: str = ""
    expect_position: str = ""
    apply_status: str = ""
    active_time: str = ""
    chatted_with_me: bool = False
    colleague_contact: ColleagueContact = ColleagueContact.NONE
    handles: ContactHandles = Field(default_factory=ContactHandles)

    @property
    def chatted_with_colleague(self) -> bool:
        return self.colleague_contact != ColleagueContact.NONE


class RankedCandidate(BaseModel):
    """Wrapper that pairs a frozen CandidateProfile with its ranking weight."""

    model_config = ConfigDict(frozen=True)

    profile: CandidateProfile
    weight: int = Field(default=0, ge=0)

    @property
    def geek_id(self) -> str:
        return self.profile.geek_id

    @property
    def handles(self) -> ContactHandles:
        return self.profile.handles


class JobOutcome(BaseModel):
    """Summary of one job worker's collection and outreach cycle."""

    job_id: str
    job_name: str
    status: str = "completed"
    polls: int = 0
    collected: int = 0
    greeted: int = 0
    skipped_contacted: int = 0
    send_errors: int = 0
    quota_exhausted: bool = False
    error: str = ""
    started_at: datetime = Field(default_factory=datetime.now)
    finished_at: datetime | None = None

    @property
    def failed(self) -> bool:
        return self.status == "failed"
