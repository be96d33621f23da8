"""Rule-based ranking of recommended candidates.

Every rule only adds points (RubricConfig values are non-negative), so a
weight never decreases during scoring. Allow-list matching is loose on
purpose: case-insensitive, substring in either direction.
"""

import logging
from collections.abc import Iterable

from src.core.config import RubricConfig
from src.core.reference import ReferenceLists
from src.core.schemas import CandidateProfile, ColleagueContact, RankedCandidate

logger = logging.getLogger(__name__)

_DEFAULT_RUBRIC = RubricConfig()


def is_eligible(candidate: CandidateProfile) -> bool:
    """False once the candidate was chatted with by us or fully handled by a colleague."""
    if candidate.chatted_with_me:
        return False
    return candidate.colleague_contact != ColleagueContact.COMPLETED


def score_candidate(
    candidate: CandidateProfile,
    job_name: str,
    reference: ReferenceLists,
    rubric: RubricConfig = _DEFAULT_RUBRIC,
) -> tuple[bool, int]:
    """Score a single candidate against a job.

    Args:
        candidate: Profile snapshot from one poll.
        job_name: Name of the job being sourced for.
        reference: School and company allow-lists.
        rubric: Points per rule.

    Returns:
        (eligible, weight). Ineligible candidates always get weight 0.
    """
    if not is_eligible(candidate):
        return False, 0

    weight = 0

    weight += rubric.degree_points.get(candidate.degree, 0)

    if matches_allow_list(reference.school_211, candidate.school):
        weight += rubric.school_211_points
    if matches_allow_list(reference.school_985, candidate.school):
        weight += rubric.school_985_points

    if any(matches_allow_list(reference.good_companies, w.company) for w in candidate.works):
        weight += rubric.good_company_points

    years = parse_work_years(candidate.work_years, rubric.work_year_suffix)
    if years is not None and years >= rubric.min_experience_years:
        weight += rubric.experience_points

    weight += _marker_points(candidate.apply_status, rubric.status_points)

    if position_matches(candidate.expect_position, job_name):
        weight += rubric.position_match_points

    weight += _marker_points(candidate.active_time, rubric.activity_points)

    return True, weight


def rank_candidate(
    candidate: CandidateProfile,
    job_name: str,
    reference: ReferenceLists,
    rubric: RubricConfig = _DEFAULT_RUBRIC,
) -> RankedCandidate | None:
    """Score a candidate and wrap it, or return None if ineligible."""
    eligible, weight = score_candidate(candidate, job_name, reference, rubric)
    if not eligible:
        return None
    return RankedCandidate(profile=candidate, weight=weight)


def sort_by_weight(candidates: Iterable[RankedCandidate]) -> list[RankedCandidate]:
    """Sort by weight descending. Stable: equal weights keep arrival order."""
    return sorted(candidates, key=lambda c: c.weight, reverse=True)


def matches_allow_list(allow_list: Iterable[str], value: str) -> bool:
    """True if value and any entry contain one another (case-insensitive).

    Blank entries are ignored. An empty value is contained in every entry.
    """
    needle = value.strip().casefold()
    for entry in allow_list:
        candidate = entry.strip().casefold()
        if not candidate:
            continue
        if needle in candidate or candidate in needle:
            return True
    return False


def position_matches(expect_position: str, job_name: str) -> bool:
    """True if the expected position is contained in the job name (case-folded).

    An empty expected position is contained in any job name.
    """
    return expect_position.strip().casefold() in job_name.casefold()


def parse_work_years(text: str, suffix: str) -> int | None:
    """Parse "5年" style experience text. Returns None when unparsable."""
    value = text.strip()
    if suffix:
        value = value.removesuffix(suffix).strip()
    try:
        return int(value)
    except ValueError:
        return None


def _marker_points(text: str, points: dict[str, int]) -> int:
    return sum(p for marker, p in points.items() if marker and marker in text)
