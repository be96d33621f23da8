"""Recommended-candidate payload parser: converts raw JSON into CandidateProfile objects.

Payload shape::

    {"code": 0, "zpData": {"geekList": [
        {"geekCard": {...}, "haveChatted": 0, "cooperate": 1, "activeTimeDesc": "..."}
    ]}}

Missing optional fields become "" / 0 (never crash). Entries without a
candidate id are skipped.
"""

import logging
from typing import Any

from src.core.schemas import CandidateProfile, ColleagueContact, ContactHandles, WorkEntry

logger = logging.getLogger(__name__)


def parse_geek_list(payload: dict[str, Any]) -> list[CandidateProfile]:
    """Parse every usable entry of a recommended-candidates payload."""
    zp_data = payload.get("zpData")
    if not isinstance(zp_data, dict):
        if zp_data:
            logger.warning("Unexpected zpData in candidate payload: %r", zp_data)
        return []
    entries = zp_data.get("geekList")
    if not isinstance(entries, list):
        if entries:
            logger.warning("Unexpected geekList in candidate payload: %r", entries)
        return []
    results: list[CandidateProfile] = []
    for entry in entries:
        try:
            profile = parse_geek(entry)
        except (TypeError, ValueError, AttributeError):
            logger.debug("Failed to parse candidate entry, skipping", exc_info=True)
            continue
        if profile is not None:
            results.append(profile)
    return results


def parse_geek(entry: dict[str, Any]) -> CandidateProfile | None:
    """Parse a single geekList entry. Returns None if the candidate id is missing."""
    card = entry.get("geekCard") or {}
    geek_id = _text(card.get("geekId"))
    if not geek_id:
        logger.debug("Candidate entry missing geekId, skipping")
        return None

    edu = card.get("geekEdu") or {}
    works = tuple(
        WorkEntry(company=_text(w.get("company")), position=_text(w.get("positionName")))
        for w in card.get("geekWorks") or []
        if isinstance(w, dict)
    )

    return CandidateProfile(
        geek_id=geek_id,
        name=_text(card.get("geekName")),
        degree=_text(card.get("geekDegree")),
        school=_text(edu.get("school")),
        works=works,
        work_years=_text(card.get("geekWorkYear")),
        expect_position=_text(card.get("expectPositionName")),
        apply_status=_text(card.get("applyStatusDesc")),
        active_time=_text(entry.get("activeTimeDesc")),
        chatted_with_me=_int(entry.get("haveChatted")) == 1,
        colleague_contact=_colleague_contact(entry.get("cooperate")),
        handles=ContactHandles(
            encrypt_geek_id=_text(card.get("encryptGeekId")),
            lid=_text(card.get("lid")),
            security_id=_text(card.get("securityId")),
            expect_id=_int(card.get("expectId")),
        ),
    )


def _colleague_contact(value: Any) -> ColleagueContact:
    code = _int(value)
    try:
        return ColleagueContact(code)
    except ValueError:
        return ColleagueContact.NONE


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
