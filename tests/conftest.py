"""Shared fixtures. Test doubles live in tests/fakes.py."""

from pathlib import Path

import pytest

from src.core.reference import ReferenceLists
from src.core.schemas import JobRequisition

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def reference() -> ReferenceLists:
    return ReferenceLists(
        jobs=(JobRequisition(job_id="job-1", job_name="Backend Engineer"),),
        school_985=("浙江大学", "Tsinghua University"),
        school_211=("浙江大学", "Beijing University of Posts"),
        good_companies=("阿里巴巴", "Tencent"),
    )
