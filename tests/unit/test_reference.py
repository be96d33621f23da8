"""Tests for reference list loading."""

from pathlib import Path

import pytest

from src.core.config import JobEntry, ReferenceConfig
from src.core.reference import load_reference_lists, parse_job_line


def _config(tmp_path: Path) -> ReferenceConfig:
    return ReferenceConfig(
        jobs_path=str(tmp_path / "jobs.txt"),
        school_985_path=str(tmp_path / "985.txt"),
        school_211_path=str(tmp_path / "211.txt"),
        companies_path=str(tmp_path / "company.txt"),
    )


class TestParseJobLine:
    def test_id_and_name(self) -> None:
        job = parse_job_line("abc123 // Backend Engineer")
        assert job is not None
        assert job.job_id == "abc123"
        assert job.job_name == "Backend Engineer"

    def test_id_only(self) -> None:
        job = parse_job_line("abc123")
        assert job is not None
        assert job.job_name == ""

    def test_missing_id(self) -> None:
        assert parse_job_line(" // Backend Engineer") is None


class TestLoadReferenceLists:
    def test_loads_all_files(self, tmp_path: Path) -> None:
        (tmp_path / "jobs.txt").write_text(
            "a1 // Backend Engineer\n\nb2 // 数据分析师\n", encoding="utf-8",
        )
        (tmp_path / "985.txt").write_text("清华大学\n浙江大学\n", encoding="utf-8")
        (tmp_path / "211.txt").write_text("北京邮电大学\n", encoding="utf-8")
        (tmp_path / "company.txt").write_text("  阿里巴巴  \n\n腾讯\n", encoding="utf-8")

        ref = load_reference_lists(_config(tmp_path))

        assert [j.job_id for j in ref.jobs] == ["a1", "b2"]
        assert ref.jobs[1].job_name == "数据分析师"
        assert ref.school_985 == ("清华大学", "浙江大学")
        assert ref.school_211 == ("北京邮电大学",)
        assert ref.good_companies == ("阿里巴巴", "腾讯")

    def test_missing_allow_lists_are_empty(self, tmp_path: Path) -> None:
        (tmp_path / "jobs.txt").write_text("a1 // Backend\n")
        ref = load_reference_lists(_config(tmp_path))
        assert ref.school_985 == ()
        assert ref.good_companies == ()

    def test_inline_jobs_merge_and_override(self, tmp_path: Path) -> None:
        (tmp_path / "jobs.txt").write_text("a1 // Old Name\nb2 // Data\n")
        inline = [JobEntry(job_id="a1", job_name="New Name"), JobEntry(job_id="c3", job_name="QA")]

        ref = load_reference_lists(_config(tmp_path), inline)

        names = {j.job_id: j.job_name for j in ref.jobs}
        assert names == {"a1": "New Name", "b2": "Data", "c3": "QA"}

    def test_inline_only(self, tmp_path: Path) -> None:
        ref = load_reference_lists(_config(tmp_path), [JobEntry(job_id="x", job_name="X")])
        assert len(ref.jobs) == 1

    def test_no_jobs_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="no jobs configured"):
            load_reference_lists(_config(tmp_path))
