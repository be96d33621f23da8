"""Configuration models and YAML loader for the recruiter outreach engine."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator


class JobEntry(BaseModel):
    """An inline job requisition declared in settings.yaml."""

    job_id: str
    job_name: str = ""

    @field_validator("job_id")
    @classmethod
    def job_id_not_empty(cls, v: str) -> str:
        if not v.strip():
            msg = "job_id must not be empty"
            raise ValueError(msg)
        return v.strip()


class ReferenceConfig(BaseModel):
    """Locations of the flat reference files."""

    jobs_path: str = "config/jobs.txt"
    school_985_path: str = "config/985.txt"
    school_211_path: str = "config/211.txt"
    companies_path: str = "config/company.txt"


class CredentialConfig(BaseModel):
    """Session cookie file and how often to check it for changes."""

    cookie_path: str = "config/cookie.txt"
    reload_interval_s: float = Field(default=2.0, gt=0)


class PacingConfig(BaseModel):
    """Timers for the collection window, outreach and resume retries (seconds)."""

    collection_window_s: float = Field(default=180.0, gt=0)
    poll_interval_s: float = Field(default=5.0, gt=0)
    greeting_delay_s: float = Field(default=5.0, gt=0)
    resume_retry_interval_s: float = Field(default=60.0, gt=0)


class PlatformConfig(BaseModel):
    """Remote recruiting platform connection settings."""

    base_url: str = "https://www.zhipin.com"
    timeout_s: float = Field(default=15.0, gt=0)
    user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_14_0) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/73.0.3683.103 Safari/537.36"
    )
    accept_language: str = "zh-CN,zh;q=0.9,en;q=0.8"


def _default_degree_points() -> dict[str, int]:
    return {"本科": 2, "硕士": 3}


def _default_status_points() -> dict[str, int]:
    return {"暂不考虑": 1, "月内到岗": 2, "离职": 3}


def _default_activity_points() -> dict[str, int]:
    return {"今日活跃": 2, "刚刚活跃": 3}


class RubricConfig(BaseModel):
    """Points awarded by each candidate scoring rule.

    Marker strings are matched against the platform's own descriptions, so
    the defaults use the platform's native wording.
    """

    degree_points: dict[str, int] = Field(default_factory=_default_degree_points)
    school_211_points: int = Field(default=2, ge=0)
    school_985_points: int = Field(default=3, ge=0)
    good_company_points: int = Field(default=3, ge=0)
    experience_points: int = Field(default=2, ge=0)
    min_experience_years: int = Field(default=3, ge=0)
    work_year_suffix: str = "年"
    status_points: dict[str, int] = Field(default_factory=_default_status_points)
    position_match_points: int = Field(default=3, ge=0)
    activity_points: dict[str, int] = Field(default_factory=_default_activity_points)

    @field_validator("degree_points", "status_points", "activity_points")
    @classmethod
    def points_not_negative(cls, v: dict[str, int]) -> dict[str, int]:
        for marker, points in v.items():
            if points < 0:
                msg = f"points for '{marker}' must not be negative"
                raise ValueError(msg)
        return v


class GreetingConfig(BaseModel):
    """Automatic greeting message set up on the account before outreach."""

    enabled: bool = False
    template: str = (
        "你好，我们目前正在大力扩招{job_name}，如果您有兴趣的话，"
        "方便发一份简历给我吗？期待你的加入～"
    )

    @field_validator("template")
    @classmethod
    def template_not_empty(cls, v: str) -> str:
        if not v.strip():
            msg = "greeting template must not be empty"
            raise ValueError(msg)
        return v


class AlertConfig(BaseModel):
    """Operator e-mail alert sent when the session credential is rejected."""

    enabled: bool = False
    host: str = "localhost"
    port: int = Field(default=25, ge=1, le=65535)
    use_tls: bool = False
    username: str = ""
    password_env: str = "OUTREACH_SMTP_PASSWORD"
    sender: str = ""
    recipients: list[str] = Field(default_factory=list)
    subject: str = "Recruiting platform session expired"


class Settings(BaseModel):
    """Top-level settings loaded from YAML."""

    reference: ReferenceConfig = Field(default_factory=ReferenceConfig)
    jobs: list[JobEntry] = Field(default_factory=list)
    credential: CredentialConfig = Field(default_factory=CredentialConfig)
    pacing: PacingConfig = Field(default_factory=PacingConfig)
    platform: PlatformConfig = Field(default_factory=PlatformConfig)
    rubric: RubricConfig = Field(default_factory=RubricConfig)
    greeting: GreetingConfig = Field(default_factory=GreetingConfig)
    alert: AlertConfig = Field(default_factory=AlertConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        return cls.model_validate(raw)
