"""Async HTTP client for the BOSS recruiting platform with failure classification.

The web API answers most failures with HTTP 200 and a message in the body,
so classification is done by looking for the platform's fixed messages.
"""

import json
import logging
import time
from types import TracebackType
from typing import Any

import httpx
from pydantic import BaseModel

from src.core.config import PlatformConfig
from src.core.credential import CredentialStore
from src.core.errors import (
    FriendRelationPendingError,
    QuotaExceededError,
    SessionInvalidError,
    TransportError,
)
from src.core.schemas import CandidateProfile, ContactHandles
from src.platforms.base import RecruitingPlatform
from src.platforms.boss.headers import build_headers
from src.platforms.boss.parser import parse_geek_list

logger = logging.getLogger(__name__)

# Platform response messages
SESSION_INVALID_MARKER = "当前登录状态已失效"
QUOTA_EXCEEDED_MARKER = "今日沟通已达上限"
FRIEND_PENDING_MARKER = "好友关系校验失败"
SUCCESS_MARKER = "Success"

# Exchange request types
REQUEST_TYPE_TO_ME = "3"  # candidate sends resume to recruiter
REQUEST_TYPE_TO_GEEK = "4"  # recruiter asks candidate for resume

LIST_RECOMMENDED_PATH = "/wapi/zprelation/interaction/bossGetGeek"
CHAT_START_PATH = "/wapi/zpboss/h5/chat/start"
EXCHANGE_REQUEST_PATH = "/wapi/zpchat/exchange/request"
EXCHANGE_ACCEPT_PATH = "/wapi/zpchat/exchange/accept"
GREETING_STATUS_PATH = "/wapi/zpchat/greeting/updateGreeting"
GREETING_JOBS_PATH = "/wapi/zpchat/greeting/job/get"
GREETING_SAVE_PATH = "/wapi/zpchat/greeting/job/save"


class GreetingJob(BaseModel):
    """A job's automatic greeting setting on the account."""

    enc_job_id: str
    enc_greeting_id: str = ""
    job_name: str = ""
    job_greeting: str = ""


class BossClient(RecruitingPlatform):
    """Async client for the BOSS recruiter web API.

    Reads the credential store on every request so hot-reloaded cookies take
    effect immediately. Usage::

        async with BossClient(settings.platform, store) as client:
            geeks = await client.list_recommended(job_id)
    """

    def __init__(
        self,
        config: PlatformConfig,
        credential: CredentialStore,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._credential = credential
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.timeout_s,
        )

    @property
    def platform_id(self) -> str:
        return "boss"

    async def __aenter__(self) -> "BossClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    # --- Outreach operations ---

    async def list_recommended(self, job_id: str) -> list[CandidateProfile]:
        params = {
            "gender": "0",
            "exchangeResumeWithColleague": "0",
            "switchJobFrequency": "0",
            "activation": "0",
            "recentNotView": "0",
            "school": "0",
            "major": "0",
            "experience": "0",
            "jobid": job_id,
            "degree": "0",
            "salary": "0",
            "intention": "0",
            "refresh": str(int(time.time())),
            "status": "1",
            "cityCode": "",
            "businessId": "0",
            "source": "",
            "districtCode": "0",
            "page": "1",
            "tag": "1",
        }
        version = self._credential.version
        body = await self._send("GET", LIST_RECOMMENDED_PATH, params=params)
        if _has_marker(body, SESSION_INVALID_MARKER):
            raise SessionInvalidError(job_id=job_id, credential_version=version)
        return parse_geek_list(_decode(body))

    async def send_greeting(self, job_id: str, handles: ContactHandles) -> None:
        data = {
            "jid": job_id,
            "gid": handles.encrypt_geek_id,
            "lid": handles.lid,
            "expectId": str(handles.expect_id),
            "securityId": handles.security_id,
        }
        params = {"_": str(int(time.time()))}
        body = await self._send("POST", CHAT_START_PATH, params=params, data=data)
        if _has_marker(body, QUOTA_EXCEEDED_MARKER):
            raise QuotaExceededError(QUOTA_EXCEEDED_MARKER)

    async def request_resume(self, security_id: str) -> None:
        data = {"type": REQUEST_TYPE_TO_GEEK, "securityId": security_id}
        body = await self._send("POST", EXCHANGE_REQUEST_PATH, data=data)
        logger.debug("Resume request response: %s", body)
        if _has_marker(body, FRIEND_PENDING_MARKER):
            raise FriendRelationPendingError(FRIEND_PENDING_MARKER)

    async def accept_resume(self, message_id: str, security_id: str) -> None:
        data = {"mid": message_id, "type": REQUEST_TYPE_TO_ME, "securityId": security_id}
        body = await self._send("POST", EXCHANGE_ACCEPT_PATH, data=data)
        logger.debug("Accept resume response: %s", body)

    # --- Greeting setup ---

    async def enable_auto_greeting(self) -> bool:
        """Switch on the account's automatic greeting. Returns True on success."""
        body = await self._send(
            "POST", GREETING_STATUS_PATH, data={"status": "1", "templateId": ""},
        )
        return _has_marker(body, SUCCESS_MARKER)

    async def list_greeting_jobs(self) -> list[GreetingJob]:
        body = await self._send("GET", GREETING_JOBS_PATH)
        zp_data = _decode(body).get("zpData") or {}
        jobs: list[GreetingJob] = []
        for raw in zp_data.get("jobs") or []:
            enc_job_id = str(raw.get("encJobId") or "")
            if not enc_job_id:
                continue
            jobs.append(GreetingJob(
                enc_job_id=enc_job_id,
                enc_greeting_id=str(raw.get("encGreetingId") or ""),
                job_name=str(raw.get("jobName") or ""),
                job_greeting=str(raw.get("jobGreeting") or ""),
            ))
        return jobs

    async def save_job_greeting(self, job: GreetingJob, content: str) -> bool:
        data = {
            "encJobId": job.enc_job_id,
            "encGreetingId": job.enc_greeting_id,
            "content": content,
        }
        body = await self._send("POST", GREETING_SAVE_PATH, data=data)
        return _has_marker(body, SUCCESS_MARKER)

    # --- Private helpers ---

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        data: dict[str, str] | None = None,
    ) -> str:
        """Send one request and return the body text.

        Raises:
            TransportError: On network failure or a non-2xx status.
        """
        headers = build_headers(self._config, self._credential.current)
        try:
            response = await self._http.request(
                method, path, params=params, data=data, headers=headers,
            )
        except httpx.HTTPError as e:
            msg = f"{method} {path} failed: {e}"
            raise TransportError(msg) from e
        if not response.is_success:
            msg = f"{method} {path} returned HTTP {response.status_code}"
            raise TransportError(msg)
        return response.text


def _decode(body: str) -> dict[str, Any]:
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        msg = f"Undecodable platform response: {e}"
        raise TransportError(msg) from e
    if not isinstance(data, dict):
        msg = "Platform response is not a JSON object"
        raise TransportError(msg)
    return data


def _has_marker(body: str, marker: str) -> bool:
    """True if the platform's message carries the marker.

    The message is checked after JSON decoding so escaped non-ASCII text
    still matches; non-JSON bodies are searched as plain text.
    """
    if marker in body:
        return True
    try:
        data = json.loads(body)
    except json.JSONDecodeError:
        return False
    if not isinstance(data, dict):
        return False
    return marker in str(data.get("message") or "")
