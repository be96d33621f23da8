"""Tests for automatic greeting setup."""

from urllib.parse import parse_qs

import httpx

from src.core.config import GreetingConfig, PlatformConfig
from src.core.credential import CredentialStore
from src.platforms.boss.client import (
    GREETING_JOBS_PATH,
    GREETING_SAVE_PATH,
    GREETING_STATUS_PATH,
    BossClient,
)
from src.platforms.boss.greetings import configure_greetings, render_greeting

JOBS_PAYLOAD = {
    "code": 0,
    "zpData": {"jobs": [
        {"encJobId": "j1", "encGreetingId": "g1", "jobName": "Java", "jobGreeting": ""},
        {"encJobId": "j2", "encGreetingId": "g2", "jobName": "Go", "jobGreeting": "已设置"},
        {"encJobId": "j3", "encGreetingId": "g3", "jobName": "测试", "jobGreeting": ""},
        {"jobName": "no id"},
    ]},
}


class FakeGreetingApi:
    """Routes greeting endpoints. ``reject`` lists job ids whose save fails."""

    def __init__(self, *, enabled: bool = True, reject: tuple[str, ...] = ()) -> None:
        self.enabled = enabled
        self.reject = reject
        self.saved: list[dict[str, str]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == GREETING_STATUS_PATH:
            message = "Success" if self.enabled else "failed"
            return httpx.Response(200, json={"message": message})
        if request.url.path == GREETING_JOBS_PATH:
            return httpx.Response(200, json=JOBS_PAYLOAD)
        if request.url.path == GREETING_SAVE_PATH:
            form = {k: v[0] for k, v in parse_qs(request.content.decode()).items()}
            if form["encJobId"] in self.reject:
                return httpx.Response(500)
            self.saved.append(form)
            return httpx.Response(200, json={"message": "Success"})
        return httpx.Response(404)


async def _configure(api: FakeGreetingApi, config: GreetingConfig) -> int:
    store = CredentialStore("unused")
    store.publish("wt2=abc")
    platform = PlatformConfig()
    async with httpx.AsyncClient(
        transport=httpx.MockTransport(api), base_url=platform.base_url,
    ) as http:
        return await configure_greetings(BossClient(platform, store, http=http), config)


class TestRenderGreeting:
    def test_substitutes_job_name(self) -> None:
        assert render_greeting("正在招{job_name}，欢迎", "Java") == "正在招Java，欢迎"

    def test_no_placeholder(self) -> None:
        assert render_greeting("hello", "Java") == "hello"


class TestConfigureGreetings:
    async def test_only_jobs_without_greeting(self) -> None:
        api = FakeGreetingApi()

        saved = await _configure(api, GreetingConfig(template="招{job_name}"))

        assert saved == 2
        assert [s["encJobId"] for s in api.saved] == ["j1", "j3"]
        assert api.saved[0] == {"encJobId": "j1", "encGreetingId": "g1", "content": "招Java"}

    async def test_failure_does_not_stop_other_jobs(self) -> None:
        api = FakeGreetingApi(reject=("j1",))

        saved = await _configure(api, GreetingConfig(template="招{job_name}"))

        assert saved == 1
        assert [s["encJobId"] for s in api.saved] == ["j3"]

    async def test_continues_when_enable_not_confirmed(self) -> None:
        api = FakeGreetingApi(enabled=False)
        assert await _configure(api, GreetingConfig()) == 2
