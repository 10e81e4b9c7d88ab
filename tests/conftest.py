"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import date, datetime

import pytest

from nutriai.adapters.api_client import ApiClient, JsonBody
from nutriai.config import Settings
from nutriai.containers import AppContainer
from nutriai.services.fallback import FallbackGenerator
from nutriai.services.notifications import Notice, NoticeLevel, Notifier
from nutriai.services.reminders import ReminderPoller, ReminderService
from nutriai.services.reports import InMemoryReportSink
from nutriai.services.storage import InMemoryKeyValueStore

TODAY = date(2024, 3, 14)
NOW = datetime(2024, 3, 14, 8, 0)


@dataclass
class ApiCall:
    method: str
    path: str
    payload: object | None = None
    demo_token: bool = False
    timeout: float | None = None


@dataclass
class FakeApiClient(ApiClient):
    """Fake backend returning scripted bodies and recording every call.

    A scripted ``Exception`` is raised instead of returned. Unscripted calls
    answer ``{}``.
    """

    responses: dict[str, object] = field(default_factory=dict)
    calls: list[ApiCall] = field(default_factory=list)

    def respond(self, method: str, path: str, response: object) -> None:
        self.responses[f"{method} {path}"] = response

    def paths(self, method: str | None = None) -> list[str]:
        return [
            call.path for call in self.calls if method is None or call.method == method
        ]

    def last(self, method: str, path: str) -> ApiCall:
        return [c for c in self.calls if c.method == method and c.path == path][-1]

    def _answer(self, call: ApiCall) -> JsonBody:
        self.calls.append(call)
        response = self.responses.get(f"{call.method} {call.path}", {})
        if isinstance(response, Exception):
            raise response
        return response  # type: ignore[return-value]

    async def get(
        self,
        path: str,
        params: dict[str, object] | None = None,
        *,
        demo_token: bool = False,
    ) -> JsonBody:
        return self._answer(ApiCall("GET", path, params, demo_token))

    async def post(
        self,
        path: str,
        body: object | None = None,
        *,
        timeout: float | None = None,
        demo_token: bool = False,
    ) -> JsonBody:
        return self._answer(ApiCall("POST", path, body, demo_token, timeout))

    async def put(self, path: str, body: object | None = None) -> JsonBody:
        return self._answer(ApiCall("PUT", path, body))

    async def delete(self, path: str) -> JsonBody:
        return self._answer(ApiCall("DELETE", path))

    async def upload(
        self,
        path: str,
        files: list[tuple[str, tuple[str, bytes, str]]],
        *,
        data: dict[str, str] | None = None,
        demo_token: bool = False,
    ) -> JsonBody:
        payload = {"files": files, "data": data}
        return self._answer(ApiCall("UPLOAD", path, payload, demo_token))


@dataclass
class RecordingNotifier(Notifier):
    """Notifier that keeps every notice."""

    notices: list[Notice] = field(default_factory=list)

    def notify(self, notice: Notice) -> None:
        self.notices.append(notice)

    def messages(self, level: NoticeLevel | None = None) -> list[str]:
        return [
            notice.message
            for notice in self.notices
            if level is None or notice.level is level
        ]


@pytest.fixture
def api() -> FakeApiClient:
    return FakeApiClient()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def reports() -> InMemoryReportSink:
    return InMemoryReportSink()


@pytest.fixture
def fallback() -> FallbackGenerator:
    return FallbackGenerator.seeded(7)


@pytest.fixture
def settings(tmp_path) -> Settings:  # type: ignore[no-untyped-def]
    return Settings(
        api_base_url="http://backend.test",
        storage_backend="memory",
        data_dir=str(tmp_path / "data"),
        reports_dir=str(tmp_path / "reports"),
        fallback_seed=7,
    )


@pytest.fixture
def container(
    settings: Settings,
    api: FakeApiClient,
    notifier: RecordingNotifier,
    store: InMemoryKeyValueStore,
    reports: InMemoryReportSink,
    fallback: FallbackGenerator,
) -> AppContainer:
    reminder_service = ReminderService(
        store=store, notifier=notifier, clock=lambda: NOW
    )
    reminder_poller = ReminderPoller(
        service=reminder_service, interval_seconds=settings.reminder_poll_seconds
    )

    async def close_resources() -> None:
        await reminder_poller.stop()

    return AppContainer(
        settings=settings,
        store=store,
        api_client=api,
        notifier=notifier,
        fallback=fallback,
        reminder_service=reminder_service,
        reminder_poller=reminder_poller,
        report_sink=reports,
        close_resources=close_resources,
    )
