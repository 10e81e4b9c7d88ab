"""Dependency wiring."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from supabase import create_client

from nutriai.adapters.api_client import ApiClient, HttpxApiClient
from nutriai.adapters.file_store import JsonFileKeyValueStore
from nutriai.adapters.supabase_store import SupabaseKeyValueStore
from nutriai.config import Settings, parse_storage_backend
from nutriai.services.fallback import FallbackGenerator
from nutriai.services.notifications import LoggingNotifier, Notifier
from nutriai.services.reminders import ReminderPoller, ReminderService
from nutriai.services.reports import DirectoryReportSink, ReportSink
from nutriai.services.screens.health_analysis import HealthAnalysisController
from nutriai.services.storage import InMemoryKeyValueStore, KeyValueStore


@dataclass
class AppContainer:
    settings: Settings
    store: KeyValueStore
    api_client: ApiClient
    notifier: Notifier
    fallback: FallbackGenerator
    reminder_service: ReminderService
    reminder_poller: ReminderPoller
    report_sink: ReportSink
    close_resources: Callable[[], Awaitable[None]]

    def health_analysis(self) -> HealthAnalysisController:
        """Health analysis screen with configured autosave and request timings."""
        return HealthAnalysisController(
            api=self.api_client,
            notifier=self.notifier,
            autosave_delay=self.settings.autosave_debounce_seconds,
            food_timeout=self.settings.food_recommendations_timeout_seconds,
        )


def build_store(settings: Settings) -> KeyValueStore:
    """Create the key-value store selected by ``storage_backend``."""
    backend = parse_storage_backend(settings.storage_backend)
    if backend == "memory":
        return InMemoryKeyValueStore()
    if backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_KEY are required")
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseKeyValueStore(client=client, table=settings.supabase_table)
    return JsonFileKeyValueStore(Path(settings.data_dir) / "store.json")


def build_container(settings: Settings | None = None) -> AppContainer:
    """Build the application container with concrete implementations."""
    resolved_settings = settings or Settings()
    store = build_store(resolved_settings)
    api_client = HttpxApiClient.create(
        base_url=resolved_settings.api_base_url,
        store=store,
        demo_token_value=resolved_settings.demo_token,
        timeout=resolved_settings.request_timeout_seconds,
    )
    notifier = LoggingNotifier()
    reminder_service = ReminderService(store=store, notifier=notifier)
    reminder_poller = ReminderPoller(
        service=reminder_service,
        interval_seconds=resolved_settings.reminder_poll_seconds,
    )

    async def close_resources() -> None:
        await reminder_poller.stop()
        await api_client.close()

    return AppContainer(
        settings=resolved_settings,
        store=store,
        api_client=api_client,
        notifier=notifier,
        fallback=FallbackGenerator.seeded(resolved_settings.fallback_seed),
        reminder_service=reminder_service,
        reminder_poller=reminder_poller,
        report_sink=DirectoryReportSink(Path(resolved_settings.reports_dir)),
        close_resources=close_resources,
    )
