"""
Shared pytest fixtures for the notification facade tests.

These fixtures provide fresh providers, stores and services for every test.
"""

from pathlib import Path
from typing import Any, Optional

import pytest

from notifications.errors import TemplateRenderError
from notifications.preferences import InMemoryPreferenceStore, NotificationPreferenceService
from notifications.providers import LoggingEmailProvider, LoggingPushProvider, LoggingSMSProvider
from notifications.services import EmailService, PushService, SMSService
from notifications.templates import Jinja2TemplateEngine


class StubTemplateEngine:
    """
    Template engine double that returns a fixed string.

    Records every render call, and appends "render" to a shared event log
    so tests can check ordering against provider sends.
    """

    def __init__(self, rendered: str = "", error: Optional[Exception] = None, events: Optional[list] = None):
        self.rendered = rendered
        self.error = error
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.events = events if events is not None else []

    async def render(self, template_id: str, variables: Optional[dict[str, Any]] = None) -> str:
        self.calls.append((template_id, dict(variables or {})))
        self.events.append("render")
        if self.error is not None:
            raise self.error
        return self.rendered


class ExplodingEmailProvider:
    """Email provider whose transport raises instead of reporting failure."""

    def __init__(self):
        self.calls = 0

    async def send_email(self, request):
        self.calls += 1
        raise ConnectionError("SMTP connection refused")


@pytest.fixture
def data_dir() -> Path:
    """Path to the JSON fixture directory."""
    return Path(__file__).parent.parent / "data"


# =============================================================================
# Preferences
# =============================================================================

@pytest.fixture
def preference_store() -> InMemoryPreferenceStore:
    """Empty store for each test."""
    return InMemoryPreferenceStore()


@pytest.fixture
def seeded_store(data_dir: Path) -> InMemoryPreferenceStore:
    """
    Store seeded from data/notification_preferences.json.

    - user-alice: everything enabled
    - user-bob: SMS disabled, custom "slack" override off
    - user-carol: email toggle on but overridden off
    """
    return InMemoryPreferenceStore.from_json(data_dir / "notification_preferences.json")


@pytest.fixture
def preference_service(preference_store: InMemoryPreferenceStore) -> NotificationPreferenceService:
    return NotificationPreferenceService(preference_store)


# =============================================================================
# Providers and templates
# =============================================================================

@pytest.fixture
def email_provider() -> LoggingEmailProvider:
    return LoggingEmailProvider(fail_rate=0.0)


@pytest.fixture
def sms_provider() -> LoggingSMSProvider:
    return LoggingSMSProvider(fail_rate=0.0, max_length=160)


@pytest.fixture
def push_provider() -> LoggingPushProvider:
    return LoggingPushProvider(fail_rate=0.0)


@pytest.fixture
def template_engine() -> Jinja2TemplateEngine:
    """Jinja2 engine with a few in-memory templates on top of the bundled ones."""
    return Jinja2TemplateEngine(templates={
        "greeting": "Hi {{ name }}",
        "card.html": "<p>{{ name }}</p>",
        "broken": "{% if %}",
    })


@pytest.fixture
def stub_engine() -> StubTemplateEngine:
    return StubTemplateEngine(rendered="Hi Bob")


@pytest.fixture
def failing_engine() -> StubTemplateEngine:
    return StubTemplateEngine(error=TemplateRenderError("Template not found: missing", "missing"))


# =============================================================================
# Services
# =============================================================================

@pytest.fixture
def email_service(email_provider: LoggingEmailProvider, template_engine: Jinja2TemplateEngine) -> EmailService:
    return EmailService(email_provider, template_engine)


@pytest.fixture
def sms_service(sms_provider: LoggingSMSProvider, template_engine: Jinja2TemplateEngine) -> SMSService:
    return SMSService(sms_provider, template_engine)


@pytest.fixture
def push_service(push_provider: LoggingPushProvider, template_engine: Jinja2TemplateEngine) -> PushService:
    return PushService(push_provider, template_engine)


@pytest.fixture
def stub_engine_factory():
    """The StubTemplateEngine class, for tests that need custom doubles."""
    return StubTemplateEngine


@pytest.fixture
def exploding_email_provider() -> ExplodingEmailProvider:
    return ExplodingEmailProvider()
