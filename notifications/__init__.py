"""
Notification facade.

Uniform send operations for email, SMS and push notifications:
- Domain models (requests, responses, preferences)
- Per-user channel preferences with overrides
- Template rendering (Jinja2)
- Channel services over pluggable provider adapters
"""

from notifications.config import NotificationSettings, configure_logging, get_settings
from notifications.dispatcher import NotificationDispatcher
from notifications.errors import (
    NotificationConfigurationError,
    NotificationError,
    TemplateNotSupportedError,
    TemplateRenderError,
)
from notifications.models import (
    Channel,
    DeliveryResponse,
    DeliveryStatus,
    EmailAttachment,
    EmailRequest,
    EmailResponse,
    EmailTemplateRequest,
    NotificationPreference,
    PushNotificationRequest,
    PushNotificationResponse,
    PushTemplateRequest,
    SMSRequest,
    SMSResponse,
    SMSTemplateRequest,
)
from notifications.preferences import (
    InMemoryPreferenceStore,
    NotificationPreferenceService,
    PreferenceStore,
)
from notifications.providers import (
    EmailProvider,
    LoggingEmailProvider,
    LoggingPushProvider,
    LoggingSMSProvider,
    PushProvider,
    SMSProvider,
)
from notifications.services import EmailService, PushService, SMSService
from notifications.templates import Jinja2TemplateEngine, TemplateEngine

__all__ = [
    "NotificationSettings",
    "configure_logging",
    "get_settings",
    "NotificationDispatcher",
    "NotificationConfigurationError",
    "NotificationError",
    "TemplateNotSupportedError",
    "TemplateRenderError",
    "Channel",
    "DeliveryResponse",
    "DeliveryStatus",
    "EmailAttachment",
    "EmailRequest",
    "EmailResponse",
    "EmailTemplateRequest",
    "NotificationPreference",
    "PushNotificationRequest",
    "PushNotificationResponse",
    "PushTemplateRequest",
    "SMSRequest",
    "SMSResponse",
    "SMSTemplateRequest",
    "InMemoryPreferenceStore",
    "NotificationPreferenceService",
    "PreferenceStore",
    "EmailProvider",
    "LoggingEmailProvider",
    "LoggingPushProvider",
    "LoggingSMSProvider",
    "PushProvider",
    "SMSProvider",
    "EmailService",
    "PushService",
    "SMSService",
    "Jinja2TemplateEngine",
    "TemplateEngine",
]
