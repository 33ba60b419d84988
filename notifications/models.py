"""
Domain models for the notification facade.

These models are the contract between callers, the channel services and the
provider adapters that actually deliver messages.

Design decisions:
- Using Pydantic for validation and serialization
- One request model per channel, plus a template variant that carries a
  template id and variables instead of a literal body
- All three channels answer with the same response shape so callers can
  treat email, SMS and push uniformly
- Preferences fail open: anything not explicitly disabled is enabled
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Enums
# =============================================================================

class Channel(str, Enum):
    """Notification delivery channels with a dedicated preference toggle."""
    EMAIL = "email"
    SMS = "sms"
    PUSH = "push"


class DeliveryStatus(str, Enum):
    """Outcome of a single send attempt."""
    SENT = "SENT"           # Accepted by the provider
    FAILED = "FAILED"       # Rendering or delivery failed
    SKIPPED = "SKIPPED"     # Channel disabled by the user's preferences


# =============================================================================
# Email
# =============================================================================

class EmailAttachment(BaseModel):
    """A file attached to an outgoing email."""
    filename: str = Field(..., min_length=1, description="Attachment file name")
    content: bytes = Field(..., description="Raw attachment content")
    content_type: str = Field(
        default="application/octet-stream",
        description="MIME type of the attachment"
    )


class _EmailEnvelope(BaseModel):
    """Addressing fields shared by literal and templated email requests."""
    sender: Optional[str] = Field(
        default=None,
        alias="from",
        description="Sender email address; the service default applies when omitted"
    )
    to: str = Field(..., description="Primary recipient email address")
    cc: list[str] = Field(default_factory=list, description="CC recipients")
    bcc: list[str] = Field(default_factory=list, description="BCC recipients")
    subject: str = Field(..., description="Subject line")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("sender", "to", "subject")
    @classmethod
    def _not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    def add_cc(self, address: str) -> None:
        """Add a CC recipient."""
        self.cc.append(address)

    def add_bcc(self, address: str) -> None:
        """Add a BCC recipient."""
        self.bcc.append(address)


class EmailRequest(_EmailEnvelope):
    """
    Request to send an email with a literal body.

    Either `text`, `html`, or both may be supplied. Providers decide how to
    build the MIME message from them.
    """
    text: Optional[str] = Field(default=None, description="Plain text content")
    html: Optional[str] = Field(default=None, description="HTML content")
    attachments: list[EmailAttachment] = Field(default_factory=list)

    def add_attachment(self, attachment: EmailAttachment) -> None:
        """Attach a single file."""
        self.attachments.append(attachment)


class EmailTemplateRequest(_EmailEnvelope):
    """
    Request to send an email whose HTML body is rendered from a template.

    The rendered output becomes the `html` field of the EmailRequest that is
    handed to the provider.
    """
    template_id: str = Field(..., min_length=1, description="Template identifier")
    template_variables: dict[str, Any] = Field(
        default_factory=dict,
        description="Variables available to the template"
    )


# =============================================================================
# SMS
# =============================================================================

class SMSRequest(BaseModel):
    """Request to send an SMS with a literal message."""
    phone_number: str = Field(..., min_length=1, description="Recipient phone number")
    message: str = Field(..., description="SMS message content")


class SMSTemplateRequest(BaseModel):
    """Request to send an SMS whose message is rendered from a template."""
    phone_number: str = Field(..., min_length=1, description="Recipient phone number")
    template_id: str = Field(..., min_length=1)
    template_variables: dict[str, Any] = Field(default_factory=dict)


# =============================================================================
# Push
# =============================================================================

class PushNotificationRequest(BaseModel):
    """Request to send a push notification to a single device token."""
    token: str = Field(..., min_length=1, description="Device registration token")
    title: str = Field(..., description="Notification title")
    body: str = Field(..., description="Notification body")
    data: dict[str, str] = Field(
        default_factory=dict,
        description="Optional key/value payload delivered to the app"
    )


class PushTemplateRequest(BaseModel):
    """Request to send a push notification whose body is rendered from a template."""
    token: str = Field(..., min_length=1)
    title: str
    template_id: str = Field(..., min_length=1)
    template_variables: dict[str, Any] = Field(default_factory=dict)
    data: dict[str, str] = Field(default_factory=dict)


# =============================================================================
# Responses
# =============================================================================

class DeliveryResponse(BaseModel):
    """
    Result of a send attempt on any channel.

    Providers and services never raise for ordinary delivery failures;
    they return one of these with status FAILED and an error message.
    """
    channel: Channel
    status: DeliveryStatus
    message_id: Optional[str] = Field(default=None, description="Provider's message ID")
    error_message: Optional[str] = Field(default=None, description="Why the send failed or was skipped")
    timestamp: datetime = Field(default_factory=_utcnow)

    @property
    def success(self) -> bool:
        """True if the provider accepted the message."""
        return self.status == DeliveryStatus.SENT

    @classmethod
    def sent(cls, message_id: Optional[str] = None, **kwargs) -> "DeliveryResponse":
        """Provider accepted the message."""
        return cls(status=DeliveryStatus.SENT, message_id=message_id, **kwargs)

    @classmethod
    def failed(cls, error_message: Optional[str] = None, **kwargs) -> "DeliveryResponse":
        """Delivery failed; a missing message becomes "Unknown error"."""
        return cls(
            status=DeliveryStatus.FAILED,
            error_message=error_message or "Unknown error",
            **kwargs,
        )

    @classmethod
    def skipped(cls, reason: str, **kwargs) -> "DeliveryResponse":
        """Nothing was sent because the user disabled the channel."""
        return cls(status=DeliveryStatus.SKIPPED, error_message=reason, **kwargs)


class EmailResponse(DeliveryResponse):
    channel: Channel = Channel.EMAIL


class SMSResponse(DeliveryResponse):
    channel: Channel = Channel.SMS


class PushNotificationResponse(DeliveryResponse):
    channel: Channel = Channel.PUSH


# =============================================================================
# Notification Preferences
# =============================================================================

class NotificationPreference(BaseModel):
    """
    Per-user channel enablement.

    Each named channel has a top-level toggle. `channels` holds explicit
    per-channel overrides, which may also name custom channels (e.g.
    "slack"). Override keys are stored lowercased so that lookups are
    case-insensitive end to end.
    """
    user_id: Optional[str] = Field(default=None, description="Owner of these preferences")
    email_enabled: bool = Field(default=True)
    sms_enabled: bool = Field(default=True)
    push_enabled: bool = Field(default=True)
    channels: dict[str, bool] = Field(
        default_factory=dict,
        description="Channel name to explicit on/off override"
    )

    model_config = ConfigDict(validate_assignment=True)

    @field_validator("channels")
    @classmethod
    def _normalize_channel_keys(cls, value: dict[str, bool]) -> dict[str, bool]:
        normalized: dict[str, bool] = {}
        for name, enabled in value.items():
            key = normalize_channel(name)
            if key in normalized and normalized[key] != enabled:
                raise ValueError(f"Conflicting overrides for channel '{key}'")
            normalized[key] = enabled
        return normalized

    @classmethod
    def default(cls, user_id: Optional[str] = None) -> "NotificationPreference":
        """All channels enabled, no overrides."""
        return cls(user_id=user_id)

    def is_channel_enabled(self, channel: str) -> bool:
        """
        Check if a channel is enabled.

        An override for the channel always wins. Otherwise the top-level
        toggle for email/sms/push applies, and any other channel is enabled.
        """
        key = normalize_channel(channel)
        overrides = {normalize_channel(name): enabled for name, enabled in self.channels.items()}
        if key in overrides:
            return overrides[key]
        if key == Channel.EMAIL.value:
            return self.email_enabled
        if key == Channel.SMS.value:
            return self.sms_enabled
        if key == Channel.PUSH.value:
            return self.push_enabled
        return True

    def enabled_channels(self) -> list[Channel]:
        """Named channels that are currently enabled, in declaration order."""
        return [c for c in Channel if self.is_channel_enabled(c.value)]


def normalize_channel(channel: str) -> str:
    """Canonical form of a channel name used for every lookup."""
    if isinstance(channel, Channel):
        return channel.value
    return channel.strip().lower()
