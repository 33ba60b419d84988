"""
Channel services: the public send operations of the facade.

Each service wraps one delivery port. Templated sends render first and only
then build and send the concrete request; the two steps are awaited in
sequence, never overlapped.

Error handling:
- Missing provider at construction -> NotificationConfigurationError (raised)
- Templated send without a template engine -> FAILED response
- Template render failure or non-text render result -> FAILED response,
  logged with the template id
- Provider exception -> FAILED response carrying the error text
"""

import logging
from typing import Any, Awaitable, Callable, Optional

from notifications.config import get_settings
from notifications.errors import (
    NotificationConfigurationError,
    TemplateNotSupportedError,
    TemplateRenderError,
)
from notifications.models import (
    Channel,
    DeliveryResponse,
    EmailRequest,
    EmailResponse,
    EmailTemplateRequest,
    PushNotificationRequest,
    PushNotificationResponse,
    PushTemplateRequest,
    SMSRequest,
    SMSResponse,
    SMSTemplateRequest,
)
from notifications.providers import EmailProvider, PushProvider, SMSProvider
from notifications.templates import TemplateEngine

logger = logging.getLogger("notifications")


class _ChannelService:
    """Failure mapping and template handling shared by all channels."""

    channel: Channel
    response_type: type[DeliveryResponse]

    def __init__(self, provider: Any, template_engine: Optional[TemplateEngine] = None):
        if provider is None:
            raise NotificationConfigurationError(
                f"{type(self).__name__} requires a {self.channel.value} provider"
            )
        self.provider = provider
        self.template_engine = template_engine

    async def _deliver(
        self,
        send: Callable[[Any], Awaitable[DeliveryResponse]],
        request: Any,
        recipient: str,
    ) -> DeliveryResponse:
        try:
            return await send(request)
        except Exception as e:
            logger.error(f"Failed to send {self.channel.value} notification to {recipient}: {e}")
            return self.response_type.failed(str(e))

    async def _render(self, template_id: str, variables: dict[str, Any]) -> str:
        if self.template_engine is None:
            raise TemplateNotSupportedError(self.channel.value)
        try:
            rendered = await self.template_engine.render(template_id, variables)
        except TemplateRenderError:
            raise
        except Exception as e:
            raise TemplateRenderError(str(e), template_id) from e
        if not isinstance(rendered, str):
            raise TemplateRenderError(
                f"Template {template_id} rendered {type(rendered).__name__}, expected text",
                template_id,
            )
        return rendered

    async def _send_templated(
        self,
        request: Any,
        build: Callable[[str], Any],
        send: Callable[[Any], Awaitable[DeliveryResponse]],
        recipient: str,
    ) -> DeliveryResponse:
        try:
            rendered = await self._render(request.template_id, request.template_variables)
        except TemplateNotSupportedError as e:
            logger.error(str(e))
            return self.response_type.failed(str(e))
        except TemplateRenderError as e:
            logger.error(
                f"Failed to send template {self.channel.value} '{request.template_id}': {e}"
            )
            return self.response_type.failed(str(e))

        return await self._deliver(send, build(rendered), recipient)


class EmailService(_ChannelService):
    """
    Sends email through an EmailProvider.

    Requests without a sender go out from `default_sender`, which falls back
    to the configured NOTIFY_DEFAULT_SENDER.

    Example:
        service = EmailService(LoggingEmailProvider(), Jinja2TemplateEngine())
        await service.send_template_email(EmailTemplateRequest(
            template_id="welcome-email.html",
            template_variables={"name": "Bob"},
            sender="noreply@example.com",
            to="bob@example.com",
            subject="Welcome",
        ))
    """

    channel = Channel.EMAIL
    response_type = EmailResponse

    def __init__(
        self,
        provider: EmailProvider,
        template_engine: Optional[TemplateEngine] = None,
        default_sender: Optional[str] = None,
    ):
        super().__init__(provider, template_engine)
        self.default_sender = default_sender or get_settings().default_sender

    async def send_email(self, request: EmailRequest) -> EmailResponse:
        """Send an email with a literal body."""
        if request.sender is None:
            request = request.model_copy(update={"sender": self.default_sender})
        return await self._deliver(self.provider.send_email, request, request.to)

    async def send_template_email(self, request: EmailTemplateRequest) -> EmailResponse:
        """Render the template into the HTML body, then send."""

        def build(rendered: str) -> EmailRequest:
            return EmailRequest(
                sender=request.sender or self.default_sender,
                to=request.to,
                cc=list(request.cc),
                bcc=list(request.bcc),
                subject=request.subject,
                html=rendered,
            )

        return await self._send_templated(request, build, self.provider.send_email, request.to)


class SMSService(_ChannelService):
    """Sends SMS through an SMSProvider."""

    channel = Channel.SMS
    response_type = SMSResponse

    def __init__(
        self,
        provider: SMSProvider,
        template_engine: Optional[TemplateEngine] = None,
    ):
        super().__init__(provider, template_engine)

    async def send_sms(self, request: SMSRequest) -> SMSResponse:
        return await self._deliver(self.provider.send_sms, request, request.phone_number)

    async def send_template_sms(self, request: SMSTemplateRequest) -> SMSResponse:
        """Render the template into the message, then send."""

        def build(rendered: str) -> SMSRequest:
            return SMSRequest(phone_number=request.phone_number, message=rendered)

        return await self._send_templated(
            request, build, self.provider.send_sms, request.phone_number
        )


class PushService(_ChannelService):
    """Sends push notifications through a PushProvider."""

    channel = Channel.PUSH
    response_type = PushNotificationResponse

    def __init__(
        self,
        provider: PushProvider,
        template_engine: Optional[TemplateEngine] = None,
    ):
        super().__init__(provider, template_engine)

    async def send_push(self, request: PushNotificationRequest) -> PushNotificationResponse:
        return await self._deliver(self.provider.send_push, request, request.token)

    async def send_template_push(self, request: PushTemplateRequest) -> PushNotificationResponse:
        """Render the template into the body, then send."""

        def build(rendered: str) -> PushNotificationRequest:
            return PushNotificationRequest(
                token=request.token,
                title=request.title,
                body=rendered,
                data=dict(request.data),
            )

        return await self._send_templated(request, build, self.provider.send_push, request.token)
