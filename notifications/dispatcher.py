"""
Preference-aware facade over the channel services.

The dispatcher answers "should this user get this message on this channel?"
before handing the request to the matching channel service. A disabled
channel produces a SKIPPED response; nothing is rendered or sent.
"""

import logging
from typing import Optional, Union

from notifications.errors import NotificationConfigurationError
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
from notifications.preferences import NotificationPreferenceService
from notifications.services import EmailService, PushService, SMSService

logger = logging.getLogger("notifications")


class NotificationDispatcher:
    """
    Sends notifications to users, honouring their channel preferences.

    Example:
        dispatcher = NotificationDispatcher(
            preferences=NotificationPreferenceService(),
            email=EmailService(LoggingEmailProvider()),
        )
        await dispatcher.notify_email("user-1", EmailRequest(...))
    """

    def __init__(
        self,
        preferences: NotificationPreferenceService,
        email: Optional[EmailService] = None,
        sms: Optional[SMSService] = None,
        push: Optional[PushService] = None,
    ):
        if preferences is None:
            raise NotificationConfigurationError("NotificationDispatcher requires a preference service")
        self.preferences = preferences
        self.email = email
        self.sms = sms
        self.push = push

    def _skip(
        self,
        user_id: str,
        channel: Channel,
        response_type: type[DeliveryResponse],
    ) -> Optional[DeliveryResponse]:
        if self.preferences.is_channel_enabled(user_id, channel.value):
            return None
        logger.info(f"User {user_id} has disabled {channel.value} notifications")
        return response_type.skipped(f"{channel.value} disabled for user {user_id}")

    @staticmethod
    def _require(service, channel: Channel):
        if service is None:
            raise NotificationConfigurationError(f"No {channel.value} service configured")
        return service

    async def notify_email(
        self,
        user_id: str,
        request: Union[EmailRequest, EmailTemplateRequest],
    ) -> EmailResponse:
        service: EmailService = self._require(self.email, Channel.EMAIL)
        skipped = self._skip(user_id, Channel.EMAIL, EmailResponse)
        if skipped is not None:
            return skipped
        if isinstance(request, EmailTemplateRequest):
            return await service.send_template_email(request)
        return await service.send_email(request)

    async def notify_sms(
        self,
        user_id: str,
        request: Union[SMSRequest, SMSTemplateRequest],
    ) -> SMSResponse:
        service: SMSService = self._require(self.sms, Channel.SMS)
        skipped = self._skip(user_id, Channel.SMS, SMSResponse)
        if skipped is not None:
            return skipped
        if isinstance(request, SMSTemplateRequest):
            return await service.send_template_sms(request)
        return await service.send_sms(request)

    async def notify_push(
        self,
        user_id: str,
        request: Union[PushNotificationRequest, PushTemplateRequest],
    ) -> PushNotificationResponse:
        service: PushService = self._require(self.push, Channel.PUSH)
        skipped = self._skip(user_id, Channel.PUSH, PushNotificationResponse)
        if skipped is not None:
            return skipped
        if isinstance(request, PushTemplateRequest):
            return await service.send_template_push(request)
        return await service.send_push(request)
