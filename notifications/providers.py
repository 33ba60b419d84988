"""
Delivery ports and in-process provider adapters.

Channel services talk to providers only through the EmailProvider,
SMSProvider and PushProvider protocols. Real adapters (SendGrid, Twilio,
Firebase, ...) live outside this package and implement the same methods.

The Logging* adapters here simulate delivery by logging the output. They are
used during development and in tests.

Design decisions:
- All sends are logged for visibility
- Adapters track sent messages for test assertions
- Failures can be simulated with a fail rate
- Ordinary delivery failures are returned as FAILED responses, not raised
"""

import logging
import random
from typing import Optional, Protocol, Union
from uuid import uuid4

from notifications.config import get_settings
from notifications.models import (
    EmailRequest,
    EmailResponse,
    PushNotificationRequest,
    PushNotificationResponse,
    SMSRequest,
    SMSResponse,
)

logger = logging.getLogger("notifications")

SentRequest = Union[EmailRequest, SMSRequest, PushNotificationRequest]
SentResponse = Union[EmailResponse, SMSResponse, PushNotificationResponse]


# =============================================================================
# Ports
# =============================================================================

class EmailProvider(Protocol):
    """Sends an email through the provider's infrastructure."""

    async def send_email(self, request: EmailRequest) -> EmailResponse:
        ...


class SMSProvider(Protocol):
    """Sends an SMS through the provider's infrastructure."""

    async def send_sms(self, request: SMSRequest) -> SMSResponse:
        ...


class PushProvider(Protocol):
    """Sends a push notification through the provider's infrastructure."""

    async def send_push(self, request: PushNotificationRequest) -> PushNotificationResponse:
        ...


# =============================================================================
# Logging adapters
# =============================================================================

class _LoggingProvider:
    """Send history shared by the logging adapters."""

    def __init__(self, fail_rate: float = 0.0):
        """
        Args:
            fail_rate: Probability of send failure (0.0 to 1.0), for testing.
        """
        self.fail_rate = fail_rate
        self.sent_messages: list[tuple[SentRequest, SentResponse]] = []

    def _should_fail(self) -> bool:
        return random.random() < self.fail_rate

    def _record(self, request: SentRequest, response: SentResponse) -> None:
        self.sent_messages.append((request, response))

    def get_sent_count(self) -> int:
        """Get the number of messages sent (for testing)."""
        return len(self.sent_messages)

    def get_successful_sends(self) -> list[SentRequest]:
        """Requests whose send succeeded."""
        return [req for req, resp in self.sent_messages if resp.success]

    def clear_history(self):
        """Clear sent message history (useful between tests)."""
        self.sent_messages.clear()

    def find_message_to(self, recipient: str) -> Optional[SentRequest]:
        """Find the first request sent to a specific recipient."""
        for request, _ in self.sent_messages:
            if self._recipient(request) == recipient:
                return request
        return None

    @staticmethod
    def _recipient(request: SentRequest) -> str:
        if isinstance(request, EmailRequest):
            return request.to
        if isinstance(request, SMSRequest):
            return request.phone_number
        return request.token


class LoggingEmailProvider(_LoggingProvider):
    """Email adapter that logs instead of delivering."""

    async def send_email(self, request: EmailRequest) -> EmailResponse:
        if self._should_fail():
            response = EmailResponse.failed("Simulated email delivery failure")
            logger.error(
                f"[EMAIL FAILED] To: {request.to} | Subject: {request.subject} "
                f"| Error: {response.error_message}"
            )
        else:
            response = EmailResponse.sent(str(uuid4()))
            logger.info(f"[EMAIL] To: {request.to} | Subject: {request.subject}")
            logger.debug(f"[EMAIL BODY] {request.html or request.text or ''}")

        self._record(request, response)
        return response


class LoggingSMSProvider(_LoggingProvider):
    """SMS adapter that logs instead of delivering."""

    def __init__(self, fail_rate: float = 0.0, max_length: Optional[int] = None):
        super().__init__(fail_rate)
        self.max_length = max_length or get_settings().sms_max_length

    async def send_sms(self, request: SMSRequest) -> SMSResponse:
        if len(request.message) > self.max_length:
            logger.warning(
                f"[SMS] Message length ({len(request.message)}) exceeds {self.max_length} chars, "
                "may be split into multiple messages"
            )

        if self._should_fail():
            response = SMSResponse.failed("Simulated SMS delivery failure")
            logger.error(f"[SMS FAILED] To: {request.phone_number} | Error: {response.error_message}")
        else:
            response = SMSResponse.sent(str(uuid4()))
            logger.info(f"[SMS] To: {request.phone_number} | Message: {request.message}")

        self._record(request, response)
        return response


class LoggingPushProvider(_LoggingProvider):
    """Push adapter that logs instead of delivering."""

    async def send_push(self, request: PushNotificationRequest) -> PushNotificationResponse:
        if self._should_fail():
            response = PushNotificationResponse.failed("Simulated push delivery failure")
            logger.error(f"[PUSH FAILED] Token: {request.token} | Error: {response.error_message}")
        else:
            response = PushNotificationResponse.sent(str(uuid4()))
            logger.info(f"[PUSH] Token: {request.token} | Title: {request.title}")

        self._record(request, response)
        return response
