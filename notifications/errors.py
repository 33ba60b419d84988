"""
Exceptions raised by the notification facade.

Only configuration problems (a missing required collaborator) escape the
service layer as exceptions. Template and delivery failures are raised
internally and converted into FAILED responses by the channel services.
"""

from typing import Optional


class NotificationError(Exception):
    """Base class for notification facade errors."""


class NotificationConfigurationError(NotificationError):
    """A required collaborator (provider, channel service) is not configured."""


class TemplateNotSupportedError(NotificationError):
    """A templated send was requested but no template engine is configured."""

    def __init__(self, channel: str):
        super().__init__(
            f"Template {channel} not supported. Configure a TemplateEngine."
        )
        self.channel = channel


class TemplateRenderError(NotificationError):
    """
    Raised when a template cannot be found or fails to render.

    Attributes:
        template_id: Identifier of the template that failed
    """

    def __init__(self, message: str, template_id: Optional[str] = None):
        super().__init__(message)
        self.template_id = template_id
