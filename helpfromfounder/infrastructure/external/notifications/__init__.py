"""Notification transports used by the thread lifecycle."""

from helpfromfounder.infrastructure.external.notifications.senders import (
    HttpNotificationSender,
    InProcessNotificationSender,
    NotificationDeliveryError,
)

__all__ = ["HttpNotificationSender", "InProcessNotificationSender", "NotificationDeliveryError"]
