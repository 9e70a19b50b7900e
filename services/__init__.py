# Services Module for the Influencer Engine
# Side-effect consumers of engine events

from services.events import EventBus, DomainEvent
from services.notification_service import NotificationService, NotificationType

__all__ = [
    'EventBus',
    'DomainEvent',
    'NotificationService',
    'NotificationType',
]
