"""
Wiring of the engine components around one database session.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from core.campaigns import CampaignManager
from core.engagement import EngagementAnalyzer
from core.matcher import InfluencerMatcher
from core.negotiation import NegotiationManager
from core.performance import PerformanceTracker, register_report_on_completion
from services.events import EventBus
from services.notification_service import NotificationService


@dataclass
class InfluencerEngine:
    db: Session
    events: EventBus
    matcher: InfluencerMatcher
    analyzer: EngagementAnalyzer
    campaigns: CampaignManager
    negotiation: NegotiationManager
    performance: PerformanceTracker
    notifications: NotificationService


def build_engine(db: Session, text_generator=None, events: Optional[EventBus] = None) -> InfluencerEngine:
    """
    Build every component on the given session.
    Notifications and completion reports are subscribed to the event bus here.
    """
    events = events or EventBus()

    notifications = NotificationService(db)
    notifications.register(events)

    performance = PerformanceTracker(db, text_generator)
    register_report_on_completion(events, performance)

    return InfluencerEngine(
        db=db,
        events=events,
        matcher=InfluencerMatcher(db),
        analyzer=EngagementAnalyzer(db, text_generator),
        campaigns=CampaignManager(db, events),
        negotiation=NegotiationManager(db, events),
        performance=performance,
        notifications=notifications,
    )
