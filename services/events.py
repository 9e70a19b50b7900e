# Domain Events for the Influencer Engine
# Engine components publish an event after each state transition; events are
# held until the unit of work commits, then handed to subscribers.

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Type
import logging


@dataclass(frozen=True)
class DomainEvent:
    occurred_at: datetime = field(default_factory=datetime.utcnow, kw_only=True)


@dataclass(frozen=True)
class CollaborationRequested(DomainEvent):
    request_id: str
    campaign_id: str
    influencer_id: str
    brand_id: str
    campaign_name: Optional[str] = None


@dataclass(frozen=True)
class CollaborationResponded(DomainEvent):
    request_id: str
    campaign_id: str
    influencer_id: str
    brand_id: str
    status: str
    message: str = ""


@dataclass(frozen=True)
class CounterOfferMade(DomainEvent):
    request_id: str
    campaign_id: str
    offered_by: str
    recipient_type: str
    recipient_id: str
    terms: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ContentSubmitted(DomainEvent):
    content_id: str
    campaign_id: str
    influencer_id: str
    brand_id: str


@dataclass(frozen=True)
class ContentReviewed(DomainEvent):
    content_id: str
    campaign_id: str
    influencer_id: str
    status: str
    feedback: str = ""


@dataclass(frozen=True)
class CampaignStatusChanged(DomainEvent):
    campaign_id: str
    brand_id: str
    previous_status: str
    new_status: str


class EventBus:
    """
    In-process publish/subscribe.

    publish() only queues; flush() delivers queued events in order and is
    called after the publishing unit of work commits. A failing subscriber is
    logged and skipped so it can never undo or block a committed transition.
    """

    def __init__(self):
        self._subscribers: Dict[Type[DomainEvent], List[Callable]] = defaultdict(list)
        self._pending: List[DomainEvent] = []
        self.delivered: List[DomainEvent] = []

    def subscribe(self, event_type: Type[DomainEvent], handler: Callable[[DomainEvent], Any]):
        self._subscribers[event_type].append(handler)

    def publish(self, event: DomainEvent):
        self._pending.append(event)

    def discard(self):
        """Drop queued events after a rolled-back unit of work."""
        self._pending.clear()

    def flush(self) -> List[DomainEvent]:
        delivered = []
        while self._pending:
            event = self._pending.pop(0)
            for handler in self._subscribers.get(type(event), []):
                try:
                    handler(event)
                except Exception as e:
                    logging.error(f"Event handler {getattr(handler, '__name__', handler)} failed for {type(event).__name__}: {e}")
            delivered.append(event)
        self.delivered.extend(delivered)
        return delivered
