# Notification Service for the Influencer Engine
# Records notifications for influencers and brands; delivery (push/email) happens elsewhere

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional, List
from datetime import datetime
from enum import Enum
import logging

from database.config import commit_or_raise
from database.marketplace_models import Notification, RecipientTypeDB
from services.events import (
    EventBus,
    CollaborationRequested,
    CollaborationResponded,
    CounterOfferMade,
    ContentSubmitted,
    ContentReviewed,
    CampaignStatusChanged,
)


class NotificationType(str, Enum):
    COLLABORATION_REQUEST = "collaboration_request"
    COLLABORATION_ACCEPTED = "collaboration_accepted"
    COLLABORATION_DECLINED = "collaboration_declined"
    COUNTER_OFFER = "counter_offer"
    CONTENT_SUBMISSION = "content_submission"
    CONTENT_REVIEW = "content_review"
    CAMPAIGN_COMPLETED = "campaign_completed"
    SYSTEM = "system"


class NotificationService:
    """
    Service for creating and reading notification records.
    Subscribe it to an EventBus with register() so campaign transitions produce notifications.
    """

    def __init__(self, db: Session):
        self.db = db

    def register(self, events: EventBus):
        events.subscribe(CollaborationRequested, self.on_collaboration_requested)
        events.subscribe(CollaborationResponded, self.on_collaboration_responded)
        events.subscribe(CounterOfferMade, self.on_counter_offer)
        events.subscribe(ContentSubmitted, self.on_content_submitted)
        events.subscribe(ContentReviewed, self.on_content_reviewed)
        events.subscribe(CampaignStatusChanged, self.on_campaign_status_changed)

    def create(
        self,
        recipient_type: RecipientTypeDB | str,
        recipient_id: str,
        type: NotificationType | str,
        title: str,
        message: str,
        data: Optional[dict] = None,
    ) -> Notification:
        """
        Create a new notification.

        Args:
            recipient_type: influencer or brand
            recipient_id: The influencer or brand to notify
            type: Notification type (use NotificationType enum)
            title: Short notification title
            message: Full notification message
            data: Optional additional data as JSON

        Returns:
            The created Notification object
        """
        if isinstance(type, NotificationType):
            type = type.value

        notification = Notification(
            recipient_type=RecipientTypeDB(recipient_type),
            recipient_id=recipient_id,
            type=type,
            title=title,
            message=message,
            data=data or {},
        )
        self.db.add(notification)
        self.db.flush()  # Get the ID without committing
        return notification

    def list_for(
        self,
        recipient_type: RecipientTypeDB | str,
        recipient_id: str,
        unread_only: bool = False,
        page: int = 1,
        limit: int = 20,
    ) -> List[Notification]:
        query = self.db.query(Notification).filter(
            Notification.recipient_type == RecipientTypeDB(recipient_type),
            Notification.recipient_id == recipient_id,
        )
        if unread_only:
            query = query.filter(Notification.read == False)

        offset = (page - 1) * limit
        return query.order_by(Notification.created_at.desc()).offset(offset).limit(limit).all()

    def mark_read(self, notification_id: str, recipient_id: str) -> bool:
        """
        Mark a notification as read.

        Returns:
            True if notification was marked read, False if not found
        """
        notification = self.db.query(Notification).filter(
            Notification.id == notification_id,
            Notification.recipient_id == recipient_id
        ).first()

        if notification:
            notification.read = True
            notification.read_at = datetime.utcnow()
            commit_or_raise(self.db, "mark notification read")
            return True
        return False

    def get_unread_count(self, recipient_id: str) -> int:
        """Get unread notification count for a recipient."""
        return self.db.query(Notification).filter(
            Notification.recipient_id == recipient_id,
            Notification.read == False
        ).count()

    # =========================================================================
    # EVENT HANDLERS
    # =========================================================================

    def _record(self, **kwargs):
        try:
            notification = self.create(**kwargs)
            self.db.commit()
            return notification
        except SQLAlchemyError as e:
            self.db.rollback()
            logging.error(f"Failed to record {kwargs.get('type')} notification for {kwargs.get('recipient_id')}: {e}")
            return None

    def on_collaboration_requested(self, event: CollaborationRequested):
        """Notify influencer of a new collaboration request."""
        return self._record(
            recipient_type=RecipientTypeDB.INFLUENCER,
            recipient_id=event.influencer_id,
            type=NotificationType.COLLABORATION_REQUEST,
            title="New Collaboration Request",
            message=f"You have received a new collaboration request for campaign: {event.campaign_name or 'Unnamed Campaign'}",
            data={"request_id": event.request_id, "campaign_id": event.campaign_id},
        )

    def on_collaboration_responded(self, event: CollaborationResponded):
        """Notify brand that an influencer accepted or declined."""
        accepted = event.status == "accepted"
        return self._record(
            recipient_type=RecipientTypeDB.BRAND,
            recipient_id=event.brand_id,
            type=NotificationType.COLLABORATION_ACCEPTED if accepted else NotificationType.COLLABORATION_DECLINED,
            title="Collaboration Request Accepted" if accepted else "Collaboration Request Declined",
            message=f"Your collaboration request has been {event.status} by influencer ID: {event.influencer_id}",
            data={
                "request_id": event.request_id,
                "campaign_id": event.campaign_id,
                "influencer_id": event.influencer_id,
                "message": event.message,
            },
        )

    def on_counter_offer(self, event: CounterOfferMade):
        """Notify the other party of a counter offer."""
        return self._record(
            recipient_type=event.recipient_type,
            recipient_id=event.recipient_id,
            type=NotificationType.COUNTER_OFFER,
            title="New Counter Offer",
            message=f"You have received a counter offer for collaboration request ID: {event.request_id}",
            data={"request_id": event.request_id, "campaign_id": event.campaign_id, "offered_by": event.offered_by},
        )

    def on_content_submitted(self, event: ContentSubmitted):
        """Notify brand of a content submission awaiting review."""
        return self._record(
            recipient_type=RecipientTypeDB.BRAND,
            recipient_id=event.brand_id,
            type=NotificationType.CONTENT_SUBMISSION,
            title="New Content Submission",
            message=f"Influencer ID: {event.influencer_id} has submitted content for your campaign",
            data={"content_id": event.content_id, "campaign_id": event.campaign_id, "influencer_id": event.influencer_id},
        )

    def on_content_reviewed(self, event: ContentReviewed):
        """Notify influencer that their content was approved or rejected."""
        approved = event.status == "approved"
        return self._record(
            recipient_type=RecipientTypeDB.INFLUENCER,
            recipient_id=event.influencer_id,
            type=NotificationType.CONTENT_REVIEW,
            title=f"Content {'Approved' if approved else 'Rejected'}",
            message=f"Your content for campaign ID: {event.campaign_id} has been {'approved' if approved else 'rejected'}",
            data={
                "content_id": event.content_id,
                "campaign_id": event.campaign_id,
                "status": event.status,
                "feedback": event.feedback,
            },
        )

    def on_campaign_status_changed(self, event: CampaignStatusChanged):
        if event.new_status != "completed":
            return None
        return self._record(
            recipient_type=RecipientTypeDB.BRAND,
            recipient_id=event.brand_id,
            type=NotificationType.CAMPAIGN_COMPLETED,
            title="Campaign Completed",
            message="Your campaign has completed. A performance report is being prepared.",
            data={"campaign_id": event.campaign_id},
        )

