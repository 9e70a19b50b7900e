"""
Campaign lifecycle: campaigns, collaboration requests and content review.

Every operation is one unit of work on the injected session. Domain events are
queued while the work runs and delivered only after the commit succeeds.
"""

from datetime import datetime
from typing import List, Optional
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.errors import (
    InvalidTransitionError,
    MarketplaceError,
    NotFoundError,
    PermissionDenied,
    ValidationError,
)
from core.validation import coerce_model
from database.config import commit_and_publish
from database.marketplace_models import (
    Campaign,
    CampaignApprovedContent,
    CampaignContent,
    CampaignContentStatusDB,
    CampaignInfluencer,
    CampaignStatusDB,
    CollaborationRequest,
    CollaborationStatusDB,
)
from schemas.marketplace import (
    CampaignCreate,
    CampaignStatus,
    CollaborationRequestCreate,
    ContentSubmit,
)
from services.events import (
    EventBus,
    CampaignStatusChanged,
    CollaborationRequested,
    CollaborationResponded,
    ContentReviewed,
    ContentSubmitted,
)

CAMPAIGN_TRANSITIONS = {
    CampaignStatusDB.DRAFT: {CampaignStatusDB.PENDING_APPROVAL, CampaignStatusDB.CANCELLED},
    CampaignStatusDB.PENDING_APPROVAL: {CampaignStatusDB.APPROVED, CampaignStatusDB.DRAFT, CampaignStatusDB.CANCELLED},
    CampaignStatusDB.APPROVED: {CampaignStatusDB.IN_PROGRESS, CampaignStatusDB.CANCELLED},
    CampaignStatusDB.IN_PROGRESS: {CampaignStatusDB.COMPLETED, CampaignStatusDB.CANCELLED},
    CampaignStatusDB.COMPLETED: set(),
    CampaignStatusDB.CANCELLED: set(),
}

TERMINAL_CAMPAIGN_STATUSES = {CampaignStatusDB.COMPLETED, CampaignStatusDB.CANCELLED}
TERMINAL_REQUEST_STATUSES = {CollaborationStatusDB.ACCEPTED, CollaborationStatusDB.DECLINED}
RESPONSE_STATUSES = {"accepted", "declined"}
REVIEW_STATUSES = {"approved", "rejected"}


class CampaignManager:
    def __init__(self, db: Session, events: EventBus):
        self.db = db
        self.events = events

    # =========================================================================
    # CAMPAIGNS
    # =========================================================================

    def create_campaign(self, campaign_data) -> Campaign:
        """
        Create a draft campaign and invite the listed influencers.
        Each invitation runs in its own savepoint; a failed one is logged and skipped.
        """
        data = coerce_model(CampaignCreate, campaign_data, "campaign")

        campaign = Campaign(
            brand_id=data.brand_id,
            name=data.name,
            brief=data.brief,
            categories=data.categories,
            platforms=data.platforms,
            target_audience=data.target_audience.model_dump() if data.target_audience else None,
            collaboration_type=data.collaboration_type.value if data.collaboration_type else None,
            budget=data.budget,
            conversion_value=data.conversion_value,
            goals=data.goals,
            start_date=data.start_date,
            end_date=data.end_date,
            status=CampaignStatusDB.DRAFT,
        )
        self.db.add(campaign)
        self.db.flush()

        for influencer_id in data.influencers:
            invite = CollaborationRequestCreate(
                campaign_id=campaign.id,
                influencer_id=influencer_id,
                brand_id=data.brand_id,
                campaign_name=data.name,
                message=data.invite_message,
                compensation=data.compensation,
                requirements=data.requirements,
                deadline=data.deadline,
            )
            try:
                with self.db.begin_nested():
                    self._add_request(campaign, invite)
            except (MarketplaceError, SQLAlchemyError) as e:
                logging.error(f"Failed to invite influencer {influencer_id} to campaign {campaign.id}: {e}")

        commit_and_publish(self.db, self.events, "create campaign")
        self.db.refresh(campaign)
        logging.info(f"Created campaign {campaign.id} with {len(campaign.collaboration_requests)} invitations")
        return campaign

    def get_campaign(self, campaign_id: str) -> Campaign:
        campaign = self.db.query(Campaign).filter(Campaign.id == campaign_id).first()
        if not campaign:
            raise NotFoundError("Campaign", campaign_id)
        return campaign

    def list_campaigns(self, brand_id: Optional[str] = None, status: Optional[str] = None) -> List[Campaign]:
        query = self.db.query(Campaign)
        if brand_id:
            query = query.filter(Campaign.brand_id == brand_id)
        if status:
            query = query.filter(Campaign.status == self._campaign_status(status))
        return query.order_by(Campaign.created_at.desc()).all()

    def update_campaign_status(self, campaign_id: str, status) -> Campaign:
        campaign = self.get_campaign(campaign_id)
        new_status = self._campaign_status(status)
        previous = campaign.status

        if new_status not in CAMPAIGN_TRANSITIONS[previous]:
            raise InvalidTransitionError("campaign", previous.value, new_status.value)

        campaign.status = new_status
        now = datetime.utcnow()
        if new_status == CampaignStatusDB.IN_PROGRESS:
            campaign.started_at = now
        elif new_status == CampaignStatusDB.COMPLETED:
            campaign.completed_at = now

        self.events.publish(CampaignStatusChanged(
            campaign_id=campaign.id,
            brand_id=campaign.brand_id,
            previous_status=previous.value,
            new_status=new_status.value,
        ))
        commit_and_publish(self.db, self.events, "update campaign status")
        logging.info(f"Campaign {campaign_id} moved from {previous.value} to {new_status.value}")
        return campaign

    @staticmethod
    def _ensure_open(campaign: Campaign, action: str):
        if campaign.status in TERMINAL_CAMPAIGN_STATUSES:
            raise InvalidTransitionError("campaign", campaign.status.value, action)

    @staticmethod
    def _campaign_status(status) -> CampaignStatusDB:
        value = status.value if isinstance(status, CampaignStatus) else status
        try:
            return CampaignStatusDB(value)
        except ValueError:
            raise ValidationError(f"Invalid campaign status: {value}")

    # =========================================================================
    # COLLABORATION REQUESTS
    # =========================================================================

    def _add_request(self, campaign: Campaign, data: CollaborationRequestCreate) -> CollaborationRequest:
        request = CollaborationRequest(
            campaign_id=campaign.id,
            influencer_id=data.influencer_id,
            brand_id=data.brand_id,
            status=CollaborationStatusDB.PENDING,
            message=data.message,
            compensation=data.compensation,
            requirements=data.requirements,
            deadline=data.deadline,
        )
        self.db.add(request)
        self.db.flush()

        self.events.publish(CollaborationRequested(
            request_id=request.id,
            campaign_id=campaign.id,
            influencer_id=data.influencer_id,
            brand_id=data.brand_id,
            campaign_name=data.campaign_name or campaign.name,
        ))
        return request

    def create_collaboration_request(self, request_data) -> CollaborationRequest:
        data = coerce_model(CollaborationRequestCreate, request_data, "collaboration request")
        campaign = self.get_campaign(data.campaign_id)
        self._ensure_open(campaign, "invite influencer")

        request = self._add_request(campaign, data)
        commit_and_publish(self.db, self.events, "create collaboration request")
        return request

    def get_collaboration_request(self, request_id: str) -> CollaborationRequest:
        request = self.db.query(CollaborationRequest).filter(CollaborationRequest.id == request_id).first()
        if not request:
            raise NotFoundError("Collaboration request", request_id)
        return request

    def update_collaboration_request_status(self, request_id: str, status: str, message: str = "") -> CollaborationRequest:
        """Influencer accepts or declines. Acceptance links the influencer to the campaign."""
        if status not in RESPONSE_STATUSES:
            raise ValidationError(f"Invalid status: {status}. Must be 'accepted' or 'declined'")

        request = self.get_collaboration_request(request_id)
        if request.status in TERMINAL_REQUEST_STATUSES:
            raise InvalidTransitionError("collaboration request", request.status.value, status)
        self._ensure_open(self.get_campaign(request.campaign_id), f"{status} request")

        request.status = CollaborationStatusDB(status)
        request.response_message = message

        if request.status == CollaborationStatusDB.ACCEPTED:
            self._link_accepted_influencer(request.campaign_id, request.influencer_id)

        self.events.publish(CollaborationResponded(
            request_id=request.id,
            campaign_id=request.campaign_id,
            influencer_id=request.influencer_id,
            brand_id=request.brand_id,
            status=status,
            message=message,
        ))
        commit_and_publish(self.db, self.events, "update collaboration request status")
        return request

    def _link_accepted_influencer(self, campaign_id: str, influencer_id: str):
        if self.is_accepted(campaign_id, influencer_id):
            return
        self.db.add(CampaignInfluencer(campaign_id=campaign_id, influencer_id=influencer_id))

    def is_accepted(self, campaign_id: str, influencer_id: str) -> bool:
        return self.db.query(CampaignInfluencer).filter(
            CampaignInfluencer.campaign_id == campaign_id,
            CampaignInfluencer.influencer_id == influencer_id,
        ).first() is not None

    # =========================================================================
    # CONTENT
    # =========================================================================

    def submit_campaign_content(self, campaign_id: str, influencer_id: str, content_data) -> CampaignContent:
        """Accepted influencers submit content for brand approval."""
        campaign = self.get_campaign(campaign_id)
        self._ensure_open(campaign, "submit content")
        data = coerce_model(ContentSubmit, content_data, "content")

        if not self.is_accepted(campaign_id, influencer_id):
            raise PermissionDenied(f"Influencer {influencer_id} is not part of campaign {campaign_id}")

        content = CampaignContent(
            campaign_id=campaign.id,
            influencer_id=influencer_id,
            content_url=data.content_url,
            content_type=data.content_type,
            caption=data.caption,
            platform=data.platform,
            status=CampaignContentStatusDB.PENDING_APPROVAL,
        )
        self.db.add(content)
        self.db.flush()

        self.events.publish(ContentSubmitted(
            content_id=content.id,
            campaign_id=campaign.id,
            influencer_id=influencer_id,
            brand_id=campaign.brand_id,
        ))
        commit_and_publish(self.db, self.events, "submit campaign content")
        return content

    def get_content(self, content_id: str) -> CampaignContent:
        content = self.db.query(CampaignContent).filter(CampaignContent.id == content_id).first()
        if not content:
            raise NotFoundError("Content", content_id)
        return content

    def list_campaign_content(self, campaign_id: str, status: Optional[str] = None) -> List[CampaignContent]:
        self.get_campaign(campaign_id)
        query = self.db.query(CampaignContent).filter(CampaignContent.campaign_id == campaign_id)
        if status:
            try:
                query = query.filter(CampaignContent.status == CampaignContentStatusDB(status))
            except ValueError:
                raise ValidationError(f"Invalid content status: {status}")
        return query.order_by(CampaignContent.submitted_at).all()

    def review_campaign_content(self, content_id: str, status: str, feedback: str = "") -> CampaignContent:
        """Brand approves or rejects a submission. Approved content counts towards performance."""
        if status not in REVIEW_STATUSES:
            raise ValidationError(f"Invalid status: {status}. Must be 'approved' or 'rejected'")

        content = self.get_content(content_id)
        campaign = self.get_campaign(content.campaign_id)
        self._ensure_open(campaign, f"{status} content")

        content.status = CampaignContentStatusDB(status)
        content.feedback = feedback
        content.reviewed_at = datetime.utcnow()

        existing = self.db.query(CampaignApprovedContent).filter(
            CampaignApprovedContent.campaign_id == content.campaign_id,
            CampaignApprovedContent.content_id == content.id,
        ).first()

        if content.status == CampaignContentStatusDB.APPROVED and not existing:
            self.db.add(CampaignApprovedContent(campaign_id=content.campaign_id, content_id=content.id))
        elif content.status == CampaignContentStatusDB.REJECTED and existing:
            self.db.delete(existing)
            # Cached figures included this content
            campaign.performance = None

        self.events.publish(ContentReviewed(
            content_id=content.id,
            campaign_id=content.campaign_id,
            influencer_id=content.influencer_id,
            status=status,
            feedback=feedback,
        ))
        commit_and_publish(self.db, self.events, "review campaign content")
        return content
