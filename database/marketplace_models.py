# Campaign Models for the Influencer Engine
# Campaign workflow records: campaigns, collaboration requests, negotiation log,
# submitted content, link tables, performance snapshots, reports and notifications

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Text, JSON, Enum, Boolean, Float, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

# Use the same Base from existing models
from database.models import Base, generate_uuid


# ============================================================================
# ENUMS
# ============================================================================

class CampaignStatusDB(str, enum.Enum):
    DRAFT = "draft"
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class CollaborationStatusDB(str, enum.Enum):
    PENDING = "pending"
    NEGOTIATING = "negotiating"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class CampaignContentStatusDB(str, enum.Enum):
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    REJECTED = "rejected"


class RecipientTypeDB(str, enum.Enum):
    INFLUENCER = "influencer"
    BRAND = "brand"


# ============================================================================
# CAMPAIGN
# ============================================================================

class Campaign(Base):
    """Influencer marketing campaign owned by a brand."""
    __tablename__ = "influencer_campaigns"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    brand_id = Column(String(36), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    brief = Column(Text, nullable=False)

    # Targeting
    categories = Column(JSON, default=list)
    platforms = Column(JSON, default=list)
    target_audience = Column(JSON)  # {"age_range", "gender"}
    collaboration_type = Column(String(50))  # sponsored_post, product_review, ...

    # Economics and goals
    budget = Column(Float, default=0.0)
    conversion_value = Column(Float, default=0.0)
    goals = Column(JSON, default=dict)  # {"reach": 100000, "conversions": 50}

    status = Column(Enum(CampaignStatusDB, values_callable=lambda x: [e.value for e in x], name="campaignstatusdb"), default=CampaignStatusDB.DRAFT, index=True)

    # Last computed snapshot and current report
    performance = Column(JSON)
    report_id = Column(String(36))

    # Timeline
    start_date = Column(DateTime)
    end_date = Column(DateTime)
    started_at = Column(DateTime)
    completed_at = Column(DateTime)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    collaboration_requests = relationship("CollaborationRequest", back_populates="campaign", cascade="all, delete-orphan", order_by="CollaborationRequest.created_at")
    contents = relationship("CampaignContent", back_populates="campaign", cascade="all, delete-orphan", order_by="CampaignContent.submitted_at")
    accepted_links = relationship("CampaignInfluencer", back_populates="campaign", cascade="all, delete-orphan", order_by="CampaignInfluencer.id")
    approved_links = relationship("CampaignApprovedContent", back_populates="campaign", cascade="all, delete-orphan", order_by="CampaignApprovedContent.id")

    @property
    def collaboration_request_ids(self):
        return [r.id for r in self.collaboration_requests]

    @property
    def accepted_influencer_ids(self):
        return [link.influencer_id for link in self.accepted_links]

    @property
    def content_submission_ids(self):
        return [c.id for c in self.contents]

    @property
    def approved_content_ids(self):
        return [link.content_id for link in self.approved_links]


class CampaignInfluencer(Base):
    """Influencer accepted onto a campaign."""
    __tablename__ = "campaign_influencers"
    __table_args__ = (UniqueConstraint("campaign_id", "influencer_id", name="uq_campaign_influencer"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    campaign_id = Column(String(36), ForeignKey("influencer_campaigns.id", ondelete="CASCADE"), nullable=False, index=True)
    influencer_id = Column(String(36), nullable=False)
    accepted_at = Column(DateTime, default=datetime.utcnow)

    campaign = relationship("Campaign", back_populates="accepted_links")


class CampaignApprovedContent(Base):
    """Content approved for a campaign; only these count towards performance."""
    __tablename__ = "campaign_approved_content"
    __table_args__ = (UniqueConstraint("campaign_id", "content_id", name="uq_campaign_approved_content"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    campaign_id = Column(String(36), ForeignKey("influencer_campaigns.id", ondelete="CASCADE"), nullable=False, index=True)
    content_id = Column(String(36), ForeignKey("campaign_content.id", ondelete="CASCADE"), nullable=False)
    approved_at = Column(DateTime, default=datetime.utcnow)

    campaign = relationship("Campaign", back_populates="approved_links")
    content = relationship("CampaignContent")


# ============================================================================
# COLLABORATION REQUEST
# ============================================================================

class CollaborationRequest(Base):
    """Proposal linking one influencer to one campaign."""
    __tablename__ = "collaboration_requests"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    campaign_id = Column(String(36), ForeignKey("influencer_campaigns.id", ondelete="CASCADE"), nullable=False, index=True)
    influencer_id = Column(String(36), nullable=False, index=True)
    brand_id = Column(String(36), nullable=False)

    status = Column(Enum(CollaborationStatusDB, values_callable=lambda x: [e.value for e in x], name="collaborationstatusdb"), default=CollaborationStatusDB.PENDING)

    message = Column(Text)
    response_message = Column(Text)
    compensation = Column(JSON)
    requirements = Column(JSON)
    deadline = Column(DateTime)

    counter_offer = Column(JSON)  # {"offered_by", "terms"}

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    campaign = relationship("Campaign", back_populates="collaboration_requests")
    negotiation_history = relationship("NegotiationEntry", back_populates="request", cascade="all, delete-orphan", order_by="NegotiationEntry.id")


class NegotiationEntry(Base):
    """One offer in a collaboration request's negotiation. Append-only."""
    __tablename__ = "negotiation_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    request_id = Column(String(36), ForeignKey("collaboration_requests.id", ondelete="CASCADE"), nullable=False, index=True)

    offered_by = Column(Enum(RecipientTypeDB, values_callable=lambda x: [e.value for e in x], name="recipienttypedb"), nullable=False)
    terms = Column(JSON, nullable=False)
    timestamp = Column(DateTime, default=datetime.utcnow)

    request = relationship("CollaborationRequest", back_populates="negotiation_history")


# ============================================================================
# CAMPAIGN CONTENT
# ============================================================================

class CampaignContent(Base):
    """Content submitted by an accepted influencer for brand approval."""
    __tablename__ = "campaign_content"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    campaign_id = Column(String(36), ForeignKey("influencer_campaigns.id", ondelete="CASCADE"), nullable=False, index=True)
    influencer_id = Column(String(36), nullable=False, index=True)

    content_url = Column(String(500), nullable=False)
    content_type = Column(String(50))
    caption = Column(Text)
    platform = Column(String(50))

    status = Column(Enum(CampaignContentStatusDB, values_callable=lambda x: [e.value for e in x], name="campaigncontentstatusdb"), default=CampaignContentStatusDB.PENDING_APPROVAL)
    feedback = Column(Text)

    # Post-publication metrics:
    # {"reach", "likes", "comments", "shares", "clicks", "conversions"}
    performance_metrics = Column(JSON)
    metrics_updated_at = Column(DateTime)

    submitted_at = Column(DateTime, default=datetime.utcnow)
    reviewed_at = Column(DateTime)

    campaign = relationship("Campaign", back_populates="contents")


# ============================================================================
# PERFORMANCE & REPORTS
# ============================================================================

class CampaignPerformance(Base):
    """Persisted performance snapshot. Always regenerable from content metrics."""
    __tablename__ = "campaign_performance"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    campaign_id = Column(String(36), ForeignKey("influencer_campaigns.id", ondelete="CASCADE"), nullable=False, index=True)

    total_reach = Column(Integer, default=0)
    total_engagement = Column(Integer, default=0)
    total_clicks = Column(Integer, default=0)
    total_conversions = Column(Integer, default=0)
    engagement_rate = Column(Float, default=0.0)
    click_through_rate = Column(Float, default=0.0)
    conversion_rate = Column(Float, default=0.0)
    roi = Column(Float, default=0.0)
    goal_completion = Column(Float, default=0.0)
    performance_by_influencer = Column(JSON, default=dict)

    tracked_at = Column(DateTime, default=datetime.utcnow)


class CampaignReport(Base):
    """AI-narrated campaign report. A new row per generation."""
    __tablename__ = "campaign_reports"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    campaign_id = Column(String(36), ForeignKey("influencer_campaigns.id", ondelete="CASCADE"), nullable=False, index=True)
    campaign_name = Column(String(255))

    date_range = Column(JSON)  # {"start", "end"} as ISO strings
    performance = Column(JSON)
    content_summary = Column(JSON, default=list)
    influencer_summary = Column(JSON, default=list)
    insights = Column(JSON)

    generated_at = Column(DateTime, default=datetime.utcnow)


# ============================================================================
# NOTIFICATION
# ============================================================================

class Notification(Base):
    """Notification record for an influencer or a brand. Delivery happens elsewhere."""
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    recipient_type = Column(Enum(RecipientTypeDB, values_callable=lambda x: [e.value for e in x], name="recipienttypedb"), nullable=False)
    recipient_id = Column(String(36), nullable=False, index=True)

    type = Column(String(50), nullable=False)  # collaboration_request, counter_offer, etc.
    title = Column(String(200), nullable=False)
    message = Column(Text)
    data = Column(JSON)  # Additional context (campaign_id, request_id, etc.)

    read = Column(Boolean, default=False)
    read_at = Column(DateTime)

    created_at = Column(DateTime, default=datetime.utcnow)
