# Pydantic Schemas for the Influencer Engine
# Request and response models shared by the engine and the API routers

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict, Any
from datetime import datetime
from enum import Enum


# ============================================================================
# ENUMS
# ============================================================================

class InfluencerStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class ContentType(str, Enum):
    PHOTO = "photo"
    VIDEO = "video"
    CAROUSEL = "carousel"
    TEXT = "text"


class CampaignStatus(str, Enum):
    DRAFT = "draft"
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class CollaborationStatus(str, Enum):
    PENDING = "pending"
    NEGOTIATING = "negotiating"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class CampaignContentStatus(str, Enum):
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    REJECTED = "rejected"


class OfferParty(str, Enum):
    BRAND = "brand"
    INFLUENCER = "influencer"


class CollaborationType(str, Enum):
    SPONSORED_POST = "sponsored_post"
    PRODUCT_REVIEW = "product_review"
    BRAND_AMBASSADOR = "brand_ambassador"
    AFFILIATE_MARKETING = "affiliate_marketing"
    CONTENT_CREATION = "content_creation"
    ACCOUNT_TAKEOVER = "account_takeover"
    EVENT_PROMOTION = "event_promotion"
    GIVEAWAY = "giveaway"


class SortBy(str, Enum):
    FOLLOWER_COUNT = "follower_count"
    ENGAGEMENT_RATE = "engagement_rate"
    RELEVANCE_SCORE = "relevance_score"


# ============================================================================
# INFLUENCER SCHEMAS
# ============================================================================

class TargetAudience(BaseModel):
    """Audience a brand wants to reach, compared against influencer demographics."""
    primary_age_range: Optional[str] = None
    primary_gender: Optional[str] = None


class InfluencerSearchCriteria(BaseModel):
    """Schema for influencer search filters."""
    categories: List[str] = []
    platforms: List[str] = []
    location: Optional[str] = None
    min_followers: Optional[int] = Field(None, ge=0)
    max_followers: Optional[int] = Field(None, ge=0)
    min_engagement_rate: Optional[float] = Field(None, ge=0)
    max_budget: Optional[float] = Field(None, ge=0)
    audience_age_range: Optional[str] = None
    audience_gender: Optional[str] = None
    target_audience: Optional[TargetAudience] = None
    sort_by: Optional[SortBy] = None


class AudienceSize(BaseModel):
    min: Optional[int] = Field(None, ge=0)
    max: Optional[int] = Field(None, ge=0)


class CampaignAudience(BaseModel):
    age_range: Optional[str] = None
    gender: Optional[str] = None


class CampaignProfile(BaseModel):
    """Campaign fields used to derive recommendation criteria."""
    categories: List[str] = []
    platforms: List[str] = []
    audience_size: Optional[AudienceSize] = None
    target_location: Optional[str] = None
    target_audience: Optional[CampaignAudience] = None
    budget: Optional[float] = Field(None, ge=0)


class RecommendationRequest(BaseModel):
    campaign_data: CampaignProfile
    count: int = Field(10, ge=1, le=100)


class InfluencerResponse(BaseModel):
    """Influencer as returned by search."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    categories: List[str] = []
    platforms: List[str] = []
    follower_count: int = 0
    engagement_rate: float = 0.0
    audience_demographics: Optional[Dict[str, Any]] = None
    location_country: Optional[str] = None
    rate_card: Optional[Dict[str, Any]] = None
    status: InfluencerStatus
    relevance_score: Optional[float] = None


class InfluencerRecommendation(BaseModel):
    id: str
    name: str
    follower_count: int
    engagement_rate: float
    categories: List[str] = []
    platforms: List[str] = []
    relevance_score: float
    estimated_reach: int
    estimated_engagement: int
    rate_card: Optional[Dict[str, Any]] = None


class EngagementMetrics(BaseModel):
    likes: int = Field(0, ge=0)
    comments: int = Field(0, ge=0)
    shares: int = Field(0, ge=0)


class ContentSampleCreate(BaseModel):
    """A post pulled from a social platform for an influencer."""
    caption: Optional[str] = None
    description: Optional[str] = None
    content_type: ContentType = ContentType.PHOTO
    posted_at: Optional[datetime] = None
    reach: Optional[int] = Field(None, ge=0)
    engagement_metrics: Optional[EngagementMetrics] = None


class ContentSampleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    influencer_id: str
    caption: Optional[str] = None
    description: Optional[str] = None
    content_type: Optional[ContentType] = None
    posted_at: Optional[datetime] = None
    reach: Optional[int] = None
    engagement_metrics: Optional[Dict[str, int]] = None


class ReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    brand_id: Optional[str] = None
    rating: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None


class InfluencerProfileResponse(InfluencerResponse):
    """Influencer with recent content, completed campaigns and reviews."""
    content_style: Optional[str] = None
    brand_values: List[str] = []
    campaign_history: List[Dict[str, Any]] = []
    content_samples: List[ContentSampleResponse] = []
    completed_campaigns: List[Dict[str, Any]] = []
    reviews: List[ReviewResponse] = []
    average_rating: float = 0.0


# ============================================================================
# CAMPAIGN SCHEMAS
# ============================================================================

class CampaignCreate(BaseModel):
    """Schema for creating a campaign, optionally inviting influencers."""
    brand_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    brief: str = Field(..., min_length=1)
    categories: List[str] = []
    platforms: List[str] = []
    target_audience: Optional[CampaignAudience] = None
    collaboration_type: Optional[CollaborationType] = None
    budget: float = 0.0
    conversion_value: float = 0.0
    goals: Dict[str, float] = {}
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    # Fan-out invitations
    influencers: List[str] = []
    invite_message: Optional[str] = None
    compensation: Optional[Dict[str, Any]] = None
    requirements: Optional[Any] = None
    deadline: Optional[datetime] = None


class CampaignStatusUpdate(BaseModel):
    status: CampaignStatus


class CampaignResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    brand_id: str
    name: str
    brief: str
    categories: Optional[List[str]] = None
    platforms: Optional[List[str]] = None
    target_audience: Optional[Dict[str, Any]] = None
    collaboration_type: Optional[str] = None
    budget: Optional[float] = None
    conversion_value: Optional[float] = None
    goals: Optional[Dict[str, float]] = None
    status: CampaignStatus
    collaboration_request_ids: List[str] = []
    accepted_influencer_ids: List[str] = []
    content_submission_ids: List[str] = []
    approved_content_ids: List[str] = []
    performance: Optional[Dict[str, Any]] = None
    report_id: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ============================================================================
# COLLABORATION SCHEMAS
# ============================================================================

class CollaborationRequestCreate(BaseModel):
    campaign_id: str = Field(..., min_length=1)
    influencer_id: str = Field(..., min_length=1)
    brand_id: str = Field(..., min_length=1)
    campaign_name: Optional[str] = None
    message: Optional[str] = None
    compensation: Optional[Dict[str, Any]] = None
    requirements: Optional[Any] = None
    deadline: Optional[datetime] = None


class CollaborationStatusUpdate(BaseModel):
    status: str
    message: str = ""


class CounterOffer(BaseModel):
    offered_by: OfferParty
    terms: Dict[str, Any]


class NegotiationEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    timestamp: datetime
    offered_by: OfferParty
    terms: Dict[str, Any]


class CollaborationRequestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    campaign_id: str
    influencer_id: str
    brand_id: str
    status: CollaborationStatus
    message: Optional[str] = None
    response_message: Optional[str] = None
    compensation: Optional[Dict[str, Any]] = None
    requirements: Optional[Any] = None
    deadline: Optional[datetime] = None
    counter_offer: Optional[Dict[str, Any]] = None
    negotiation_history: List[NegotiationEntryResponse] = []
    created_at: Optional[datetime] = None


# ============================================================================
# CONTENT SCHEMAS
# ============================================================================

class ContentSubmit(BaseModel):
    content_url: str = Field(..., min_length=1)
    content_type: Optional[str] = None
    caption: Optional[str] = None
    platform: Optional[str] = None


class ContentSubmitRequest(BaseModel):
    influencer_id: str = Field(..., min_length=1)
    content_data: Dict[str, Any]


class ContentReview(BaseModel):
    status: str
    feedback: str = ""


class ContentMetricsUpdate(BaseModel):
    """Post-publication metrics pulled from the platform. Omitted fields keep their value."""
    reach: Optional[int] = Field(None, ge=0)
    likes: Optional[int] = Field(None, ge=0)
    comments: Optional[int] = Field(None, ge=0)
    shares: Optional[int] = Field(None, ge=0)
    clicks: Optional[int] = Field(None, ge=0)
    conversions: Optional[int] = Field(None, ge=0)


class CampaignContentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    campaign_id: str
    influencer_id: str
    content_url: str
    content_type: Optional[str] = None
    caption: Optional[str] = None
    platform: Optional[str] = None
    status: CampaignContentStatus
    feedback: Optional[str] = None
    performance_metrics: Optional[Dict[str, int]] = None
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None


# ============================================================================
# NOTIFICATION SCHEMAS
# ============================================================================

class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    recipient_type: OfferParty
    recipient_id: str
    type: str
    title: str
    message: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    read: bool = False
    created_at: Optional[datetime] = None
