# Schemas module for the Influencer Engine
# Organizes all Pydantic schemas in a modular structure

from schemas.marketplace import (
    # Enums
    InfluencerStatus,
    ContentType,
    CampaignStatus,
    CollaborationStatus,
    CampaignContentStatus,
    OfferParty,
    CollaborationType,
    SortBy,

    # Influencer schemas
    TargetAudience,
    InfluencerSearchCriteria,
    AudienceSize,
    CampaignAudience,
    CampaignProfile,
    RecommendationRequest,
    InfluencerResponse,
    InfluencerRecommendation,
    EngagementMetrics,
    ContentSampleCreate,
    ContentSampleResponse,
    ReviewResponse,
    InfluencerProfileResponse,

    # Campaign schemas
    CampaignCreate,
    CampaignStatusUpdate,
    CampaignResponse,

    # Collaboration schemas
    CollaborationRequestCreate,
    CollaborationStatusUpdate,
    CounterOffer,
    NegotiationEntryResponse,
    CollaborationRequestResponse,

    # Content schemas
    ContentSubmit,
    ContentSubmitRequest,
    ContentReview,
    ContentMetricsUpdate,
    CampaignContentResponse,

    # Notification schemas
    NotificationResponse,
)

from schemas.analytics import (
    ContentThemes,
    BrandAlignment,
    CampaignInsights,
    BestPostingTime,
    EngagementPatterns,
    PredictionMetrics,
    PerformancePrediction,
    InfluencerAnalysis,
    MetricsRefreshResult,
    InfluencerPerformance,
    PerformanceSnapshot,
    NoContentResult,
    DateRange,
    ContentSummary,
    InfluencerSummary,
    CampaignReportResponse,
)

__all__ = [
    # Enums
    "InfluencerStatus",
    "ContentType",
    "CampaignStatus",
    "CollaborationStatus",
    "CampaignContentStatus",
    "OfferParty",
    "CollaborationType",
    "SortBy",

    # Influencer
    "TargetAudience",
    "InfluencerSearchCriteria",
    "AudienceSize",
    "CampaignAudience",
    "CampaignProfile",
    "RecommendationRequest",
    "InfluencerResponse",
    "InfluencerRecommendation",
    "EngagementMetrics",
    "ContentSampleCreate",
    "ContentSampleResponse",
    "ReviewResponse",
    "InfluencerProfileResponse",

    # Campaign
    "CampaignCreate",
    "CampaignStatusUpdate",
    "CampaignResponse",

    # Collaboration
    "CollaborationRequestCreate",
    "CollaborationStatusUpdate",
    "CounterOffer",
    "NegotiationEntryResponse",
    "CollaborationRequestResponse",

    # Content
    "ContentSubmit",
    "ContentSubmitRequest",
    "ContentReview",
    "ContentMetricsUpdate",
    "CampaignContentResponse",

    # Notification
    "NotificationResponse",

    # Analytics
    "ContentThemes",
    "BrandAlignment",
    "CampaignInsights",
    "BestPostingTime",
    "EngagementPatterns",
    "PredictionMetrics",
    "PerformancePrediction",
    "InfluencerAnalysis",
    "MetricsRefreshResult",
    "InfluencerPerformance",
    "PerformanceSnapshot",
    "NoContentResult",
    "DateRange",
    "ContentSummary",
    "InfluencerSummary",
    "CampaignReportResponse",
]
