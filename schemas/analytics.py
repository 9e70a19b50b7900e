# Analytics Schemas
# Structured model output, engagement analysis, predictions, performance and reports

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any, Literal
from datetime import datetime


# ============================================================================
# TEXT-GENERATION OUTPUTS
# ============================================================================

class ContentThemes(BaseModel):
    """Themes and style extracted from an influencer's captions."""
    themes: List[str]
    style: str
    recurring_elements: List[str]
    high_engagement_content: List[str]

    @classmethod
    def placeholder(cls) -> "ContentThemes":
        return cls(
            themes=["Unable to analyze themes"],
            style="Unable to analyze style",
            recurring_elements=["Unable to analyze recurring elements"],
            high_engagement_content=["Unable to analyze high engagement content"],
        )


class BrandAlignment(BaseModel):
    """Which brands an influencer suits, and what to watch out for."""
    aligned_brand_categories: List[str]
    brand_categories_to_avoid: List[str]
    authenticity_score: float = Field(..., ge=0, le=10)
    expressed_values: List[str]
    potential_red_flags: List[str]

    @classmethod
    def placeholder(cls, categories: List[str] = None, values: List[str] = None) -> "BrandAlignment":
        return cls(
            aligned_brand_categories=list(categories or []),
            brand_categories_to_avoid=["Unable to analyze categories to avoid"],
            authenticity_score=5,
            expressed_values=list(values or []),
            potential_red_flags=["Unable to analyze potential red flags"],
        )


class CampaignInsights(BaseModel):
    key_highlights: List[str]
    top_performing_influencers: List[str]
    top_performing_content: List[str]
    areas_for_improvement: List[str]
    recommendations: List[str]

    @classmethod
    def placeholder(cls) -> "CampaignInsights":
        return cls(
            key_highlights=["Unable to generate key highlights"],
            top_performing_influencers=["Unable to identify top performing influencers"],
            top_performing_content=["Unable to identify top performing content"],
            areas_for_improvement=["Unable to identify areas for improvement"],
            recommendations=["Unable to generate recommendations"],
        )


# ============================================================================
# INFLUENCER ANALYSIS
# ============================================================================

class BestPostingTime(BaseModel):
    day: str
    hour: str
    content_type: str


class EngagementPatterns(BaseModel):
    engagement_by_day_of_week: Dict[int, float]
    engagement_by_hour: Dict[int, float]
    engagement_by_content_type: Dict[str, float]
    best_posting_time: BestPostingTime


class PredictionMetrics(BaseModel):
    predicted_engagement_rate: float
    predicted_goal_completion: float
    predicted_roi: float
    confidence_score: float


class PerformancePrediction(BaseModel):
    overall_prediction: PredictionMetrics
    performance_by_type: Dict[str, PredictionMetrics]


class InfluencerAnalysis(BaseModel):
    influencer_id: str
    influencer_name: str
    content_analysis: ContentThemes
    engagement_analysis: EngagementPatterns
    brand_alignment_analysis: BrandAlignment
    performance_prediction: PerformancePrediction
    analyzed_at: datetime


class MetricsRefreshResult(BaseModel):
    influencer_id: str
    status: Literal["updated", "no_content"]
    engagement_rate: Optional[float] = None
    updated_at: Optional[datetime] = None
    message: Optional[str] = None


# ============================================================================
# CAMPAIGN PERFORMANCE
# ============================================================================

class InfluencerPerformance(BaseModel):
    reach: int = 0
    engagement: int = 0
    clicks: int = 0
    conversions: int = 0


class PerformanceSnapshot(BaseModel):
    campaign_id: str
    total_reach: int = 0
    total_engagement: int = 0
    total_clicks: int = 0
    total_conversions: int = 0
    engagement_rate: float = 0.0
    click_through_rate: float = 0.0
    conversion_rate: float = 0.0
    roi: float = 0.0
    goal_completion: float = 0.0
    performance_by_influencer: Dict[str, InfluencerPerformance] = {}
    tracked_at: Optional[datetime] = None


class NoContentResult(BaseModel):
    campaign_id: str
    status: Literal["no_content"] = "no_content"
    message: str = "No approved content to track"


# ============================================================================
# REPORTS
# ============================================================================

class DateRange(BaseModel):
    start: Optional[datetime] = None
    end: Optional[datetime] = None


class ContentSummary(BaseModel):
    id: str
    influencer_id: str
    content_url: str
    content_type: Optional[str] = None
    caption: Optional[str] = None
    performance_metrics: Optional[Dict[str, int]] = None


class InfluencerSummary(BaseModel):
    id: str
    name: Optional[str] = None
    follower_count: Optional[int] = None
    engagement_rate: Optional[float] = None
    performance: Optional[InfluencerPerformance] = None


class CampaignReportResponse(BaseModel):
    id: str
    campaign_id: str
    campaign_name: Optional[str] = None
    date_range: DateRange
    performance: PerformanceSnapshot
    content_summary: List[ContentSummary] = []
    influencer_summary: List[InfluencerSummary] = []
    insights: CampaignInsights
    generated_at: datetime

    @classmethod
    def from_record(cls, report) -> "CampaignReportResponse":
        return cls(
            id=report.id,
            campaign_id=report.campaign_id,
            campaign_name=report.campaign_name,
            date_range=DateRange(**(report.date_range or {})),
            performance=PerformanceSnapshot(**report.performance),
            content_summary=report.content_summary or [],
            influencer_summary=report.influencer_summary or [],
            insights=CampaignInsights(**report.insights),
            generated_at=report.generated_at,
        )
