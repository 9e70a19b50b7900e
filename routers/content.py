# Campaign Content Router for the Influencer Engine
# Brand review of submissions and post-publication metrics

from fastapi import APIRouter, Depends

from core.engine import InfluencerEngine
from routers.dependencies import get_engine
from schemas.marketplace import CampaignContentResponse, ContentReview, ContentMetricsUpdate

router = APIRouter(prefix="/content", tags=["Campaign Content"])


@router.patch("/{content_id}/review", response_model=CampaignContentResponse)
def review_campaign_content(
    content_id: str,
    review: ContentReview,
    engine: InfluencerEngine = Depends(get_engine),
):
    """Approve or reject a submission. Only approved content counts towards performance."""
    return engine.campaigns.review_campaign_content(content_id, review.status, review.feedback)


@router.patch("/{content_id}/metrics", response_model=CampaignContentResponse)
def update_content_metrics(
    content_id: str,
    metrics: ContentMetricsUpdate,
    engine: InfluencerEngine = Depends(get_engine),
):
    return engine.performance.update_content_metrics(content_id, metrics)
