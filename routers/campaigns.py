# Campaigns Router for the Influencer Engine
# Campaign lifecycle, submitted content, performance and reports

from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional

from core.engine import InfluencerEngine
from routers.dependencies import get_engine
from schemas.marketplace import (
    CampaignCreate,
    CampaignResponse,
    CampaignStatusUpdate,
    CampaignContentResponse,
    ContentSubmitRequest,
)
from schemas.analytics import CampaignReportResponse

router = APIRouter(prefix="/campaigns", tags=["Campaigns"])


# ============================================================================
# CAMPAIGNS
# ============================================================================

@router.post("", response_model=CampaignResponse, status_code=status.HTTP_201_CREATED)
def create_campaign(
    campaign_data: CampaignCreate,
    engine: InfluencerEngine = Depends(get_engine),
):
    """
    Create a draft campaign.
    Influencers listed in `influencers` each receive a collaboration request.
    """
    return engine.campaigns.create_campaign(campaign_data)


@router.get("", response_model=List[CampaignResponse])
def list_campaigns(
    brand_id: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    engine: InfluencerEngine = Depends(get_engine),
):
    return engine.campaigns.list_campaigns(brand_id=brand_id, status=status)


@router.get("/reports/{report_id}", response_model=CampaignReportResponse)
def get_campaign_report(
    report_id: str,
    engine: InfluencerEngine = Depends(get_engine),
):
    return engine.performance.get_campaign_report(report_id)


@router.get("/{campaign_id}", response_model=CampaignResponse)
def get_campaign(
    campaign_id: str,
    engine: InfluencerEngine = Depends(get_engine),
):
    return engine.campaigns.get_campaign(campaign_id)


@router.patch("/{campaign_id}/status", response_model=CampaignResponse)
def update_campaign_status(
    campaign_id: str,
    update: CampaignStatusUpdate,
    engine: InfluencerEngine = Depends(get_engine),
):
    """Move the campaign along its lifecycle. Completing it generates a report."""
    return engine.campaigns.update_campaign_status(campaign_id, update.status)


# ============================================================================
# CONTENT
# ============================================================================

@router.post("/{campaign_id}/content", response_model=CampaignContentResponse, status_code=status.HTTP_201_CREATED)
def submit_campaign_content(
    campaign_id: str,
    submission: ContentSubmitRequest,
    engine: InfluencerEngine = Depends(get_engine),
):
    """Accepted influencers submit content for brand approval."""
    return engine.campaigns.submit_campaign_content(campaign_id, submission.influencer_id, submission.content_data)


@router.get("/{campaign_id}/content", response_model=List[CampaignContentResponse])
def list_campaign_content(
    campaign_id: str,
    status: Optional[str] = Query(None, description="pending_approval, approved or rejected"),
    engine: InfluencerEngine = Depends(get_engine),
):
    return engine.campaigns.list_campaign_content(campaign_id, status=status)


# ============================================================================
# PERFORMANCE & REPORTS
# ============================================================================

@router.post("/{campaign_id}/performance")
def track_campaign_performance(
    campaign_id: str,
    engine: InfluencerEngine = Depends(get_engine),
):
    """
    Recompute performance from approved content.
    Returns a PerformanceSnapshot, or a NoContentResult when nothing is approved yet.
    """
    return engine.performance.track_campaign_performance(campaign_id)


@router.post("/{campaign_id}/reports", response_model=CampaignReportResponse, status_code=status.HTTP_201_CREATED)
def generate_campaign_report(
    campaign_id: str,
    engine: InfluencerEngine = Depends(get_engine),
):
    return engine.performance.generate_campaign_report(campaign_id)
