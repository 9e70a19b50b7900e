# Influencers Router for the Influencer Engine
# Discovery, profiles, analysis, recommendations and content ingestion

from fastapi import APIRouter, Depends, status
from typing import List

from core.engine import InfluencerEngine
from routers.dependencies import get_engine
from schemas.marketplace import (
    InfluencerSearchCriteria,
    InfluencerResponse,
    InfluencerProfileResponse,
    InfluencerRecommendation,
    RecommendationRequest,
    ContentSampleCreate,
    ContentSampleResponse,
)
from schemas.analytics import InfluencerAnalysis, MetricsRefreshResult

router = APIRouter(prefix="/influencers", tags=["Influencers"])


# ============================================================================
# DISCOVERY
# ============================================================================

@router.post("/search", response_model=List[InfluencerResponse])
def search_influencers(
    criteria: InfluencerSearchCriteria,
    engine: InfluencerEngine = Depends(get_engine),
):
    """
    Search active influencers.
    Every result carries a relevance score; sort_by orders results descending.
    """
    return [match.to_response() for match in engine.matcher.search(criteria)]


@router.post("/recommend", response_model=List[InfluencerRecommendation])
def recommend_influencers(
    request: RecommendationRequest,
    engine: InfluencerEngine = Depends(get_engine),
):
    """Recommend influencers for a campaign, broadening the search when too few match."""
    return engine.matcher.recommend_influencers(request.campaign_data, request.count)


# ============================================================================
# PROFILE & ANALYSIS
# ============================================================================

@router.get("/{influencer_id}", response_model=InfluencerProfileResponse)
def get_influencer_profile(
    influencer_id: str,
    engine: InfluencerEngine = Depends(get_engine),
):
    """Influencer with recent content, completed campaigns and reviews."""
    return engine.analyzer.get_influencer_profile(influencer_id)


@router.post("/{influencer_id}/analyze", response_model=InfluencerAnalysis)
def analyze_influencer(
    influencer_id: str,
    engine: InfluencerEngine = Depends(get_engine),
):
    return engine.analyzer.analyze_influencer(influencer_id)


@router.post("/{influencer_id}/metrics/refresh", response_model=MetricsRefreshResult)
def refresh_influencer_metrics(
    influencer_id: str,
    engine: InfluencerEngine = Depends(get_engine),
):
    return engine.analyzer.update_influencer_metrics(influencer_id)


@router.post("/{influencer_id}/content", response_model=ContentSampleResponse, status_code=status.HTTP_201_CREATED)
def ingest_content_sample(
    influencer_id: str,
    sample: ContentSampleCreate,
    engine: InfluencerEngine = Depends(get_engine),
):
    """Record a post pulled from a social platform."""
    return engine.analyzer.ingest_content_sample(influencer_id, sample)
