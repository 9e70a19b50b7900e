# Collaboration Requests Router for the Influencer Engine
# Invitations, influencer responses and counter-offer negotiation

from fastapi import APIRouter, Depends, status
from typing import List

from core.engine import InfluencerEngine
from routers.dependencies import get_engine
from schemas.marketplace import (
    CollaborationRequestCreate,
    CollaborationRequestResponse,
    CollaborationStatusUpdate,
    CounterOffer,
    NegotiationEntryResponse,
)

router = APIRouter(prefix="/collaboration-requests", tags=["Collaboration Requests"])


@router.post("", response_model=CollaborationRequestResponse, status_code=status.HTTP_201_CREATED)
def create_collaboration_request(
    request_data: CollaborationRequestCreate,
    engine: InfluencerEngine = Depends(get_engine),
):
    """Invite an influencer to a campaign. The influencer is notified."""
    return engine.campaigns.create_collaboration_request(request_data)


@router.get("/{request_id}", response_model=CollaborationRequestResponse)
def get_collaboration_request(
    request_id: str,
    engine: InfluencerEngine = Depends(get_engine),
):
    return engine.campaigns.get_collaboration_request(request_id)


@router.patch("/{request_id}/status", response_model=CollaborationRequestResponse)
def update_collaboration_request_status(
    request_id: str,
    update: CollaborationStatusUpdate,
    engine: InfluencerEngine = Depends(get_engine),
):
    """Accept or decline. Accepted influencers may submit content to the campaign."""
    return engine.campaigns.update_collaboration_request_status(request_id, update.status, update.message)


# ============================================================================
# NEGOTIATION
# ============================================================================

@router.post("/{request_id}/negotiate", response_model=CollaborationRequestResponse)
def negotiate_terms(
    request_id: str,
    counter_offer: CounterOffer,
    engine: InfluencerEngine = Depends(get_engine),
):
    return engine.negotiation.negotiate_terms(request_id, counter_offer)


@router.get("/{request_id}/history", response_model=List[NegotiationEntryResponse])
def get_negotiation_history(
    request_id: str,
    engine: InfluencerEngine = Depends(get_engine),
):
    return engine.negotiation.get_negotiation_history(request_id)
