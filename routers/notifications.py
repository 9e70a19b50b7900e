# Notifications Router for the Influencer Engine
# Read side of the notifications recorded for influencers and brands

from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List

from core.engine import InfluencerEngine
from routers.dependencies import get_engine
from schemas.marketplace import NotificationResponse, OfferParty

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=List[NotificationResponse])
def get_notifications(
    recipient_type: OfferParty = Query(..., description="influencer or brand"),
    recipient_id: str = Query(...),
    unread_only: bool = Query(False, description="Only return unread notifications"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    engine: InfluencerEngine = Depends(get_engine),
):
    """
    Get a recipient's notifications, newest first.
    """
    return engine.notifications.list_for(recipient_type.value, recipient_id, unread_only, page, limit)


@router.get("/unread-count")
def get_unread_count(
    recipient_id: str = Query(...),
    engine: InfluencerEngine = Depends(get_engine),
):
    return {"unread_count": engine.notifications.get_unread_count(recipient_id)}


@router.patch("/{notification_id}/read")
def mark_notification_read(
    notification_id: str,
    recipient_id: str = Query(...),
    engine: InfluencerEngine = Depends(get_engine),
):
    if not engine.notifications.mark_read(notification_id, recipient_id):
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"message": "Notification marked as read"}
