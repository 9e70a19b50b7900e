"""
Counter-offers on collaboration requests and their append-only history.
"""

from typing import List
import logging

from sqlalchemy.orm import Session

from core.campaigns import TERMINAL_REQUEST_STATUSES
from core.errors import InvalidTransitionError, NotFoundError
from core.validation import coerce_model
from database.config import commit_and_publish
from database.marketplace_models import (
    CollaborationRequest,
    CollaborationStatusDB,
    NegotiationEntry,
    RecipientTypeDB,
)
from schemas.marketplace import CounterOffer, OfferParty
from services.events import EventBus, CounterOfferMade


class NegotiationManager:
    def __init__(self, db: Session, events: EventBus):
        self.db = db
        self.events = events

    def _get_request(self, request_id: str) -> CollaborationRequest:
        request = self.db.query(CollaborationRequest).filter(CollaborationRequest.id == request_id).first()
        if not request:
            raise NotFoundError("Collaboration request", request_id)
        return request

    def negotiate_terms(self, request_id: str, counter_offer) -> CollaborationRequest:
        """
        Record a counter offer from the brand or the influencer.
        The request moves to negotiating and the other party is notified.
        """
        offer = coerce_model(CounterOffer, counter_offer, "counter offer")
        request = self._get_request(request_id)

        if request.status in TERMINAL_REQUEST_STATUSES:
            raise InvalidTransitionError("collaboration request", request.status.value, CollaborationStatusDB.NEGOTIATING.value)

        request.status = CollaborationStatusDB.NEGOTIATING
        request.counter_offer = {"offered_by": offer.offered_by.value, "terms": offer.terms}
        self.db.add(NegotiationEntry(
            request_id=request.id,
            offered_by=RecipientTypeDB(offer.offered_by.value),
            terms=offer.terms,
        ))

        if offer.offered_by == OfferParty.BRAND:
            recipient_type, recipient_id = RecipientTypeDB.INFLUENCER, request.influencer_id
        else:
            recipient_type, recipient_id = RecipientTypeDB.BRAND, request.brand_id

        self.events.publish(CounterOfferMade(
            request_id=request.id,
            campaign_id=request.campaign_id,
            offered_by=offer.offered_by.value,
            recipient_type=recipient_type.value,
            recipient_id=recipient_id,
            terms=offer.terms,
        ))
        commit_and_publish(self.db, self.events, "negotiate collaboration terms")
        logging.info(f"Counter offer by {offer.offered_by.value} recorded on request {request_id}")
        return request

    def get_negotiation_history(self, request_id: str) -> List[NegotiationEntry]:
        """Offers on a request, oldest first."""
        self._get_request(request_id)
        return (
            self.db.query(NegotiationEntry)
            .filter(NegotiationEntry.request_id == request_id)
            .order_by(NegotiationEntry.id)
            .all()
        )
