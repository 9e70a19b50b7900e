"""Tests for campaign lifecycle, collaboration requests and content review."""

import pytest

from core.errors import InvalidTransitionError, NotFoundError, PermissionDenied, ValidationError
from database.marketplace_models import (
    CampaignApprovedContent,
    CampaignContent,
    CampaignInfluencer,
    CampaignReport,
    CampaignStatusDB,
    CollaborationStatusDB,
    Notification,
    RecipientTypeDB,
)
from services.events import CampaignStatusChanged, CollaborationRequested


def notifications_for(db, recipient_id, type=None):
    query = db.query(Notification).filter(Notification.recipient_id == recipient_id)
    if type:
        query = query.filter(Notification.type == type)
    return query.all()


# =============================================================================
# Campaign Creation
# =============================================================================


class TestCreateCampaign:

    def test_missing_brief_is_rejected(self, engine):
        with pytest.raises(ValidationError) as exc:
            engine.campaigns.create_campaign({"brand_id": "brand-1", "name": "No Brief"})

        assert "brief" in str(exc.value)

    def test_missing_data_is_rejected(self, engine):
        with pytest.raises(ValidationError):
            engine.campaigns.create_campaign(None)

    def test_creates_draft_and_invites_influencers(self, db, engine):
        campaign = engine.campaigns.create_campaign({
            "brand_id": "brand-1",
            "name": "Summer Glow",
            "brief": "Show off the summer range",
            "influencers": ["inf-1", "inf-2"],
            "invite_message": "Join us",
        })

        assert campaign.status == CampaignStatusDB.DRAFT
        assert sorted(r.influencer_id for r in campaign.collaboration_requests) == ["inf-1", "inf-2"]
        assert all(r.status == CollaborationStatusDB.PENDING for r in campaign.collaboration_requests)

        [notification] = notifications_for(db, "inf-1", "collaboration_request")
        assert notification.recipient_type == RecipientTypeDB.INFLUENCER
        assert "Summer Glow" in notification.message

    def test_failed_invitation_does_not_undo_the_others(self, db, engine, monkeypatch):
        original = engine.campaigns._add_request

        def flaky(campaign, invite):
            if invite.influencer_id == "inf-bad":
                raise ValidationError("influencer cannot be invited")
            return original(campaign, invite)

        monkeypatch.setattr(engine.campaigns, "_add_request", flaky)

        campaign = engine.campaigns.create_campaign({
            "brand_id": "brand-1",
            "name": "Partial",
            "brief": "Some invites fail",
            "influencers": ["inf-1", "inf-bad", "inf-2"],
        })

        assert sorted(r.influencer_id for r in campaign.collaboration_requests) == ["inf-1", "inf-2"]
        assert notifications_for(db, "inf-bad") == []

    def test_requested_events_are_delivered_after_commit(self, engine, events):
        engine.campaigns.create_campaign({
            "brand_id": "brand-1", "name": "Events", "brief": "x", "influencers": ["inf-1"],
        })

        assert [type(e) for e in events.delivered] == [CollaborationRequested]

    def test_list_campaigns_filters(self, engine):
        engine.campaigns.create_campaign({"brand_id": "brand-1", "name": "One", "brief": "x"})
        engine.campaigns.create_campaign({"brand_id": "brand-2", "name": "Two", "brief": "x"})

        assert [c.name for c in engine.campaigns.list_campaigns(brand_id="brand-2")] == ["Two"]
        assert len(engine.campaigns.list_campaigns(status="draft")) == 2
        with pytest.raises(ValidationError):
            engine.campaigns.list_campaigns(status="paused")

    def test_unknown_campaign(self, engine):
        with pytest.raises(NotFoundError):
            engine.campaigns.get_campaign("missing")


# =============================================================================
# Collaboration Requests
# =============================================================================


class TestCollaborationRequests:

    def test_request_for_unknown_campaign(self, engine):
        with pytest.raises(NotFoundError):
            engine.campaigns.create_collaboration_request({
                "campaign_id": "missing", "influencer_id": "inf-1", "brand_id": "brand-1",
            })

    def test_accept_links_influencer_and_notifies_brand(self, db, engine):
        campaign = engine.campaigns.create_campaign({
            "brand_id": "brand-1", "name": "Accept", "brief": "x", "influencers": ["inf-1"],
        })
        [request] = campaign.collaboration_requests

        engine.campaigns.update_collaboration_request_status(request.id, "accepted", "Count me in")

        assert request.status == CollaborationStatusDB.ACCEPTED
        assert request.response_message == "Count me in"
        assert engine.campaigns.is_accepted(campaign.id, "inf-1")
        assert len(notifications_for(db, "brand-1", "collaboration_accepted")) == 1

    def test_decline_does_not_link(self, db, engine):
        campaign = engine.campaigns.create_campaign({
            "brand_id": "brand-1", "name": "Decline", "brief": "x", "influencers": ["inf-1"],
        })
        [request] = campaign.collaboration_requests

        engine.campaigns.update_collaboration_request_status(request.id, "declined")

        assert not engine.campaigns.is_accepted(campaign.id, "inf-1")
        assert len(notifications_for(db, "brand-1", "collaboration_declined")) == 1

    def test_terminal_request_cannot_change(self, engine):
        campaign = engine.campaigns.create_campaign({
            "brand_id": "brand-1", "name": "Terminal", "brief": "x", "influencers": ["inf-1"],
        })
        [request] = campaign.collaboration_requests
        engine.campaigns.update_collaboration_request_status(request.id, "declined")

        with pytest.raises(InvalidTransitionError):
            engine.campaigns.update_collaboration_request_status(request.id, "accepted")

    def test_invalid_response_status(self, engine):
        with pytest.raises(ValidationError):
            engine.campaigns.update_collaboration_request_status("any", "maybe")

    def test_unknown_request(self, engine):
        with pytest.raises(NotFoundError):
            engine.campaigns.update_collaboration_request_status("missing", "accepted")


# =============================================================================
# Content Submission & Review
# =============================================================================


class TestContent:

    def test_non_accepted_influencer_cannot_submit(self, db, engine, launch_campaign):
        campaign = launch_campaign(["inf-1"])

        with pytest.raises(PermissionError):
            engine.campaigns.submit_campaign_content(campaign.id, "stranger", {"content_url": "https://x"})

        assert db.query(CampaignContent).count() == 0
        assert notifications_for(db, "brand-1", "content_submission") == []

    def test_permission_denied_is_a_permission_error(self):
        assert issubclass(PermissionDenied, PermissionError)

    def test_submission_notifies_brand(self, db, engine, launch_campaign):
        campaign = launch_campaign(["inf-1"])

        content = engine.campaigns.submit_campaign_content(campaign.id, "inf-1", {
            "content_url": "https://instagram.com/p/abc", "caption": "Spring!",
        })

        assert content.campaign_id == campaign.id
        assert [c.id for c in engine.campaigns.list_campaign_content(campaign.id)] == [content.id]
        assert len(notifications_for(db, "brand-1", "content_submission")) == 1

    def test_submission_requires_url(self, engine, launch_campaign):
        campaign = launch_campaign(["inf-1"])

        with pytest.raises(ValidationError):
            engine.campaigns.submit_campaign_content(campaign.id, "inf-1", {"caption": "no url"})

    def test_approving_twice_links_once(self, db, engine, launch_campaign):
        campaign = launch_campaign(["inf-1"])
        content = engine.campaigns.submit_campaign_content(campaign.id, "inf-1", {"content_url": "https://x"})

        engine.campaigns.review_campaign_content(content.id, "approved")
        engine.campaigns.review_campaign_content(content.id, "approved")

        assert db.query(CampaignApprovedContent).filter_by(campaign_id=campaign.id).count() == 1
        assert len(notifications_for(db, "inf-1", "content_review")) == 2

    def test_rejection_removes_approval(self, db, engine, launch_campaign):
        campaign = launch_campaign(["inf-1"])
        content = engine.campaigns.submit_campaign_content(campaign.id, "inf-1", {"content_url": "https://x"})
        engine.campaigns.review_campaign_content(content.id, "approved")

        engine.campaigns.review_campaign_content(content.id, "rejected", "Wrong hashtag")

        assert db.query(CampaignApprovedContent).count() == 0
        assert content.feedback == "Wrong hashtag"
        assert [c.id for c in engine.campaigns.list_campaign_content(campaign.id, status="rejected")] == [content.id]

    def test_invalid_review_status(self, engine):
        with pytest.raises(ValidationError):
            engine.campaigns.review_campaign_content("any", "pending")


# =============================================================================
# Campaign Status
# =============================================================================


class TestCampaignStatus:

    def _advance(self, engine, campaign, *statuses):
        for status in statuses:
            engine.campaigns.update_campaign_status(campaign.id, status)

    def test_start_stamps_started_at(self, engine, launch_campaign):
        campaign = launch_campaign(["inf-1"])

        self._advance(engine, campaign, "pending_approval", "approved", "in_progress")

        assert campaign.status == CampaignStatusDB.IN_PROGRESS
        assert campaign.started_at is not None

    def test_skipping_ahead_is_rejected(self, engine, launch_campaign):
        campaign = launch_campaign(["inf-1"])

        with pytest.raises(InvalidTransitionError):
            engine.campaigns.update_campaign_status(campaign.id, "completed")

    def test_unknown_status(self, engine, launch_campaign):
        campaign = launch_campaign(["inf-1"])

        with pytest.raises(ValidationError):
            engine.campaigns.update_campaign_status(campaign.id, "archived")

    def test_completion_generates_report_and_notifies_brand(self, db, engine, events, launch_campaign, publish_content):
        campaign = launch_campaign(["inf-1"], goals={"conversions": 10})
        publish_content(campaign, "inf-1", reach=1000, likes=100, clicks=40, conversions=30)
        self._advance(engine, campaign, "pending_approval", "approved", "in_progress", "completed")

        db.refresh(campaign)
        assert campaign.completed_at is not None
        assert campaign.report_id is not None
        assert db.query(CampaignReport).filter_by(campaign_id=campaign.id).count() == 1
        assert len(notifications_for(db, "brand-1", "campaign_completed")) == 1

        status_events = [e for e in events.delivered if isinstance(e, CampaignStatusChanged)]
        assert [e.new_status for e in status_events] == ["pending_approval", "approved", "in_progress", "completed"]

    def test_completed_campaign_cannot_be_cancelled(self, engine, launch_campaign):
        campaign = launch_campaign(["inf-1"])
        self._advance(engine, campaign, "pending_approval", "approved", "in_progress", "completed")

        with pytest.raises(InvalidTransitionError):
            engine.campaigns.update_campaign_status(campaign.id, "cancelled")

    def test_closed_campaign_rejects_changes(self, db, engine, launch_campaign):
        campaign = launch_campaign(["inf-1"])
        content = engine.campaigns.submit_campaign_content(campaign.id, "inf-1", {"content_url": "https://x"})
        self._advance(engine, campaign, "pending_approval", "approved", "in_progress", "completed")

        with pytest.raises(InvalidTransitionError):
            engine.campaigns.create_collaboration_request({
                "campaign_id": campaign.id, "influencer_id": "inf-2", "brand_id": "brand-1",
            })
        with pytest.raises(InvalidTransitionError):
            engine.campaigns.submit_campaign_content(campaign.id, "inf-1", {"content_url": "https://y"})
        with pytest.raises(InvalidTransitionError):
            engine.campaigns.review_campaign_content(content.id, "approved")

        assert db.query(CampaignApprovedContent).count() == 0
        assert db.query(CampaignContent).count() == 1

    def test_cancelled_campaign_rejects_responses(self, engine):
        campaign = engine.campaigns.create_campaign({
            "brand_id": "brand-1", "name": "Called Off", "brief": "x", "influencers": ["inf-1"],
        })
        [request] = campaign.collaboration_requests
        engine.campaigns.update_campaign_status(campaign.id, "cancelled")

        with pytest.raises(InvalidTransitionError):
            engine.campaigns.update_collaboration_request_status(request.id, "accepted")

        assert not engine.campaigns.is_accepted(campaign.id, "inf-1")

    def test_failing_subscriber_does_not_block_transition(self, engine, events, launch_campaign):
        campaign = launch_campaign(["inf-1"])

        def broken(event):
            raise RuntimeError("subscriber down")

        events.subscribe(CampaignStatusChanged, broken)

        engine.campaigns.update_campaign_status(campaign.id, "cancelled")

        assert campaign.status == CampaignStatusDB.CANCELLED

    def test_accepted_links_survive_reload(self, db, launch_campaign):
        campaign = launch_campaign(["inf-1", "inf-2"])

        assert db.query(CampaignInfluencer).filter_by(campaign_id=campaign.id).count() == 2
