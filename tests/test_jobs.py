"""Tests for the scheduled batch jobs."""

import pytest

from core.engagement import EngagementAnalyzer
from core.jobs import run_metrics_refresh, run_performance_tracking
from database.marketplace_models import CampaignPerformance
from database.models import Influencer, InfluencerStatusDB


class TestMetricsRefresh:

    def test_refreshes_active_influencers_only(self, db, session_factory, make_influencer, make_sample):
        active = make_influencer(name="Active", follower_count=1000)
        make_sample(active.id, likes=50, reach=1000)
        make_influencer(name="Quiet")
        make_influencer(name="Inactive", status=InfluencerStatusDB.INACTIVE)

        summary = run_metrics_refresh(session_factory)

        assert summary == {"processed": 2, "succeeded": 2, "failed": 0}
        db.expire_all()
        assert db.get(Influencer, active.id).engagement_rate == pytest.approx(0.05)

    def test_failing_influencer_does_not_stop_the_batch(self, session_factory, make_influencer, monkeypatch):
        bad_id = make_influencer(name="Bad").id
        make_influencer(name="Good")
        original = EngagementAnalyzer.update_influencer_metrics

        def flaky(self, influencer_id):
            if influencer_id == bad_id:
                raise RuntimeError("platform API timeout")
            return original(self, influencer_id)

        monkeypatch.setattr(EngagementAnalyzer, "update_influencer_metrics", flaky)

        summary = run_metrics_refresh(session_factory)

        assert summary == {"processed": 2, "succeeded": 1, "failed": 1}

    def test_respects_limit(self, session_factory, make_influencer):
        for i in range(3):
            make_influencer(name=f"Influencer {i}")

        assert run_metrics_refresh(session_factory, limit=2)["processed"] == 2


class TestPerformanceTracking:

    def test_tracks_in_progress_campaigns(self, db, session_factory, engine, launch_campaign, publish_content):
        running = launch_campaign(["inf-1"], name="Running")
        publish_content(running, "inf-1", reach=1000, likes=10)
        for status in ("pending_approval", "approved", "in_progress"):
            engine.campaigns.update_campaign_status(running.id, status)
        draft = launch_campaign(["inf-2"], name="Draft")
        publish_content(draft, "inf-2", reach=500)

        summary = run_performance_tracking(session_factory)

        assert summary == {"processed": 1, "succeeded": 1, "failed": 0}
        db.expire_all()
        assert db.query(CampaignPerformance).filter_by(campaign_id=running.id).count() == 1
        assert db.query(CampaignPerformance).filter_by(campaign_id=draft.id).count() == 0

