"""Tests for performance tracking, content metrics and campaign reports."""

import json

import pytest

from core.errors import NotFoundError, ValidationError
from core.performance import PerformanceTracker, calculate_goal_completion, calculate_roi
from database.marketplace_models import CampaignPerformance, CampaignReport
from schemas.analytics import NoContentResult, PerformanceSnapshot


# =============================================================================
# Calculations
# =============================================================================


class TestCalculations:

    def test_roi(self):
        assert calculate_roi(conversions=30, conversion_value=50, budget=1000) == pytest.approx(0.5)

    def test_roi_without_budget_or_value(self):
        assert calculate_roi(30, 50, 0) == 0
        assert calculate_roi(30, 0, 1000) == 0

    def test_goal_completion(self):
        goals = {"reach": 1000, "conversions": 50}
        assert calculate_goal_completion(goals, {"reach": 1200, "conversions": 20}) == 0.5

    def test_goal_completion_ignores_unknown_and_zero_targets(self):
        goals = {"reach": 0, "followers": 500, "clicks": 10}
        assert calculate_goal_completion(goals, {"clicks": 10}) == 1.0

    def test_no_goals(self):
        assert calculate_goal_completion({}, {"reach": 10}) == 0
        assert calculate_goal_completion(None, {}) == 0


# =============================================================================
# Tracking
# =============================================================================


class TestTracking:

    def test_no_approved_content(self, db, engine, launch_campaign):
        campaign = launch_campaign(["inf-1"])
        engine.campaigns.submit_campaign_content(campaign.id, "inf-1", {"content_url": "https://x"})

        result = engine.performance.track_campaign_performance(campaign.id)

        assert isinstance(result, NoContentResult)
        assert result.status == "no_content"
        assert db.query(CampaignPerformance).count() == 0
        db.refresh(campaign)
        assert campaign.performance is None

    def test_snapshot_totals_and_rates(self, db, engine, launch_campaign, publish_content):
        campaign = launch_campaign(["inf-1", "inf-2"], goals={"reach": 1500, "conversions": 50})
        publish_content(campaign, "inf-1", reach=1000, likes=80, comments=15, shares=5, clicks=50, conversions=20)
        publish_content(campaign, "inf-2", reach=1000, likes=100, clicks=30, conversions=10)

        snapshot = engine.performance.track_campaign_performance(campaign.id)

        assert isinstance(snapshot, PerformanceSnapshot)
        assert snapshot.total_reach == 2000
        assert snapshot.total_engagement == 200
        assert snapshot.total_conversions == 30
        assert snapshot.engagement_rate == pytest.approx(0.1)
        assert snapshot.click_through_rate == pytest.approx(80 / 200)
        assert snapshot.conversion_rate == pytest.approx(30 / 80)
        assert snapshot.roi == pytest.approx(0.5)
        assert snapshot.goal_completion == 0.5
        assert snapshot.performance_by_influencer["inf-2"].engagement == 100

        db.refresh(campaign)
        assert campaign.performance["total_reach"] == 2000

    def test_rejected_content_is_excluded(self, engine, launch_campaign, publish_content):
        campaign = launch_campaign(["inf-1", "inf-2"])
        publish_content(campaign, "inf-1", reach=1000)
        rejected = publish_content(campaign, "inf-2", reach=5000)
        engine.campaigns.review_campaign_content(rejected.id, "rejected")

        assert engine.performance.track_campaign_performance(campaign.id).total_reach == 1000

    def test_tracking_unchanged_content_is_idempotent(self, db, engine, launch_campaign, publish_content):
        campaign = launch_campaign(["inf-1"])
        publish_content(campaign, "inf-1", reach=1000, likes=50)

        first = engine.performance.track_campaign_performance(campaign.id)
        second = engine.performance.track_campaign_performance(campaign.id)

        assert second.model_dump(exclude={"tracked_at"}) == first.model_dump(exclude={"tracked_at"})
        assert db.query(CampaignPerformance).count() == 1

    def test_changed_metrics_write_a_new_snapshot(self, db, engine, launch_campaign, publish_content):
        campaign = launch_campaign(["inf-1"])
        content = publish_content(campaign, "inf-1", reach=1000)
        engine.performance.track_campaign_performance(campaign.id)

        engine.performance.update_content_metrics(content.id, {"reach": 3000})

        assert engine.performance.track_campaign_performance(campaign.id).total_reach == 3000
        assert db.query(CampaignPerformance).count() == 2

    def test_unknown_campaign(self, engine):
        with pytest.raises(NotFoundError):
            engine.performance.track_campaign_performance("missing")


# =============================================================================
# Content Metrics
# =============================================================================


class TestContentMetrics:

    def test_metrics_are_merged(self, engine, launch_campaign, publish_content):
        campaign = launch_campaign(["inf-1"])
        content = publish_content(campaign, "inf-1", reach=1000, likes=10)

        engine.performance.update_content_metrics(content.id, {"likes": 25, "clicks": 4})

        assert content.performance_metrics == {"reach": 1000, "likes": 25, "clicks": 4}
        assert content.metrics_updated_at is not None

    def test_negative_metrics_are_rejected(self, engine, launch_campaign, publish_content):
        campaign = launch_campaign(["inf-1"])
        content = publish_content(campaign, "inf-1")

        with pytest.raises(ValidationError):
            engine.performance.update_content_metrics(content.id, {"likes": -1})

    def test_unknown_content(self, engine):
        with pytest.raises(NotFoundError):
            engine.performance.update_content_metrics("missing", {"likes": 1})


# =============================================================================
# Reports
# =============================================================================


class TestReports:

    INSIGHTS = {
        "key_highlights": ["Strong conversions"],
        "top_performing_influencers": ["Test Influencer"],
        "top_performing_content": ["Spring reel"],
        "areas_for_improvement": ["Reach"],
        "recommendations": ["Book again"],
    }

    def test_report_with_generated_insights(self, db, make_influencer, launch_campaign, publish_content, make_generator):
        influencer = make_influencer()
        campaign = launch_campaign([influencer.id])
        publish_content(campaign, influencer.id, reach=1000, likes=100, conversions=30)
        generator = make_generator([json.dumps(self.INSIGHTS)])

        report = PerformanceTracker(db, generator).generate_campaign_report(campaign.id)

        assert report.campaign_name == "Spring Launch"
        assert report.performance.roi == pytest.approx(0.5)
        assert report.insights.recommendations == ["Book again"]
        assert [s.name for s in report.influencer_summary] == ["Test Influencer"]
        assert len(report.content_summary) == 1
        assert generator.calls[0]["max_tokens"] == 1000

        db.refresh(campaign)
        assert campaign.report_id == report.id

    def test_report_without_usable_insights(self, engine, launch_campaign, publish_content):
        campaign = launch_campaign(["inf-1"])
        publish_content(campaign, "inf-1", reach=100)

        report = engine.performance.generate_campaign_report(campaign.id)

        assert report.insights.key_highlights == ["Unable to generate key highlights"]
        assert report.influencer_summary[0].name is None

    def test_report_without_content(self, engine, launch_campaign):
        campaign = launch_campaign(["inf-1"])

        report = engine.performance.generate_campaign_report(campaign.id)

        assert report.performance.total_reach == 0
        assert report.content_summary == []

    def test_each_report_is_new(self, db, engine, launch_campaign):
        campaign = launch_campaign(["inf-1"])

        first = engine.performance.generate_campaign_report(campaign.id)
        second = engine.performance.generate_campaign_report(campaign.id)

        assert first.id != second.id
        assert db.query(CampaignReport).count() == 2
        db.refresh(campaign)
        assert campaign.report_id == second.id

    def test_get_report(self, engine, launch_campaign):
        campaign = launch_campaign(["inf-1"])
        created = engine.performance.generate_campaign_report(campaign.id)

        assert engine.performance.get_campaign_report(created.id).id == created.id
        with pytest.raises(NotFoundError):
            engine.performance.get_campaign_report("missing")

    def test_report_after_rejecting_tracked_content(self, db, engine, launch_campaign, publish_content):
        campaign = launch_campaign(["inf-1"])
        content = publish_content(campaign, "inf-1", reach=5000, conversions=30)
        engine.performance.track_campaign_performance(campaign.id)

        engine.campaigns.review_campaign_content(content.id, "rejected")

        db.refresh(campaign)
        assert campaign.performance is None
        assert engine.performance.track_campaign_performance(campaign.id).status == "no_content"

        report = engine.performance.generate_campaign_report(campaign.id)

        assert report.performance.total_reach == 0
        assert report.performance.roi == 0
        assert report.content_summary == []

    def test_tracking_clears_stale_snapshot(self, db, engine, launch_campaign):
        campaign = launch_campaign(["inf-1"])
        campaign.performance = {"campaign_id": campaign.id, "total_reach": 999}
        db.commit()

        result = engine.performance.track_campaign_performance(campaign.id)

        assert isinstance(result, NoContentResult)
        db.refresh(campaign)
        assert campaign.performance is None
        assert db.query(CampaignPerformance).count() == 0
