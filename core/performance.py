"""
Campaign performance tracking and AI-narrated reports.

Performance is always recomputed from the metrics of approved content, so a
snapshot can be regenerated at any time and tracking twice over unchanged
content yields the same numbers.
"""

from datetime import datetime
from typing import Dict, List, Union
import json
import logging

from sqlalchemy.orm import Session

from core.ai_parsing import request_structured
from core.errors import NotFoundError
from core.predictor import total_engagement
from core.validation import coerce_model
from database.config import commit_or_raise
from database.models import Influencer
from database.marketplace_models import (
    Campaign,
    CampaignApprovedContent,
    CampaignContent,
    CampaignPerformance,
    CampaignReport,
)
from schemas.analytics import (
    CampaignInsights,
    CampaignReportResponse,
    ContentSummary,
    InfluencerPerformance,
    InfluencerSummary,
    NoContentResult,
    PerformanceSnapshot,
)
from schemas.marketplace import ContentMetricsUpdate
from services.events import EventBus, CampaignStatusChanged

GOAL_METRICS = ("reach", "engagement", "clicks", "conversions")


# ============================================================================
# PURE CALCULATIONS
# ============================================================================

def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else 0.0


def calculate_roi(conversions: int, conversion_value: float, budget: float) -> float:
    """(conversions x conversion value - budget) / budget; 0 unless budget and value are positive."""
    if not budget or budget <= 0 or not conversion_value or conversion_value <= 0:
        return 0.0
    return (conversions * conversion_value - budget) / budget


def calculate_goal_completion(goals: Dict[str, float], actuals: Dict[str, int]) -> float:
    """Fraction of defined goals met or exceeded. Only positive targets on known metrics count."""
    defined = {metric: target for metric, target in (goals or {}).items()
               if metric in GOAL_METRICS and target and target > 0}
    if not defined:
        return 0.0
    achieved = sum(1 for metric, target in defined.items() if actuals.get(metric, 0) >= target)
    return achieved / len(defined)


def compute_snapshot(campaign: Campaign, contents: List[CampaignContent]) -> PerformanceSnapshot:
    totals = InfluencerPerformance()
    by_influencer: Dict[str, InfluencerPerformance] = {}

    for content in contents:
        metrics = content.performance_metrics or {}
        reach = metrics.get("reach") or 0
        engagement = total_engagement(metrics)
        clicks = metrics.get("clicks") or 0
        conversions = metrics.get("conversions") or 0

        for bucket in (totals, by_influencer.setdefault(content.influencer_id, InfluencerPerformance())):
            bucket.reach += reach
            bucket.engagement += engagement
            bucket.clicks += clicks
            bucket.conversions += conversions

    return PerformanceSnapshot(
        campaign_id=campaign.id,
        total_reach=totals.reach,
        total_engagement=totals.engagement,
        total_clicks=totals.clicks,
        total_conversions=totals.conversions,
        engagement_rate=_ratio(totals.engagement, totals.reach),
        click_through_rate=_ratio(totals.clicks, totals.engagement),
        conversion_rate=_ratio(totals.conversions, totals.clicks),
        roi=calculate_roi(totals.conversions, campaign.conversion_value, campaign.budget),
        goal_completion=calculate_goal_completion(campaign.goals, totals.model_dump()),
        performance_by_influencer=by_influencer,
    )


def _same_figures(cached: dict, snapshot: PerformanceSnapshot) -> bool:
    if not cached:
        return False
    current = snapshot.model_dump(mode="json", exclude={"tracked_at"})
    previous = {k: v for k, v in cached.items() if k != "tracked_at"}
    return previous == current


# ============================================================================
# TRACKER
# ============================================================================

class PerformanceTracker:
    def __init__(self, db: Session, text_generator=None):
        self.db = db
        self.text_generator = text_generator

    def _get_campaign(self, campaign_id: str) -> Campaign:
        campaign = self.db.query(Campaign).filter(Campaign.id == campaign_id).first()
        if not campaign:
            raise NotFoundError("Campaign", campaign_id)
        return campaign

    def approved_content(self, campaign_id: str) -> List[CampaignContent]:
        return (
            self.db.query(CampaignContent)
            .join(CampaignApprovedContent, CampaignApprovedContent.content_id == CampaignContent.id)
            .filter(CampaignApprovedContent.campaign_id == campaign_id)
            .order_by(CampaignApprovedContent.id)
            .all()
        )

    def track_campaign_performance(self, campaign_id: str) -> Union[PerformanceSnapshot, NoContentResult]:
        """
        Recompute campaign performance from approved content.
        Persists a snapshot and caches it on the campaign. Without approved content no snapshot
        is written and any stale cached snapshot is cleared.
        """
        campaign = self._get_campaign(campaign_id)
        contents = self.approved_content(campaign_id)

        if not contents:
            logging.info(f"Campaign {campaign_id} has no approved content to track")
            if campaign.performance:
                campaign.performance = None
                commit_or_raise(self.db, "clear campaign performance")
            return NoContentResult(campaign_id=campaign_id)

        snapshot = compute_snapshot(campaign, contents)

        if _same_figures(campaign.performance, snapshot):
            return PerformanceSnapshot(**campaign.performance)

        snapshot.tracked_at = datetime.utcnow()
        self.db.add(CampaignPerformance(
            campaign_id=campaign_id,
            total_reach=snapshot.total_reach,
            total_engagement=snapshot.total_engagement,
            total_clicks=snapshot.total_clicks,
            total_conversions=snapshot.total_conversions,
            engagement_rate=snapshot.engagement_rate,
            click_through_rate=snapshot.click_through_rate,
            conversion_rate=snapshot.conversion_rate,
            roi=snapshot.roi,
            goal_completion=snapshot.goal_completion,
            performance_by_influencer={k: v.model_dump() for k, v in snapshot.performance_by_influencer.items()},
            tracked_at=snapshot.tracked_at,
        ))
        campaign.performance = snapshot.model_dump(mode="json")
        commit_or_raise(self.db, "track campaign performance")

        logging.info(f"Tracked campaign {campaign_id}: reach={snapshot.total_reach}, roi={snapshot.roi:.2f}")
        return snapshot

    def update_content_metrics(self, content_id: str, metrics) -> CampaignContent:
        """Merge post-publication metrics into a content item. Omitted fields keep their value."""
        update = coerce_model(ContentMetricsUpdate, metrics, "content metrics")

        content = self.db.query(CampaignContent).filter(CampaignContent.id == content_id).first()
        if not content:
            raise NotFoundError("Content", content_id)

        merged = dict(content.performance_metrics or {})
        merged.update(update.model_dump(exclude_none=True))
        content.performance_metrics = merged
        content.metrics_updated_at = datetime.utcnow()

        commit_or_raise(self.db, "update content metrics")
        return content

    # =========================================================================
    # REPORTS
    # =========================================================================

    def _current_snapshot(self, campaign: Campaign) -> PerformanceSnapshot:
        if campaign.performance:
            return PerformanceSnapshot(**campaign.performance)
        result = self.track_campaign_performance(campaign.id)
        if isinstance(result, NoContentResult):
            return PerformanceSnapshot(campaign_id=campaign.id)
        return result

    def _insights(self, campaign: Campaign, snapshot: PerformanceSnapshot,
                  content_summary: List[ContentSummary], influencer_summary: List[InfluencerSummary]) -> CampaignInsights:
        prompt = f"""
        As a marketing analyst, write insights for this influencer marketing campaign.

        Campaign: {campaign.name}
        Brief: {campaign.brief}
        Goals: {json.dumps(campaign.goals or {})}

        Performance:
        {json.dumps(snapshot.model_dump(mode="json"), indent=2)}

        Content:
        {json.dumps([c.model_dump(mode="json") for c in content_summary], indent=2)}

        Influencers:
        {json.dumps([i.model_dump(mode="json") for i in influencer_summary], indent=2)}

        **Output Format:**
        Provide ONLY a JSON object with exactly these keys:
        {{
            "key_highlights": ["..."],
            "top_performing_influencers": ["..."],
            "top_performing_content": ["..."],
            "areas_for_improvement": ["..."],
            "recommendations": ["..."]
        }}
        """
        result = request_structured(
            self.text_generator,
            prompt,
            CampaignInsights,
            CampaignInsights.placeholder(),
            context="campaign report insights",
            max_tokens=1000,
        )
        return result.value

    def generate_campaign_report(self, campaign_id: str) -> CampaignReportResponse:
        """Build a new report for the campaign and point the campaign at it."""
        campaign = self._get_campaign(campaign_id)
        snapshot = self._current_snapshot(campaign)
        contents = self.approved_content(campaign_id)

        content_summary = [
            ContentSummary(
                id=c.id,
                influencer_id=c.influencer_id,
                content_url=c.content_url,
                content_type=c.content_type,
                caption=c.caption,
                performance_metrics=c.performance_metrics,
            )
            for c in contents
        ]

        influencer_ids = list(dict.fromkeys(c.influencer_id for c in contents))
        influencers = {
            i.id: i for i in self.db.query(Influencer).filter(Influencer.id.in_(influencer_ids)).all()
        } if influencer_ids else {}
        influencer_summary = [
            InfluencerSummary(
                id=influencer_id,
                name=influencers[influencer_id].name if influencer_id in influencers else None,
                follower_count=influencers[influencer_id].follower_count if influencer_id in influencers else None,
                engagement_rate=influencers[influencer_id].engagement_rate if influencer_id in influencers else None,
                performance=snapshot.performance_by_influencer.get(influencer_id),
            )
            for influencer_id in influencer_ids
        ]

        insights = self._insights(campaign, snapshot, content_summary, influencer_summary)

        end = campaign.end_date or datetime.utcnow()
        report = CampaignReport(
            campaign_id=campaign_id,
            campaign_name=campaign.name,
            date_range={
                "start": campaign.start_date.isoformat() if campaign.start_date else None,
                "end": end.isoformat(),
            },
            performance=snapshot.model_dump(mode="json"),
            content_summary=[c.model_dump(mode="json") for c in content_summary],
            influencer_summary=[i.model_dump(mode="json") for i in influencer_summary],
            insights=insights.model_dump(),
            generated_at=datetime.utcnow(),
        )
        self.db.add(report)
        self.db.flush()
        campaign.report_id = report.id
        commit_or_raise(self.db, "generate campaign report")

        logging.info(f"Generated report {report.id} for campaign {campaign_id}")
        return CampaignReportResponse.from_record(report)

    def get_campaign_report(self, report_id: str) -> CampaignReportResponse:
        report = self.db.query(CampaignReport).filter(CampaignReport.id == report_id).first()
        if not report:
            raise NotFoundError("Report", report_id)
        return CampaignReportResponse.from_record(report)


def register_report_on_completion(events: EventBus, tracker: PerformanceTracker):
    """Generate a report whenever a campaign moves to completed."""

    def generate_report(event: CampaignStatusChanged):
        if event.new_status == "completed":
            tracker.generate_campaign_report(event.campaign_id)

    events.subscribe(CampaignStatusChanged, generate_report)
    return generate_report
