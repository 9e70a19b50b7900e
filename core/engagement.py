"""
Influencer engagement analysis.

Builds influencer profiles, computes posting-time/content-type engagement
patterns, asks the text generator for content themes and brand alignment,
refreshes stored engagement rates and ingests content samples.
"""

from datetime import datetime
from typing import List
import logging

from sqlalchemy.orm import Session

from config.app_config import (
    ANALYSIS_SAMPLE_LIMIT,
    PROFILE_SAMPLE_LIMIT,
    PROFILE_CAMPAIGN_LIMIT,
    PROFILE_REVIEW_LIMIT,
)
from core.ai_parsing import request_structured
from core.errors import NotFoundError
from core.predictor import average_engagement_rate, predict_performance, total_engagement
from core.validation import coerce_model
from database.config import commit_or_raise
from database.models import Influencer, ContentSample, ContentTypeDB, InfluencerReview
from database.marketplace_models import Campaign, CampaignInfluencer, CampaignStatusDB
from schemas.analytics import (
    BestPostingTime,
    BrandAlignment,
    ContentThemes,
    EngagementPatterns,
    InfluencerAnalysis,
    MetricsRefreshResult,
)
from schemas.marketplace import (
    ContentSampleCreate,
    ContentSampleResponse,
    InfluencerProfileResponse,
    ReviewResponse,
)

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
CONTENT_TYPES = [t.value for t in ContentTypeDB]


def get_day_name(day: int) -> str:
    """Day name for 0-6 where 0 is Sunday."""
    return DAY_NAMES[day] if 0 <= day < len(DAY_NAMES) else "Unknown"


def format_hour(hour: int) -> str:
    """24-hour clock hour as '12 AM', '3 PM', ..."""
    if hour == 0:
        return "12 AM"
    if hour == 12:
        return "12 PM"
    return f"{hour} AM" if hour < 12 else f"{hour - 12} PM"


def _sunday_based_weekday(moment: datetime) -> int:
    return (moment.weekday() + 1) % 7


def _best_bucket(averages: dict, default):
    # Strictly greater keeps the first bucket on ties
    best, best_value = default, 0
    for key, value in averages.items():
        if value > best_value:
            best, best_value = key, value
    return best


def _content_text(samples) -> str:
    return "\n\n".join(sample.text for sample in samples)


def analyze_engagement_patterns(content_samples) -> EngagementPatterns:
    """Average engagement per day of week, hour of day and content type."""
    by_day = {day: [0, 0] for day in range(7)}
    by_hour = {hour: [0, 0] for hour in range(24)}
    by_type = {content_type: [0, 0] for content_type in CONTENT_TYPES}

    for sample in content_samples:
        if not sample.posted_at or not sample.engagement_metrics:
            continue

        engagement = total_engagement(sample.engagement_metrics)

        day = _sunday_based_weekday(sample.posted_at)
        by_day[day][0] += 1
        by_day[day][1] += engagement

        by_hour[sample.posted_at.hour][0] += 1
        by_hour[sample.posted_at.hour][1] += engagement

        content_type = sample.content_type.value if sample.content_type else ContentTypeDB.PHOTO.value
        if content_type in by_type:
            by_type[content_type][0] += 1
            by_type[content_type][1] += engagement

    def averages(buckets):
        return {key: (total / count if count > 0 else 0.0) for key, (count, total) in buckets.items()}

    day_averages = averages(by_day)
    hour_averages = averages(by_hour)
    type_averages = averages(by_type)

    return EngagementPatterns(
        engagement_by_day_of_week=day_averages,
        engagement_by_hour=hour_averages,
        engagement_by_content_type=type_averages,
        best_posting_time=BestPostingTime(
            day=get_day_name(_best_bucket(day_averages, 0)),
            hour=format_hour(_best_bucket(hour_averages, 0)),
            content_type=_best_bucket(type_averages, ContentTypeDB.PHOTO.value),
        ),
    )


class EngagementAnalyzer:
    def __init__(self, db: Session, text_generator=None):
        self.db = db
        self.text_generator = text_generator

    # =========================================================================
    # LOOKUPS
    # =========================================================================

    def get_influencer(self, influencer_id: str) -> Influencer:
        influencer = self.db.query(Influencer).filter(Influencer.id == influencer_id).first()
        if not influencer:
            raise NotFoundError("Influencer", influencer_id)
        return influencer

    def recent_samples(self, influencer_id: str, limit: int = ANALYSIS_SAMPLE_LIMIT) -> List[ContentSample]:
        return (
            self.db.query(ContentSample)
            .filter(ContentSample.influencer_id == influencer_id)
            .order_by(ContentSample.posted_at.desc().nulls_last())
            .limit(limit)
            .all()
        )

    def get_influencer_profile(self, influencer_id: str) -> InfluencerProfileResponse:
        """Influencer with recent content, completed campaigns and reviews."""
        influencer = self.get_influencer(influencer_id)

        completed = (
            self.db.query(Campaign)
            .join(CampaignInfluencer, CampaignInfluencer.campaign_id == Campaign.id)
            .filter(
                CampaignInfluencer.influencer_id == influencer_id,
                Campaign.status == CampaignStatusDB.COMPLETED,
            )
            .order_by(Campaign.completed_at.desc().nulls_last())
            .limit(PROFILE_CAMPAIGN_LIMIT)
            .all()
        )

        reviews = (
            self.db.query(InfluencerReview)
            .filter(InfluencerReview.influencer_id == influencer_id)
            .order_by(InfluencerReview.created_at.desc())
            .limit(PROFILE_REVIEW_LIMIT)
            .all()
        )
        average_rating = sum(r.rating for r in reviews) / len(reviews) if reviews else 0.0

        profile = InfluencerProfileResponse.model_validate(influencer)
        profile.content_style = influencer.content_style
        profile.brand_values = influencer.brand_values or []
        profile.campaign_history = influencer.campaign_history or []
        profile.content_samples = [
            ContentSampleResponse.model_validate(s)
            for s in self.recent_samples(influencer_id, PROFILE_SAMPLE_LIMIT)
        ]
        profile.completed_campaigns = [
            {
                "id": c.id,
                "name": c.name,
                "brand_id": c.brand_id,
                "completed_at": c.completed_at.isoformat() if c.completed_at else None,
                "performance": c.performance,
            }
            for c in completed
        ]
        profile.reviews = [ReviewResponse.model_validate(r) for r in reviews]
        profile.average_rating = average_rating
        return profile

    # =========================================================================
    # ANALYSIS
    # =========================================================================

    def analyze_content_themes(self, content_samples) -> ContentThemes:
        prompt = f"""
        As a content analyst, analyze these social media posts from an influencer:

        {_content_text(content_samples)}

        Identify:
        1. Main themes and topics
        2. Content style and tone
        3. Recurring hashtags or phrases
        4. Types of content that receive highest engagement

        **Output Format:**
        Provide ONLY a JSON object with exactly these keys:
        {{
            "themes": ["..."],
            "style": "...",
            "recurring_elements": ["..."],
            "high_engagement_content": ["..."]
        }}
        """
        result = request_structured(
            self.text_generator,
            prompt,
            ContentThemes,
            ContentThemes.placeholder(),
            context="content theme analysis",
        )
        return result.value

    def analyze_brand_alignment(self, profile: Influencer, content_samples) -> BrandAlignment:
        categories = profile.categories or []
        values = profile.brand_values or []
        tone = profile.content_style or "Not specified"

        prompt = f"""
        As a brand alignment specialist, analyze this influencer's content:

        Content: "{_content_text(content_samples)}"

        Influencer Categories: {', '.join(categories)}
        Content Tone: {tone}
        Brand Values: {', '.join(values)}

        Analyze:
        1. Brand categories this influencer would align well with
        2. Brand categories to avoid
        3. Authenticity assessment from 0 to 10 (how genuine the influencer appears)
        4. Values expressed in content
        5. Potential red flags for brands (controversial content, etc.)

        **Output Format:**
        Provide ONLY a JSON object with exactly these keys:
        {{
            "aligned_brand_categories": ["..."],
            "brand_categories_to_avoid": ["..."],
            "authenticity_score": 0,
            "expressed_values": ["..."],
            "potential_red_flags": ["..."]
        }}
        """
        result = request_structured(
            self.text_generator,
            prompt,
            BrandAlignment,
            BrandAlignment.placeholder(categories, values),
            context="brand alignment analysis",
        )
        return result.value

    def analyze_engagement_patterns(self, content_samples) -> EngagementPatterns:
        return analyze_engagement_patterns(content_samples)

    def analyze_influencer(self, influencer_id: str) -> InfluencerAnalysis:
        """Full analysis of an influencer from their most recent content."""
        profile = self.get_influencer(influencer_id)
        samples = self.recent_samples(influencer_id, ANALYSIS_SAMPLE_LIMIT)
        logging.info(f"Analyzing influencer {influencer_id} from {len(samples)} content samples")

        return InfluencerAnalysis(
            influencer_id=influencer_id,
            influencer_name=profile.name,
            content_analysis=self.analyze_content_themes(samples),
            engagement_analysis=self.analyze_engagement_patterns(samples),
            brand_alignment_analysis=self.analyze_brand_alignment(profile, samples),
            performance_prediction=predict_performance(profile, samples),
            analyzed_at=datetime.utcnow(),
        )

    # =========================================================================
    # METRICS & INGESTION
    # =========================================================================

    def update_influencer_metrics(self, influencer_id: str) -> MetricsRefreshResult:
        """Recompute the stored engagement rate from the most recent content."""
        influencer = self.get_influencer(influencer_id)
        samples = self.recent_samples(influencer_id, ANALYSIS_SAMPLE_LIMIT)

        if not samples:
            return MetricsRefreshResult(
                influencer_id=influencer_id,
                status="no_content",
                message="No recent content to analyze",
            )

        now = datetime.utcnow()
        influencer.engagement_rate = average_engagement_rate(samples, influencer.follower_count)
        influencer.last_metrics_update = now
        commit_or_raise(self.db, "update influencer metrics")

        return MetricsRefreshResult(
            influencer_id=influencer_id,
            status="updated",
            engagement_rate=influencer.engagement_rate,
            updated_at=now,
        )

    def ingest_content_sample(self, influencer_id: str, data) -> ContentSample:
        """Append a content sample pulled from a social platform."""
        self.get_influencer(influencer_id)
        sample_data = coerce_model(ContentSampleCreate, data, "content sample")

        sample = ContentSample(
            influencer_id=influencer_id,
            caption=sample_data.caption,
            description=sample_data.description,
            content_type=ContentTypeDB(sample_data.content_type.value),
            posted_at=sample_data.posted_at,
            reach=sample_data.reach,
            engagement_metrics=sample_data.engagement_metrics.model_dump() if sample_data.engagement_metrics else None,
        )
        self.db.add(sample)
        commit_or_raise(self.db, "ingest content sample")
        self.db.refresh(sample)
        return sample
