"""
Influencer discovery: filtering, relevance scoring and campaign recommendations.
"""

from dataclasses import dataclass
from typing import List
import logging

from sqlalchemy.orm import Session

from config.app_config import DEFAULT_RECOMMENDATION_COUNT
from core.validation import coerce_model
from database.models import Influencer, InfluencerStatusDB
from schemas.marketplace import (
    InfluencerSearchCriteria,
    CampaignProfile,
    InfluencerRecommendation,
    InfluencerResponse,
    SortBy,
    TargetAudience,
)

BASE_SCORE = 50
CATEGORY_WEIGHT = 20
PLATFORM_WEIGHT = 15
AGE_MATCH_BONUS = 10
GENDER_MATCH_BONUS = 5
HISTORY_BONUS_PER_CAMPAIGN = 2
HISTORY_BONUS_CAP = 10


@dataclass
class InfluencerMatch:
    influencer: Influencer
    relevance_score: float

    def to_response(self) -> InfluencerResponse:
        response = InfluencerResponse.model_validate(self.influencer)
        response.relevance_score = self.relevance_score
        return response


def _target_audience(criteria: InfluencerSearchCriteria) -> TargetAudience:
    if criteria.target_audience:
        return criteria.target_audience
    return TargetAudience(
        primary_age_range=criteria.audience_age_range,
        primary_gender=criteria.audience_gender,
    )


def _engagement_bonus(engagement_rate: float) -> int:
    if engagement_rate > 0.05:
        return 10
    if engagement_rate > 0.03:
        return 5
    return 0


def calculate_relevance_score(influencer: Influencer, criteria: InfluencerSearchCriteria) -> float:
    """Weighted match quality between an influencer and search criteria, clamped to [0, 100]."""
    score = float(BASE_SCORE)

    influencer_categories = set(influencer.categories or [])
    if criteria.categories:
        matches = sum(1 for c in criteria.categories if c in influencer_categories)
        score += CATEGORY_WEIGHT * matches / len(criteria.categories)

    influencer_platforms = set(influencer.platforms or [])
    if criteria.platforms:
        matches = sum(1 for p in criteria.platforms if p in influencer_platforms)
        score += PLATFORM_WEIGHT * matches / len(criteria.platforms)

    score += _engagement_bonus(influencer.engagement_rate or 0)

    target = _target_audience(criteria)
    if target.primary_age_range and target.primary_age_range == influencer.primary_age_range:
        score += AGE_MATCH_BONUS
    if target.primary_gender and target.primary_gender == influencer.primary_gender:
        score += GENDER_MATCH_BONUS

    successful = [
        c for c in (influencer.campaign_history or [])
        if (c.get("performance") or {}).get("goal_achieved")
    ]
    if successful:
        score += min(HISTORY_BONUS_CAP, len(successful) * HISTORY_BONUS_PER_CAMPAIGN)

    return max(0.0, min(100.0, score))


class InfluencerMatcher:
    def __init__(self, db: Session):
        self.db = db

    def search(self, criteria) -> List[InfluencerMatch]:
        """
        Find active influencers matching the criteria.
        Every match carries a relevance score; results follow criteria.sort_by, descending.
        """
        criteria = coerce_model(InfluencerSearchCriteria, criteria, "search criteria")

        query = self.db.query(Influencer).filter(Influencer.status == InfluencerStatusDB.ACTIVE)

        if criteria.location:
            query = query.filter(Influencer.location_country == criteria.location)
        if criteria.min_followers:
            query = query.filter(Influencer.follower_count >= criteria.min_followers)
        if criteria.max_followers:
            query = query.filter(Influencer.follower_count <= criteria.max_followers)
        if criteria.min_engagement_rate:
            query = query.filter(Influencer.engagement_rate >= criteria.min_engagement_rate)

        matches = []
        for influencer in query.order_by(Influencer.created_at, Influencer.name).all():
            if not self._passes_filters(influencer, criteria):
                continue
            matches.append(InfluencerMatch(influencer, calculate_relevance_score(influencer, criteria)))

        if criteria.sort_by == SortBy.FOLLOWER_COUNT:
            matches.sort(key=lambda m: m.influencer.follower_count or 0, reverse=True)
        elif criteria.sort_by == SortBy.ENGAGEMENT_RATE:
            matches.sort(key=lambda m: m.influencer.engagement_rate or 0, reverse=True)
        elif criteria.sort_by == SortBy.RELEVANCE_SCORE:
            matches.sort(key=lambda m: m.relevance_score, reverse=True)

        logging.info(f"Influencer search matched {len(matches)} influencers")
        return matches

    @staticmethod
    def _passes_filters(influencer: Influencer, criteria: InfluencerSearchCriteria) -> bool:
        # array-contains-any
        if criteria.categories and not set(criteria.categories) & set(influencer.categories or []):
            return False
        if criteria.platforms and not set(criteria.platforms) & set(influencer.platforms or []):
            return False

        if criteria.audience_age_range and influencer.primary_age_range != criteria.audience_age_range:
            return False
        if criteria.audience_gender and influencer.primary_gender != criteria.audience_gender:
            return False

        rate = influencer.average_post_rate
        if criteria.max_budget and rate is not None and rate > criteria.max_budget:
            return False
        return True

    def recommend_influencers(self, campaign_data, count: int = DEFAULT_RECOMMENDATION_COUNT) -> List[InfluencerRecommendation]:
        """
        Recommend the most relevant influencers for a campaign.
        Broadens the search (drops location and demographics) when too few match.
        """
        campaign = coerce_model(CampaignProfile, campaign_data, "campaign")
        audience_size = campaign.audience_size
        audience = campaign.target_audience

        criteria = InfluencerSearchCriteria(
            categories=campaign.categories,
            platforms=campaign.platforms,
            min_followers=audience_size.min if audience_size else None,
            max_followers=audience_size.max if audience_size else None,
            location=campaign.target_location,
            audience_age_range=audience.age_range if audience else None,
            audience_gender=audience.gender if audience else None,
            max_budget=campaign.budget,
            sort_by=SortBy.RELEVANCE_SCORE,
        )

        matches = self.search(criteria)

        if len(matches) < count:
            broadened = criteria.model_copy(update={
                "location": None,
                "audience_age_range": None,
                "audience_gender": None,
            })
            existing_ids = {m.influencer.id for m in matches}
            for match in self.search(broadened):
                if match.influencer.id not in existing_ids:
                    # Score against the original targeting so demographic matches still rank higher
                    match.relevance_score = calculate_relevance_score(match.influencer, criteria)
                    matches.append(match)
                    existing_ids.add(match.influencer.id)
            logging.info(f"Broadened recommendation search to {len(matches)} candidates")

        matches.sort(key=lambda m: m.relevance_score, reverse=True)

        return [
            InfluencerRecommendation(
                id=m.influencer.id,
                name=m.influencer.name,
                follower_count=m.influencer.follower_count or 0,
                engagement_rate=m.influencer.engagement_rate or 0.0,
                categories=m.influencer.categories or [],
                platforms=m.influencer.platforms or [],
                relevance_score=m.relevance_score,
                estimated_reach=m.influencer.follower_count or 0,
                estimated_engagement=round((m.influencer.follower_count or 0) * (m.influencer.engagement_rate or 0)),
                rate_card=m.influencer.rate_card,
            )
            for m in matches[:count]
        ]
