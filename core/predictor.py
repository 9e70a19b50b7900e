"""
Performance prediction from an influencer's content samples and campaign history.
"""

from typing import Iterable, List

from schemas.analytics import PerformancePrediction, PredictionMetrics
from schemas.marketplace import CollaborationType

TYPE_CONFIDENCE_PER_CAMPAIGN = 20
OVERALL_CONFIDENCE_PER_CAMPAIGN = 10
NO_HISTORY_CONFIDENCE = 30


def total_engagement(metrics) -> int:
    """Likes + comments + shares of one content item."""
    if not metrics:
        return 0
    return (metrics.get("likes") or 0) + (metrics.get("comments") or 0) + (metrics.get("shares") or 0)


def average_engagement_rate(samples: Iterable, follower_count: int, fallback_rate: float = 0.0) -> float:
    """Σengagement / Σreach over samples with metrics; reach defaults to the follower count."""
    engagement = 0
    reach = 0
    for sample in samples:
        if not sample.engagement_metrics:
            continue
        engagement += total_engagement(sample.engagement_metrics)
        reach += sample.reach or follower_count or 0
    return engagement / reach if reach > 0 else fallback_rate


def _completed_with_performance(history) -> List[dict]:
    return [
        c for c in (history or [])
        if c.get("status") == "completed" and c.get("performance")
    ]


def _averages(campaigns: List[dict]):
    if not campaigns:
        return 0.0, 0.0
    goal_completion = sum((c["performance"].get("goal_completion_rate") or 0) for c in campaigns) / len(campaigns)
    roi = sum((c["performance"].get("roi") or 0) for c in campaigns) / len(campaigns)
    return goal_completion, roi


def predict_performance(profile, content_samples) -> PerformancePrediction:
    """
    Forecast engagement, goal completion and ROI, overall and per collaboration type.
    Types without history fall back to the overall averages at low confidence.
    """
    engagement_rate = average_engagement_rate(
        content_samples,
        profile.follower_count,
        fallback_rate=profile.engagement_rate or 0.0,
    )

    completed = _completed_with_performance(profile.campaign_history)
    overall_goal_completion, overall_roi = _averages(completed)

    performance_by_type = {}
    for collaboration_type in CollaborationType:
        typed = [c for c in completed if c.get("collaboration_type") == collaboration_type.value]
        if typed:
            goal_completion, roi = _averages(typed)
            confidence = min(100, len(typed) * TYPE_CONFIDENCE_PER_CAMPAIGN)
        else:
            goal_completion, roi = overall_goal_completion, overall_roi
            confidence = NO_HISTORY_CONFIDENCE

        performance_by_type[collaboration_type.value] = PredictionMetrics(
            predicted_engagement_rate=engagement_rate,
            predicted_goal_completion=goal_completion,
            predicted_roi=roi,
            confidence_score=confidence,
        )

    return PerformancePrediction(
        overall_prediction=PredictionMetrics(
            predicted_engagement_rate=engagement_rate,
            predicted_goal_completion=overall_goal_completion,
            predicted_roi=overall_roi,
            confidence_score=min(100, len(completed) * OVERALL_CONFIDENCE_PER_CAMPAIGN),
        ),
        performance_by_type=performance_by_type,
    )
