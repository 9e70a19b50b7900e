"""
Batch entry points run by the API scheduler and the worker CLI.

Each item gets its own session; a failing item is logged and the batch moves on.
"""

from typing import Callable, List
import logging

from sqlalchemy.orm import sessionmaker

from config.app_config import BATCH_LIMIT
from core.engagement import EngagementAnalyzer
from core.performance import PerformanceTracker
from database.config import get_db_context
from database.models import Influencer, InfluencerStatusDB
from database.marketplace_models import Campaign, CampaignStatusDB


def _run_batch(session_factory: sessionmaker, ids: List[str], label: str, work: Callable) -> dict:
    summary = {"processed": 0, "succeeded": 0, "failed": 0}

    for item_id in ids:
        summary["processed"] += 1
        try:
            with get_db_context(session_factory) as db:
                work(db, item_id)
            summary["succeeded"] += 1
        except Exception as e:
            summary["failed"] += 1
            logging.error(f"{label} failed for {item_id}: {e}")

    logging.info(f"{label} finished: {summary['succeeded']}/{summary['processed']} succeeded")
    return summary


def run_metrics_refresh(session_factory: sessionmaker, text_generator=None, limit: int = BATCH_LIMIT) -> dict:
    """Refresh engagement rates of active influencers."""
    with get_db_context(session_factory) as db:
        ids = [
            row.id for row in
            db.query(Influencer.id)
            .filter(Influencer.status == InfluencerStatusDB.ACTIVE)
            .order_by(Influencer.last_metrics_update.asc().nulls_first(), Influencer.id)
            .limit(limit)
            .all()
        ]

    logging.info(f"Starting metrics refresh for {len(ids)} influencers")
    return _run_batch(
        session_factory,
        ids,
        "Metrics refresh",
        lambda db, influencer_id: EngagementAnalyzer(db, text_generator).update_influencer_metrics(influencer_id),
    )


def run_performance_tracking(session_factory: sessionmaker, text_generator=None, limit: int = BATCH_LIMIT) -> dict:
    """Recompute performance of in-progress campaigns."""
    with get_db_context(session_factory) as db:
        ids = [
            row.id for row in
            db.query(Campaign.id)
            .filter(Campaign.status == CampaignStatusDB.IN_PROGRESS)
            .order_by(Campaign.started_at, Campaign.id)
            .limit(limit)
            .all()
        ]

    logging.info(f"Starting performance tracking for {len(ids)} campaigns")
    return _run_batch(
        session_factory,
        ids,
        "Performance tracking",
        lambda db, campaign_id: PerformanceTracker(db, text_generator).track_campaign_performance(campaign_id),
    )
