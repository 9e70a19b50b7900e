"""Pytest configuration and shared fixtures."""

import sys
from datetime import datetime
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from core.engine import build_engine
from core.errors import ExternalServiceError
from database.config import create_db_engine, create_session_factory, init_db
from database.models import Influencer, ContentSample, ContentTypeDB, InfluencerStatusDB
from services.events import EventBus


class FakeTextGenerator:
    """Scripted stand-in for the Gemini/OpenAI client. Records every prompt it receives."""

    def __init__(self, responses=None, default="", error=None):
        self.responses = list(responses or [])
        self.default = default
        self.error = error
        self.calls = []

    @property
    def available(self):
        return True

    def generate(self, prompt, max_tokens=800, temperature=0.3, response_format="json_object"):
        self.calls.append({"prompt": prompt, "max_tokens": max_tokens, "temperature": temperature})
        if self.error:
            raise ExternalServiceError(self.error)
        if self.responses:
            return self.responses.pop(0)
        return self.default


@pytest.fixture
def db_engine():
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return create_session_factory(db_engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def generator():
    return FakeTextGenerator()


@pytest.fixture
def events():
    return EventBus()


@pytest.fixture
def engine(db, generator, events):
    return build_engine(db, generator, events)


# =============================================================================
# Factories
# =============================================================================


@pytest.fixture
def make_influencer(db):
    def _make(**overrides):
        data = {
            "name": "Test Influencer",
            "categories": ["fitness"],
            "platforms": ["instagram"],
            "follower_count": 10000,
            "engagement_rate": 0.02,
            "audience_demographics": {"primary_age_range": "18-24", "primary_gender": "female"},
            "location_country": "US",
            "rate_card": {"average_post_rate": 500},
            "content_style": "energetic",
            "brand_values": ["health"],
            "status": InfluencerStatusDB.ACTIVE,
            "campaign_history": [],
        }
        data.update(overrides)
        influencer = Influencer(**data)
        db.add(influencer)
        db.commit()
        return influencer

    return _make


@pytest.fixture
def make_sample(db):
    def _make(influencer_id, likes=0, comments=0, shares=0, reach=None,
              posted_at=None, content_type=ContentTypeDB.PHOTO, caption="Morning workout #fitness"):
        sample = ContentSample(
            influencer_id=influencer_id,
            caption=caption,
            content_type=content_type,
            posted_at=posted_at or datetime(2024, 1, 7, 18, 0),
            reach=reach,
            engagement_metrics={"likes": likes, "comments": comments, "shares": shares},
        )
        db.add(sample)
        db.commit()
        return sample

    return _make


@pytest.fixture
def launch_campaign(engine):
    """Create a campaign with every listed influencer invited and accepted."""

    def _launch(influencer_ids, **overrides):
        data = {
            "brand_id": "brand-1",
            "name": "Spring Launch",
            "brief": "Promote the spring collection",
            "categories": ["fitness"],
            "platforms": ["instagram"],
            "budget": 1000,
            "conversion_value": 50,
            "influencers": list(influencer_ids),
        }
        data.update(overrides)
        campaign = engine.campaigns.create_campaign(data)
        for request in list(campaign.collaboration_requests):
            engine.campaigns.update_collaboration_request_status(request.id, "accepted", "Happy to join")
        return campaign

    return _launch


@pytest.fixture
def publish_content(engine):
    """Submit, approve and record metrics for one piece of content."""

    def _publish(campaign, influencer_id, **metrics):
        content = engine.campaigns.submit_campaign_content(
            campaign.id, influencer_id, {"content_url": f"https://instagram.com/p/{influencer_id}"}
        )
        engine.campaigns.review_campaign_content(content.id, "approved", "Looks great")
        if metrics:
            engine.performance.update_content_metrics(content.id, metrics)
        return content

    return _publish


@pytest.fixture
def make_generator():
    """Build a FakeTextGenerator with scripted responses."""
    return FakeTextGenerator
