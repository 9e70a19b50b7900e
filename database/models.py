# Database Models for the Influencer Engine
# Influencer-side records: profiles, ingested content samples and reviews

from sqlalchemy import Column, String, Integer, DateTime, Text, JSON, Enum, Float
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.sql import func
import uuid
import enum

Base = declarative_base()

def generate_uuid():
    return str(uuid.uuid4())

# Enums
class InfluencerStatusDB(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class ContentTypeDB(str, enum.Enum):
    PHOTO = "photo"
    VIDEO = "video"
    CAROUSEL = "carousel"
    TEXT = "text"


# Models
class Influencer(Base):
    """Influencer profile as seen by discovery and scoring."""
    __tablename__ = "influencers"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)

    categories = Column(JSON, default=list)  # ["fitness", "travel"]
    platforms = Column(JSON, default=list)  # ["instagram", "tiktok"]
    follower_count = Column(Integer, default=0)
    engagement_rate = Column(Float, default=0.0)

    # {"primary_age_range": "18-24", "primary_gender": "female"}
    audience_demographics = Column(JSON, default=dict)
    location_country = Column(String(100), index=True)
    rate_card = Column(JSON, default=dict)  # {"average_post_rate": 500}

    # Brand alignment context
    content_style = Column(String(100))
    brand_values = Column(JSON, default=list)

    status = Column(Enum(InfluencerStatusDB, values_callable=lambda x: [e.value for e in x], name="influencerstatusdb"), default=InfluencerStatusDB.ACTIVE, index=True)

    # Denormalized summaries of past campaigns:
    # {"campaign_id", "status", "collaboration_type",
    #  "performance": {"goal_completion_rate", "roi", "goal_achieved"}}
    campaign_history = Column(JSON, default=list)

    last_metrics_update = Column(DateTime)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    @property
    def primary_age_range(self):
        return (self.audience_demographics or {}).get("primary_age_range")

    @property
    def primary_gender(self):
        return (self.audience_demographics or {}).get("primary_gender")

    @property
    def average_post_rate(self):
        return (self.rate_card or {}).get("average_post_rate")


class ContentSample(Base):
    """A published post pulled from a social platform. Append-only."""
    __tablename__ = "influencer_content"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    # Weak reference: samples may outlive or precede the profile
    influencer_id = Column(String(36), nullable=False, index=True)

    caption = Column(Text)
    description = Column(Text)
    content_type = Column(Enum(ContentTypeDB, values_callable=lambda x: [e.value for e in x], name="contenttypedb"), default=ContentTypeDB.PHOTO)
    posted_at = Column(DateTime, index=True)
    reach = Column(Integer)
    engagement_metrics = Column(JSON)  # {"likes", "comments", "shares"}

    created_at = Column(DateTime, server_default=func.now())

    @property
    def text(self):
        return self.caption or self.description or ""


class InfluencerReview(Base):
    """Brand reviews left for an influencer after a collaboration."""
    __tablename__ = "influencer_reviews"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    influencer_id = Column(String(36), nullable=False, index=True)
    brand_id = Column(String(36))

    rating = Column(Integer, nullable=False)  # 1-5
    comment = Column(Text)

    created_at = Column(DateTime, server_default=func.now())
