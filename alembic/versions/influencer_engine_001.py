"""Create influencer engine tables

This migration adds:
1. influencers, influencer_content and influencer_reviews tables
2. influencer_campaigns table with accepted-influencer and approved-content link tables
3. collaboration_requests and negotiation_entries tables
4. campaign_content table
5. campaign_performance and campaign_reports tables
6. notifications table

Revision ID: influencer_engine_001
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision = 'influencer_engine_001'
down_revision = None
branch_labels = None
depends_on = None


# Enum types are created once up front; tables reference them without re-creating
influencer_status = postgresql.ENUM('active', 'inactive', name='influencerstatusdb', create_type=False)
content_type = postgresql.ENUM('photo', 'video', 'carousel', 'text', name='contenttypedb', create_type=False)
campaign_status = postgresql.ENUM('draft', 'pending_approval', 'approved', 'in_progress', 'completed', 'cancelled', name='campaignstatusdb', create_type=False)
collaboration_status = postgresql.ENUM('pending', 'negotiating', 'accepted', 'declined', name='collaborationstatusdb', create_type=False)
content_status = postgresql.ENUM('pending_approval', 'approved', 'rejected', name='campaigncontentstatusdb', create_type=False)
recipient_type = postgresql.ENUM('influencer', 'brand', name='recipienttypedb', create_type=False)

ENUM_TYPES = (influencer_status, content_type, campaign_status, collaboration_status, content_status, recipient_type)


def upgrade():
    bind = op.get_bind()
    for enum_type in ENUM_TYPES:
        enum_type.create(bind, checkfirst=True)

    # 1. Influencer side
    op.create_table('influencers',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('categories', sa.JSON),
        sa.Column('platforms', sa.JSON),
        sa.Column('follower_count', sa.Integer, server_default='0'),
        sa.Column('engagement_rate', sa.Float, server_default='0'),
        sa.Column('audience_demographics', sa.JSON),
        sa.Column('location_country', sa.String(100)),
        sa.Column('rate_card', sa.JSON),
        sa.Column('content_style', sa.String(100)),
        sa.Column('brand_values', sa.JSON),
        sa.Column('status', influencer_status, server_default='active'),
        sa.Column('campaign_history', sa.JSON),
        sa.Column('last_metrics_update', sa.DateTime),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index('ix_influencers_location_country', 'influencers', ['location_country'])
    op.create_index('ix_influencers_status', 'influencers', ['status'])

    op.create_table('influencer_content',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('influencer_id', sa.String(36), nullable=False),
        sa.Column('caption', sa.Text),
        sa.Column('description', sa.Text),
        sa.Column('content_type', content_type, server_default='photo'),
        sa.Column('posted_at', sa.DateTime),
        sa.Column('reach', sa.Integer),
        sa.Column('engagement_metrics', sa.JSON),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index('ix_influencer_content_influencer_id', 'influencer_content', ['influencer_id'])
    op.create_index('ix_influencer_content_posted_at', 'influencer_content', ['posted_at'])

    op.create_table('influencer_reviews',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('influencer_id', sa.String(36), nullable=False),
        sa.Column('brand_id', sa.String(36)),
        sa.Column('rating', sa.Integer, nullable=False),
        sa.Column('comment', sa.Text),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index('ix_influencer_reviews_influencer_id', 'influencer_reviews', ['influencer_id'])

    # 2. Campaigns and link tables
    op.create_table('influencer_campaigns',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('brand_id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('brief', sa.Text, nullable=False),
        sa.Column('categories', sa.JSON),
        sa.Column('platforms', sa.JSON),
        sa.Column('target_audience', sa.JSON),
        sa.Column('collaboration_type', sa.String(50)),
        sa.Column('budget', sa.Float, server_default='0'),
        sa.Column('conversion_value', sa.Float, server_default='0'),
        sa.Column('goals', sa.JSON),
        sa.Column('status', campaign_status, server_default='draft'),
        sa.Column('performance', sa.JSON),
        sa.Column('report_id', sa.String(36)),
        sa.Column('start_date', sa.DateTime),
        sa.Column('end_date', sa.DateTime),
        sa.Column('started_at', sa.DateTime),
        sa.Column('completed_at', sa.DateTime),
        sa.Column('created_at', sa.DateTime),
        sa.Column('updated_at', sa.DateTime),
    )
    op.create_index('ix_influencer_campaigns_brand_id', 'influencer_campaigns', ['brand_id'])
    op.create_index('ix_influencer_campaigns_status', 'influencer_campaigns', ['status'])

    op.create_table('campaign_influencers',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('campaign_id', sa.String(36), sa.ForeignKey('influencer_campaigns.id', ondelete='CASCADE'), nullable=False),
        sa.Column('influencer_id', sa.String(36), nullable=False),
        sa.Column('accepted_at', sa.DateTime),
        sa.UniqueConstraint('campaign_id', 'influencer_id', name='uq_campaign_influencer'),
    )
    op.create_index('ix_campaign_influencers_campaign_id', 'campaign_influencers', ['campaign_id'])

    # 3. Collaboration requests and negotiation log
    op.create_table('collaboration_requests',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('campaign_id', sa.String(36), sa.ForeignKey('influencer_campaigns.id', ondelete='CASCADE'), nullable=False),
        sa.Column('influencer_id', sa.String(36), nullable=False),
        sa.Column('brand_id', sa.String(36), nullable=False),
        sa.Column('status', collaboration_status, server_default='pending'),
        sa.Column('message', sa.Text),
        sa.Column('response_message', sa.Text),
        sa.Column('compensation', sa.JSON),
        sa.Column('requirements', sa.JSON),
        sa.Column('deadline', sa.DateTime),
        sa.Column('counter_offer', sa.JSON),
        sa.Column('created_at', sa.DateTime),
        sa.Column('updated_at', sa.DateTime),
    )
    op.create_index('ix_collaboration_requests_campaign_id', 'collaboration_requests', ['campaign_id'])
    op.create_index('ix_collaboration_requests_influencer_id', 'collaboration_requests', ['influencer_id'])

    op.create_table('negotiation_entries',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('request_id', sa.String(36), sa.ForeignKey('collaboration_requests.id', ondelete='CASCADE'), nullable=False),
        sa.Column('offered_by', recipient_type, nullable=False),
        sa.Column('terms', sa.JSON, nullable=False),
        sa.Column('timestamp', sa.DateTime),
    )
    op.create_index('ix_negotiation_entries_request_id', 'negotiation_entries', ['request_id'])

    # 4. Submitted content
    op.create_table('campaign_content',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('campaign_id', sa.String(36), sa.ForeignKey('influencer_campaigns.id', ondelete='CASCADE'), nullable=False),
        sa.Column('influencer_id', sa.String(36), nullable=False),
        sa.Column('content_url', sa.String(500), nullable=False),
        sa.Column('content_type', sa.String(50)),
        sa.Column('caption', sa.Text),
        sa.Column('platform', sa.String(50)),
        sa.Column('status', content_status, server_default='pending_approval'),
        sa.Column('feedback', sa.Text),
        sa.Column('performance_metrics', sa.JSON),
        sa.Column('metrics_updated_at', sa.DateTime),
        sa.Column('submitted_at', sa.DateTime),
        sa.Column('reviewed_at', sa.DateTime),
    )
    op.create_index('ix_campaign_content_campaign_id', 'campaign_content', ['campaign_id'])
    op.create_index('ix_campaign_content_influencer_id', 'campaign_content', ['influencer_id'])

    op.create_table('campaign_approved_content',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('campaign_id', sa.String(36), sa.ForeignKey('influencer_campaigns.id', ondelete='CASCADE'), nullable=False),
        sa.Column('content_id', sa.String(36), sa.ForeignKey('campaign_content.id', ondelete='CASCADE'), nullable=False),
        sa.Column('approved_at', sa.DateTime),
        sa.UniqueConstraint('campaign_id', 'content_id', name='uq_campaign_approved_content'),
    )
    op.create_index('ix_campaign_approved_content_campaign_id', 'campaign_approved_content', ['campaign_id'])

    # 5. Performance snapshots and reports
    op.create_table('campaign_performance',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('campaign_id', sa.String(36), sa.ForeignKey('influencer_campaigns.id', ondelete='CASCADE'), nullable=False),
        sa.Column('total_reach', sa.Integer, server_default='0'),
        sa.Column('total_engagement', sa.Integer, server_default='0'),
        sa.Column('total_clicks', sa.Integer, server_default='0'),
        sa.Column('total_conversions', sa.Integer, server_default='0'),
        sa.Column('engagement_rate', sa.Float, server_default='0'),
        sa.Column('click_through_rate', sa.Float, server_default='0'),
        sa.Column('conversion_rate', sa.Float, server_default='0'),
        sa.Column('roi', sa.Float, server_default='0'),
        sa.Column('goal_completion', sa.Float, server_default='0'),
        sa.Column('performance_by_influencer', sa.JSON),
        sa.Column('tracked_at', sa.DateTime),
    )
    op.create_index('ix_campaign_performance_campaign_id', 'campaign_performance', ['campaign_id'])

    op.create_table('campaign_reports',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('campaign_id', sa.String(36), sa.ForeignKey('influencer_campaigns.id', ondelete='CASCADE'), nullable=False),
        sa.Column('campaign_name', sa.String(255)),
        sa.Column('date_range', sa.JSON),
        sa.Column('performance', sa.JSON),
        sa.Column('content_summary', sa.JSON),
        sa.Column('influencer_summary', sa.JSON),
        sa.Column('insights', sa.JSON),
        sa.Column('generated_at', sa.DateTime),
    )
    op.create_index('ix_campaign_reports_campaign_id', 'campaign_reports', ['campaign_id'])

    # 6. Notifications
    op.create_table('notifications',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('recipient_type', recipient_type, nullable=False),
        sa.Column('recipient_id', sa.String(36), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('message', sa.Text),
        sa.Column('data', sa.JSON),
        sa.Column('read', sa.Boolean, server_default=sa.false()),
        sa.Column('read_at', sa.DateTime),
        sa.Column('created_at', sa.DateTime),
    )
    op.create_index('ix_notifications_recipient_id', 'notifications', ['recipient_id'])


def downgrade():
    op.drop_table('notifications')
    op.drop_table('campaign_reports')
    op.drop_table('campaign_performance')
    op.drop_table('campaign_approved_content')
    op.drop_table('campaign_content')
    op.drop_table('negotiation_entries')
    op.drop_table('collaboration_requests')
    op.drop_table('campaign_influencers')
    op.drop_table('influencer_campaigns')
    op.drop_table('influencer_reviews')
    op.drop_table('influencer_content')
    op.drop_table('influencers')

    bind = op.get_bind()
    for enum_type in reversed(ENUM_TYPES):
        enum_type.drop(bind, checkfirst=True)
