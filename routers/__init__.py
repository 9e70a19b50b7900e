# Influencer Engine Routers Module
# Exports all modular API routers

from routers.influencers import router as influencers_router
from routers.campaigns import router as campaigns_router
from routers.collaborations import router as collaborations_router
from routers.content import router as content_router
from routers.notifications import router as notifications_router

__all__ = [
    'influencers_router',
    'campaigns_router',
    'collaborations_router',
    'content_router',
    'notifications_router',
]
