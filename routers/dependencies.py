# Router Dependencies
# One engine per request, built on the request's database session

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from core.engine import InfluencerEngine, build_engine
from database.config import get_db


def get_engine(request: Request, db: Session = Depends(get_db)) -> InfluencerEngine:
    """
    FastAPI dependency returning the engine components for this request.
    Usage: engine: InfluencerEngine = Depends(get_engine)
    """
    return build_engine(db, getattr(request.app.state, "text_generator", None))
