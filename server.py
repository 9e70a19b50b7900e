# FastAPI Server for the Influencer Engine
# Run with: uvicorn server:create_app --factory

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
import logging

from config.app_config import ENABLE_SCHEDULER, METRICS_REFRESH_HOURS, PERFORMANCE_TRACKING_HOURS
from core.errors import NotFoundError, ValidationError, PermissionDenied, PersistenceError
from core.generator import TextGenerator
from core.jobs import run_metrics_refresh, run_performance_tracking
from database.config import create_db_engine, create_session_factory, init_db
from routers import (
    influencers_router,
    campaigns_router,
    collaborations_router,
    content_router,
    notifications_router,
)


def _register_exception_handlers(app: FastAPI):
    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": exc.message})

    @app.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"detail": exc.message})

    @app.exception_handler(PermissionDenied)
    async def permission_handler(request: Request, exc: PermissionDenied):
        return JSONResponse(status_code=403, content={"detail": exc.message})

    @app.exception_handler(PersistenceError)
    async def persistence_handler(request: Request, exc: PersistenceError):
        logging.error(f"Persistence failure on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    @app.exception_handler(SQLAlchemyError)
    async def database_handler(request: Request, exc: SQLAlchemyError):
        logging.error(f"Database error on {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def _start_scheduler(app: FastAPI):
    from apscheduler.schedulers.background import BackgroundScheduler

    session_factory = app.state.session_factory
    text_generator = app.state.text_generator

    scheduler = BackgroundScheduler()
    scheduler.add_job(run_metrics_refresh, 'interval', hours=METRICS_REFRESH_HOURS, args=[session_factory, text_generator])
    scheduler.add_job(run_performance_tracking, 'interval', hours=PERFORMANCE_TRACKING_HOURS, args=[session_factory, text_generator])
    scheduler.start()
    app.state.scheduler = scheduler
    logging.info(
        f"Scheduler started: metrics every {METRICS_REFRESH_HOURS}h, "
        f"performance every {PERFORMANCE_TRACKING_HOURS}h"
    )


def create_app(session_factory=None, text_generator=None, enable_scheduler: bool = None) -> FastAPI:
    """
    Build the API.
    The session factory and text generator are created once here and shared by every request.
    """
    app = FastAPI(
        title="Influencer Engine API",
        description="Influencer discovery, scoring and campaign performance",
        version="1.0.0"
    )

    app.state.session_factory = session_factory or create_session_factory(create_db_engine())
    app.state.text_generator = text_generator if text_generator is not None else TextGenerator()
    app.state.scheduler = None
    run_scheduler = ENABLE_SCHEDULER if enable_scheduler is None else enable_scheduler

    @app.on_event("startup")
    def startup_event():
        # Create any missing tables; Alembic owns schema changes after that
        init_db(app.state.session_factory.kw["bind"])
        if run_scheduler:
            _start_scheduler(app)

    @app.on_event("shutdown")
    def shutdown_event():
        if app.state.scheduler:
            app.state.scheduler.shutdown(wait=False)

    # CORS Setup - Allow all origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,  # Required when using "*"
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    # ========================================================================
    # ROUTERS (v2 API)
    # ========================================================================
    app.include_router(influencers_router, prefix="/api/v2")
    app.include_router(campaigns_router, prefix="/api/v2")
    app.include_router(collaborations_router, prefix="/api/v2")
    app.include_router(content_router, prefix="/api/v2")
    app.include_router(notifications_router, prefix="/api/v2")

    @app.get("/")
    def root():
        return {
            "message": "Influencer Engine API",
            "version": "1.0.0",
            "status": "running"
        }

    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    return app


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    uvicorn.run("server:create_app", factory=True, host="0.0.0.0", port=8000)
