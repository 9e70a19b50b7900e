import argparse
import time
import schedule
import logging
import sys

from config.app_config import LOG_LEVEL, LOG_FILE, METRICS_REFRESH_HOURS, PERFORMANCE_TRACKING_HOURS
from core.generator import TextGenerator
from core.jobs import run_metrics_refresh, run_performance_tracking
from database.config import create_db_engine, create_session_factory

# Configure Logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
        logging.FileHandler(LOG_FILE)
    ]
)


def run_cycle(session_factory, text_generator, job: str):
    if job in ("metrics", "all"):
        logging.info("Starting Metrics Refresh Cycle...")
        summary = run_metrics_refresh(session_factory, text_generator)
        logging.info(f"Metrics cycle complete: {summary}")
    if job in ("performance", "all"):
        logging.info("Starting Performance Tracking Cycle...")
        summary = run_performance_tracking(session_factory, text_generator)
        logging.info(f"Performance cycle complete: {summary}")


def start_scheduler(session_factory, text_generator, job: str):
    logging.info(
        f"Starting Engine Scheduler (metrics every {METRICS_REFRESH_HOURS}h, "
        f"performance every {PERFORMANCE_TRACKING_HOURS}h)..."
    )
    # Run once immediately
    run_cycle(session_factory, text_generator, job)

    if job in ("metrics", "all"):
        schedule.every(METRICS_REFRESH_HOURS).hours.do(run_cycle, session_factory, text_generator, "metrics")
    if job in ("performance", "all"):
        schedule.every(PERFORMANCE_TRACKING_HOURS).hours.do(run_cycle, session_factory, text_generator, "performance")

    while True:
        schedule.run_pending()
        time.sleep(60)


def main():
    parser = argparse.ArgumentParser(description="Influencer Engine Worker")
    parser.add_argument("--mode", choices=["once", "schedule"], default="schedule", help="Run once or schedule")
    parser.add_argument("--job", choices=["metrics", "performance", "all"], default="all", help="Which batch to run")
    args = parser.parse_args()

    session_factory = create_session_factory(create_db_engine())
    text_generator = TextGenerator()

    if args.mode == "schedule":
        start_scheduler(session_factory, text_generator, args.job)
    else:
        run_cycle(session_factory, text_generator, args.job)


if __name__ == "__main__":
    main()
