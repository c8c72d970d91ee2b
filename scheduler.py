"""
Scheduler - Periodic refresh of ranked views

Job Schedule:
1. Top users view: every USERS_REFRESH_INTERVAL_SECONDS
2. Latest / popular posts views: every POSTS_REFRESH_INTERVAL_SECONDS
3. Token renewal: one-shot, rescheduled after every credential exchange

Usage:
    python scheduler.py              # Run scheduler daemon
    python scheduler.py --once       # Refresh every view once and exit
"""
import asyncio
import sys
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Optional, Union

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger

from config import settings
from constants import ViewKey
from processor.rankings import ViewSpec
from processor.refresh import RefreshOrchestrator
from utils import logger, init_logging

TOKEN_RENEWAL_JOB_ID = "token_renewal"


def view_job_id(key: Union[ViewKey, str]) -> str:
    return f"refresh_{ViewKey(key).value}"


class RankingScheduler:
    """
    Explicit registry of periodic view refresh jobs.

    Jobs hold a reference to the orchestrator and are registered and
    deregistered by view key. Stopping does not wait for in-flight jobs.
    """

    def __init__(
        self,
        orchestrator: RefreshOrchestrator,
        scheduler: Optional[AsyncIOScheduler] = None,
        initial_delay_seconds: float = 2,
    ):
        self.orchestrator = orchestrator
        self.scheduler = scheduler or AsyncIOScheduler()
        self.initial_delay_seconds = initial_delay_seconds

    def setup(self):
        """Register a refresh job for every orchestrator view."""
        for view in self.orchestrator.views:
            self.register_view(view)

        logger.info(f"[Scheduler] Setup complete with {len(self.orchestrator.views)} view jobs")
        self._log_schedule()

    def register_view(self, view: ViewSpec) -> str:
        """Add (or replace) the interval job refreshing `view`."""
        job_id = view_job_id(view.key)
        self.scheduler.add_job(
            self.orchestrator.scheduled_refresh,
            IntervalTrigger(seconds=view.refresh_interval_seconds),
            args=[view.key],
            id=job_id,
            name=f"Refresh {view.key.value}",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            next_run_time=datetime.now() + timedelta(seconds=self.initial_delay_seconds),
        )
        return job_id

    def deregister_view(self, key: Union[ViewKey, str]) -> bool:
        """Remove the refresh job for `key`; returns False if none existed."""
        job_id = view_job_id(key)
        if self.scheduler.get_job(job_id) is None:
            return False
        self.scheduler.remove_job(job_id)
        return True

    def schedule_renewal(self, delay_seconds: float, renew: Callable[[], Awaitable[None]]) -> None:
        """One-shot token renewal; a newer schedule replaces the pending one."""
        self.scheduler.add_job(
            renew,
            DateTrigger(run_date=datetime.now() + timedelta(seconds=delay_seconds)),
            id=TOKEN_RENEWAL_JOB_ID,
            name="Token renewal",
            replace_existing=True,
        )

    def _log_schedule(self):
        """Log current job schedule."""
        jobs = self.scheduler.get_jobs()
        logger.info(f"[Scheduler] Scheduled jobs ({len(jobs)}):")
        for job in jobs:
            logger.info(f"  - {job.name}: {job.trigger}")

    def start(self):
        """Start the scheduler. Must be called with a running event loop."""
        self.setup()
        self.scheduler.start()
        logger.info("[Scheduler] Started")

    def stop(self):
        """Stop the scheduler without draining running jobs."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        logger.info("[Scheduler] Stopped")


async def run_once() -> bool:
    """Authenticate, refresh every view once and report."""
    from clients.auth import AuthenticationError
    from services import build_services

    services = build_services(settings)
    try:
        await services.token_provider.authenticate()
        results = await services.orchestrator.refresh_all()
    except AuthenticationError as e:
        logger.error(f"[Scheduler] Authentication failed: {e}")
        return False
    finally:
        await services.aclose()

    for key, ok in results.items():
        logger.info(f"[Scheduler] {key.value}: {'updated' if ok else 'failed'}")
    return all(results.values())


async def run_daemon():
    """Run the refresh jobs until interrupted."""
    from services import build_services

    services = build_services(settings)
    services.scheduler.start()
    try:
        await services.token_provider.authenticate()
    except Exception as e:
        logger.error(f"[Scheduler] Initial authentication failed: {e}")

    try:
        await asyncio.Event().wait()
    finally:
        services.scheduler.stop()
        await services.aclose()


def main():
    """Main entry point with CLI arguments."""
    import argparse

    from config import ConfigurationError, ensure_credentials

    parser = argparse.ArgumentParser(description="Social Rankings Scheduler")
    parser.add_argument("--once", action="store_true", help="Refresh every view once and exit")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    args = parser.parse_args()

    if args.verbose:
        settings.LOG_LEVEL = "DEBUG"
    init_logging(app_name="scheduler")

    try:
        ensure_credentials(settings)
    except ConfigurationError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)

    if args.once:
        result = asyncio.run(run_once())
        sys.exit(0 if result else 1)

    try:
        asyncio.run(run_daemon())
    except (KeyboardInterrupt, SystemExit):
        logger.info("[Scheduler] Received shutdown signal")


if __name__ == "__main__":
    main()
