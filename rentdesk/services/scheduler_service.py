"""
Scheduler service for periodic jobs
"""

import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from rentdesk.core.config import settings

logger = logging.getLogger(__name__)


class SchedulerService:
    """Owns the periodic jobs"""

    def __init__(self):
        self.scheduler = AsyncIOScheduler()
        self._jobs_registered = False

    def register_jobs(self):
        """Register all periodic jobs"""
        if self._jobs_registered:
            logger.warning("Jobs already registered")
            return

        if not settings.enable_reminder_dispatch:
            logger.info("Reminder dispatch is disabled in settings")
            return

        # Imported here to avoid circular imports
        from rentdesk.jobs.reminder_dispatch_job import dispatch_due_reminders_job

        if settings.reminder_dispatch_interval_minutes > 0:
            self.scheduler.add_job(
                dispatch_due_reminders_job,
                IntervalTrigger(minutes=settings.reminder_dispatch_interval_minutes),
                id="reminder_dispatch",
                name="Dispatch due reminders",
                replace_existing=True,
            )
            logger.info(
                f"Registered reminder dispatch job "
                f"(every {settings.reminder_dispatch_interval_minutes} minutes)"
            )
        else:
            logger.info("Reminder dispatch disabled (interval = 0)")

        self._jobs_registered = True

    def start(self):
        """Start the scheduler"""
        if self.scheduler.running:
            logger.warning("Scheduler already running")
            return

        self.register_jobs()
        self.scheduler.start()
        logger.info("Scheduler started")

    def shutdown(self):
        """Stop the scheduler"""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Scheduler stopped")

    def get_jobs_info(self) -> list[dict]:
        """Info about registered jobs"""
        jobs = []
        for job in self.scheduler.get_jobs():
            # Pending jobs have no next_run_time until the scheduler starts
            next_run = getattr(job, "next_run_time", None)
            jobs.append(
                {
                    "id": job.id,
                    "name": job.name,
                    "next_run": next_run.isoformat() if next_run else None,
                }
            )
        return jobs


scheduler_service = SchedulerService()
