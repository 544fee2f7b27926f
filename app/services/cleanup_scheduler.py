# app/services/cleanup_scheduler.py
"""
Cron triggers for the retention cleanup jobs (APScheduler, background thread).

  daily   → every day at 00:00
  weekly  → every Sunday at 00:00
  yearly  → 1st of every month at 00:00
"""

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from app.services.cleanup_service import daily_cleanup, weekly_cleanup, yearly_cleanup
from app.utils.logger import get_logger

logger = get_logger(__name__)

JOBS = [
    ("daily_cleanup", daily_cleanup, CronTrigger(hour=0, minute=0), "Daily admin retention cleanup"),
    ("weekly_cleanup", weekly_cleanup, CronTrigger(day_of_week="sun", hour=0, minute=0),
     "Weekly admin retention cleanup"),
    ("yearly_cleanup", yearly_cleanup, CronTrigger(day=1, hour=0, minute=0),
     "Yearly admin retention cleanup"),
]


class CleanupScheduler:
    def __init__(self, scheduler: BackgroundScheduler = None):
        self.scheduler = scheduler or BackgroundScheduler()

    def register_jobs(self):
        for job_id, func, trigger, name in JOBS:
            self.scheduler.add_job(
                func=func,
                trigger=trigger,
                id=job_id,
                name=name,
                replace_existing=True,
            )

    def start(self):
        """Register the cleanup jobs and start the background thread."""
        self.register_jobs()
        self.scheduler.start()
        logger.info(f"[CLEANUP] Scheduler started with jobs: {[job[0] for job in JOBS]}")

    def stop(self):
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("[CLEANUP] Scheduler stopped")
