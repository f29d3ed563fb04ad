# carwatch/scheduler.py
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from .config import SCHEDULE_CRON
from .utils import logger


def start_scheduler(pipeline, cron: str = SCHEDULE_CRON) -> BackgroundScheduler:
    scheduler = BackgroundScheduler()
    scheduler.add_job(
        pipeline.scheduled_run,
        CronTrigger.from_crontab(cron),
        id="scheduled-scrape",
        max_instances=1,
        coalesce=True,
    )
    scheduler.start()
    logger.info("Scheduler started (cron=%s)", cron)
    return scheduler
