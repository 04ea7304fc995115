"""Scheduled backups."""

import logging

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

from .config import Config, load_config
from .ports.record_store import RecordStoreError
from .workflows import run_backup

logger = logging.getLogger(__name__)


def scheduled_backup(config: Config) -> None:
    """Run one backup; failures are logged so the schedule keeps going."""
    try:
        target = run_backup(config)
        logger.info(f"Scheduled backup written to {target}")
    except RecordStoreError as e:
        logger.error(f"Scheduled backup failed: {e}")


def setup_scheduler(config: Config | None = None) -> BlockingScheduler:
    """Set up the daily backup job."""
    if config is None:
        config = load_config()

    scheduler = BlockingScheduler(timezone=config.tz)

    if config.backup_time:
        try:
            hour, minute = map(int, config.backup_time.split(":"))
            scheduler.add_job(
                scheduled_backup,
                CronTrigger(hour=hour, minute=minute, timezone=config.tz),
                args=[config],
                id="daily_backup",
            )
            logger.info(f"Scheduled daily backup at {hour:02d}:{minute:02d}")
        except ValueError:
            logger.warning(f"Invalid backup time format: {config.backup_time}")

    return scheduler


def run_scheduler(config: Config | None = None) -> None:
    """Block running scheduled backups."""
    scheduler = setup_scheduler(config)
    if not scheduler.get_jobs():
        logger.warning("No backup job scheduled, nothing to run")
        return
    logger.info("Starting backup scheduler...")
    scheduler.start()
