"""
Background scheduler.
Handles:
- Opening the new week's bonus ledger every Monday
"""

import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from lifetracker.database import SessionLocal
from lifetracker.services.day_service import DayService

logger = logging.getLogger("lifetracker.scheduler")

# Create scheduler instance
scheduler = AsyncIOScheduler()


async def run_weekly_bonus_rollover():
    """Job: make sure the current week's bonus ledger exists"""
    db = SessionLocal()
    try:
        weekly_bonus = DayService(db).check_and_reset_weekly_bonus()
        logger.info(
            f"Weekly bonus ledger ready for {weekly_bonus.week_start} "
            f"(available {weekly_bonus.available_bonus})"
        )
    except Exception as e:
        logger.error(f"Scheduler Error (Weekly Bonus): {e}")
    finally:
        db.close()


def start_scheduler():
    """Start the scheduler"""
    if not scheduler.running:
        scheduler.add_job(
            run_weekly_bonus_rollover,
            CronTrigger(day_of_week="mon", hour=0, minute=0),
            id="weekly_bonus_rollover",
            replace_existing=True
        )
        scheduler.start()
        logger.info("Scheduler started")


def stop_scheduler():
    """Stop the scheduler"""
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Scheduler stopped")
