"""Background scheduler that sweeps overdue loans."""

import logging
from datetime import date
from typing import List

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from coopbook.core.audit import write_audit_log
from coopbook.core.config import settings
from coopbook.schemas.report import DefaulterRow

logger = logging.getLogger(__name__)

scheduler: AsyncIOScheduler | None = None


def sweep_defaulters(engine, as_of: date = None) -> List[DefaulterRow]:
    """Log every overdue loan. Loan statuses are never changed here."""
    try:
        rows = engine.get_defaulters_data(as_of)
    except Exception:
        logger.exception("Error in defaulter sweep")
        return []

    critical = [r for r in rows if r.status == "Critical"]
    for row in rows:
        logger.info(
            "Overdue loan %s for %s: %d days, pending %s",
            row.loan_id, row.member_name, row.days_overdue, row.pending_emi,
        )
    if rows:
        write_audit_log(
            "scheduler",
            "defaulter_sweep",
            f"overdue={len(rows)} critical={len(critical)}",
        )
    return rows


def start_scheduler(engine) -> None:
    """Create and start the background scheduler."""
    global scheduler
    interval = settings.SCHEDULER_INTERVAL_MINUTES

    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        sweep_defaulters,
        trigger=IntervalTrigger(minutes=interval),
        args=[engine],
        id="sweep_defaulters",
        name="Log overdue loans",
        replace_existing=True,
    )
    scheduler.start()
    logger.info("Background scheduler started with interval=%d minutes", interval)


def stop_scheduler() -> None:
    """Shut down the background scheduler gracefully."""
    global scheduler
    if scheduler and scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Background scheduler stopped")
        scheduler = None


def get_scheduler_status() -> dict:
    if not scheduler or not scheduler.running:
        return {"running": False, "interval_minutes": None, "jobs": []}

    jobs = [
        {
            "id": job.id,
            "name": job.name,
            "next_run_time": job.next_run_time.isoformat() if job.next_run_time else None,
        }
        for job in scheduler.get_jobs()
    ]
    return {
        "running": True,
        "interval_minutes": settings.SCHEDULER_INTERVAL_MINUTES,
        "jobs": jobs,
    }
