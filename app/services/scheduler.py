"""
APScheduler Service
Runs the appointment reminder scan on a fixed interval

Run as a dedicated process with:
    python -m app.services.scheduler [--once]
"""
import argparse
import logging
import time
from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from app.config import settings
from app.database import SessionLocal, init_db
from app.services.record_store import AppointmentStore
from app.services.reminder_scanner import ReminderScanner
from app.services.sms_service import from_settings

logger = logging.getLogger(__name__)

JOB_ID = "appointment_reminders"


def configure_logging(debug: bool = False):
    """Configure process-wide logging"""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


class SchedulerService:
    """Service to manage background scheduler tasks"""

    def __init__(self, scanner, interval_minutes: int = 5, timezone: str = "America/Denver"):
        self.scanner = scanner
        self.scheduler = BackgroundScheduler(timezone=timezone)
        self.interval_minutes = interval_minutes
        self._setup_jobs()

    def _setup_jobs(self):
        """Setup all background jobs"""
        # One scan at a time per process; a late run is collapsed into the next one
        self.scheduler.add_job(
            self._send_appointment_reminders,
            IntervalTrigger(minutes=self.interval_minutes),
            id=JOB_ID,
            name="Send appointment reminders",
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )
        self.scheduler.add_listener(self._log_job_event, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR)

    def _send_appointment_reminders(self):
        """
        Send reminders for appointments in the lookahead window.
        This runs every `interval_minutes`.
        """
        return self.scanner.run()

    def _log_job_event(self, event):
        if event.exception:
            logger.error("Job %s failed: %s", event.job_id, event.exception)
            return
        logger.info("Job %s completed", event.job_id)

    def start(self):
        """Start the scheduler"""
        if not self.scheduler.running:
            self.scheduler.start()
            logger.info("Scheduler started (every %s minutes)", self.interval_minutes)

    def stop(self):
        """Stop the scheduler"""
        if self.scheduler.running:
            self.scheduler.shutdown()
            logger.info("Scheduler stopped")


def build_scanner(config, session_factory):
    """Wire a ReminderScanner from settings with its store and gateway"""
    return ReminderScanner(
        store=AppointmentStore(session_factory),
        gateway=from_settings(config),
        lookahead_hours=config.reminder_lookahead_hours,
        timezone=config.reminder_timezone,
        max_workers=config.reminder_max_workers,
    )


def main(argv=None):
    """Entrypoint for a dedicated scheduler process"""
    parser = argparse.ArgumentParser(description="Run the appointment reminder scheduler")
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run one reminder scan immediately and exit",
    )
    args = parser.parse_args(argv)

    configure_logging(settings.debug)
    init_db()
    scanner = build_scanner(settings, SessionLocal)

    if args.once:
        logger.info("Running %s once", JOB_ID)
        report = scanner.run()
        return 1 if report.failed else 0

    service = SchedulerService(
        scanner,
        interval_minutes=settings.reminder_interval_minutes,
        timezone=settings.reminder_timezone,
    )
    service.start()
    try:
        while True:
            time.sleep(60)
    except (KeyboardInterrupt, SystemExit):
        service.stop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
