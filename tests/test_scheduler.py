"""
Tests for the reminder scheduler wiring
"""
from unittest.mock import MagicMock
from apscheduler.triggers.interval import IntervalTrigger
from app.config import Settings
from app.services import scheduler as scheduler_module
from app.services.reminder_scanner import ReminderScanner
from app.services.scheduler import JOB_ID, SchedulerService, build_scanner


class TestSchedulerService:
    """Test background scheduler setup"""

    def test_registers_interval_job(self):
        """Test reminder job runs on the configured interval without overlap"""
        service = SchedulerService(MagicMock(), interval_minutes=5)

        job = service.scheduler.get_job(JOB_ID)

        assert job is not None
        assert isinstance(job.trigger, IntervalTrigger)
        assert job.trigger.interval.total_seconds() == 300
        assert job.max_instances == 1
        assert job.coalesce is True

    def test_job_runs_scanner(self):
        scanner = MagicMock()
        service = SchedulerService(scanner)

        service._send_appointment_reminders()

        scanner.run.assert_called_once_with()

    def test_start_and_stop_are_idempotent(self):
        service = SchedulerService(MagicMock(), interval_minutes=5)

        service.start()
        service.start()
        assert service.scheduler.running

        service.stop()
        service.stop()
        assert not service.scheduler.running


class TestBuildScanner:
    """Test scanner construction from settings"""

    def test_settings_flow_into_scanner(self, session_factory):
        config = Settings(
            reminder_lookahead_hours=12,
            reminder_timezone="America/Chicago",
            reminder_max_workers=2,
            twilio_phone_number="+15550000000",
        )

        scanner = build_scanner(config, session_factory)

        assert isinstance(scanner, ReminderScanner)
        assert scanner.lookahead_ms == 12 * 60 * 60 * 1000
        assert scanner.timezone == "America/Chicago"
        assert scanner.max_workers == 2
        assert scanner.gateway.phone_number == "+15550000000"


class TestManualRun:
    """Test the --once entry point"""

    def test_once_runs_a_single_scan(self, monkeypatch):
        scanner = MagicMock()
        scanner.run.return_value.failed = 0
        monkeypatch.setattr(scheduler_module, "build_scanner", lambda config, factory: scanner)
        monkeypatch.setattr(scheduler_module, "init_db", lambda: None)

        assert scheduler_module.main(["--once"]) == 0
        scanner.run.assert_called_once_with()
