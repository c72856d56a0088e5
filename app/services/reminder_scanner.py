"""
Reminder Scanner
Selects appointments due within the lookahead window and texts each owner once
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, Optional
from app.schemas import AppointmentRecord, ReminderOutcome, ReminderRunReport
from app.services.errors import GatewayDispatchFailure, StoreWriteFailure
from app.services.formatting import build_reminder_message, now_millis

logger = logging.getLogger(__name__)

HOUR_MS = 60 * 60 * 1000


def select_due_appointments(
    records: Iterable[AppointmentRecord],
    now: int,
    lookahead_ms: int,
) -> list[AppointmentRecord]:
    """
    Pick appointments that need a reminder in this run.

    An appointment is due when it has not been reminded, has a phone and a
    time, and its time falls in [now, now + lookahead_ms] (both ends inclusive).
    """
    window_end = now + lookahead_ms
    due = [
        record
        for record in records
        if not record.reminder_sent
        and record.owner_phone
        and record.appointment_ts is not None
        and now <= record.appointment_ts <= window_end
    ]
    return sorted(due, key=lambda r: (r.appointment_ts, r.id))


class ReminderScanner:
    """Periodic job body: read all appointments, send due reminders, mark successes"""

    def __init__(
        self,
        store,
        gateway,
        lookahead_hours: int = 24,
        timezone: str = "America/Denver",
        max_workers: int = 8,
        sink: Optional[Callable[[ReminderRunReport], None]] = None,
    ):
        self.store = store
        self.gateway = gateway
        self.lookahead_ms = lookahead_hours * HOUR_MS
        self.timezone = timezone
        self.max_workers = max_workers
        self.sink = sink

    def run(self, now: Optional[int] = None) -> ReminderRunReport:
        """
        Send reminders for every due appointment.

        A StoreReadFailure from the initial snapshot propagates: nothing is
        sent or marked and the next scheduled run starts over. Per-appointment
        failures are captured in the report and never affect other appointments.

        Args:
            now: Current instant in epoch millis (defaults to the wall clock)

        Returns:
            ReminderRunReport with one outcome per selected appointment
        """
        now = now_millis() if now is None else now
        records = self.store.read_all()
        due = select_due_appointments(records.values(), now, self.lookahead_ms)
        report = ReminderRunReport(now=now, window_end=now + self.lookahead_ms)

        if due:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                report.outcomes.extend(pool.map(self._remind, due))

        logger.info(
            "Reminder run complete: selected=%s sent=%s unmarked=%s failed=%s",
            report.selected,
            report.sent,
            report.unmarked,
            report.failed,
        )
        if self.sink is not None:
            self.sink(report)
        return report

    def _remind(self, record: AppointmentRecord) -> ReminderOutcome:
        try:
            sid = self._dispatch(record)
        except GatewayDispatchFailure as e:
            logger.warning("Reminder send failed for appointment %s: %s", record.id, e)
            return ReminderOutcome(
                appointment_id=record.id,
                status="failed",
                error_kind="GatewayDispatchFailure",
                error_message=str(e),
            )

        try:
            marked = self.store.write_field(record.id, "reminder_sent", True, expected=False)
        except StoreWriteFailure as e:
            # Delivered but not recorded: the next run may send a duplicate
            logger.error("Reminder sent but not recorded for appointment %s: %s", record.id, e)
            return ReminderOutcome(
                appointment_id=record.id,
                status="unmarked",
                error_kind="StoreWriteFailure",
                error_message=str(e),
                sid=sid,
            )

        if not marked:
            logger.info("Appointment %s was already marked reminded by another run", record.id)
            return ReminderOutcome(appointment_id=record.id, status="already_marked", sid=sid)

        logger.info("Reminder sent for appointment %s", record.id)
        return ReminderOutcome(appointment_id=record.id, status="sent", sid=sid)

    def _dispatch(self, record: AppointmentRecord) -> Optional[str]:
        try:
            message = build_reminder_message(record, self.timezone)
            result = self.gateway.send_sms(record.owner_phone, message)
        except Exception as e:
            raise GatewayDispatchFailure(str(e)) from e

        if result.get("status") != "success":
            raise GatewayDispatchFailure(result.get("message") or "send failed")
        return result.get("sid")
