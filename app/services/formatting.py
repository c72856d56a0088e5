"""
Message and time formatting helpers
"""
import time
from datetime import datetime, timezone
from zoneinfo import ZoneInfo
from app.schemas import AppointmentRecord

CALL_TO_ACTION = "Reply YES to confirm or NO to cancel."


def now_millis() -> int:
    """Current instant as epoch milliseconds"""
    return int(time.time() * 1000)


def format_appointment_time(ts_millis: int, tz_name: str) -> str:
    """Render an epoch-millis instant in the given zone, e.g. 'October 19 at 03:30 PM'"""
    when = datetime.fromtimestamp(ts_millis / 1000, tz=timezone.utc).astimezone(ZoneInfo(tz_name))
    return when.strftime('%B %d at %I:%M %p')


def build_reminder_message(record: AppointmentRecord, tz_name: str) -> str:
    """Build the reminder SMS body for one appointment"""
    when = format_appointment_time(record.appointment_ts, tz_name)
    return (
        f"Hi {record.owner_name}, reminder for {record.dog_name}'s appointment on {when}. "
        f"{CALL_TO_ACTION}"
    )
