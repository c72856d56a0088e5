"""
Snapshot and result types shared by the scanner, resolver and API
"""
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict


class ConfirmationStatus(str, Enum):
    """Owner's reply outcome; unset is represented as None"""

    CONFIRMED = "confirmed"
    DECLINED = "declined"


class AppointmentRecord(BaseModel):
    """Read-only snapshot of one appointment row"""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    owner_name: str = ""
    dog_name: str = ""
    owner_phone: Optional[str] = None
    appointment_ts: Optional[int] = None
    reminder_sent: bool = False
    confirmation_status: Optional[ConfirmationStatus] = None


class ReminderOutcome(BaseModel):
    """Result of dispatching one reminder"""

    appointment_id: str
    status: str  # sent, already_marked, unmarked or failed
    error_kind: Optional[str] = None
    error_message: Optional[str] = None
    sid: Optional[str] = None


class ReminderRunReport(BaseModel):
    """Result of one scanner invocation"""

    now: int
    window_end: int
    outcomes: list[ReminderOutcome] = []

    @property
    def selected(self) -> int:
        return len(self.outcomes)

    @property
    def sent(self) -> int:
        return sum(1 for o in self.outcomes if o.status != "failed")

    @property
    def unmarked(self) -> int:
        return sum(1 for o in self.outcomes if o.status == "unmarked")

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.status == "failed")


class ReplyOutcome(BaseModel):
    """Result of resolving one inbound reply"""

    status: str  # "ignored", "no_match", "recorded" or "error"
    appointment_id: Optional[str] = None
    confirmation_status: Optional[ConfirmationStatus] = None
    error_message: Optional[str] = None
