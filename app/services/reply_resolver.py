"""
Reply Resolver
Matches an inbound YES/NO text to the sender's nearest future appointment
"""
import logging
from typing import Iterable, Optional
from app.schemas import AppointmentRecord, ConfirmationStatus, ReplyOutcome
from app.services.errors import StoreReadFailure, StoreWriteFailure
from app.services.formatting import now_millis

logger = logging.getLogger(__name__)

REPLY_VOCABULARY = {
    "yes": ConfirmationStatus.CONFIRMED,
    "y": ConfirmationStatus.CONFIRMED,
    "no": ConfirmationStatus.DECLINED,
    "n": ConfirmationStatus.DECLINED,
}


def classify_reply(text: Optional[str]) -> Optional[ConfirmationStatus]:
    """Map reply text to a confirmation status, or None when unrecognized"""
    return REPLY_VOCABULARY.get((text or "").strip().casefold())


def select_nearest_future(
    records: Iterable[AppointmentRecord],
    phone: str,
    now: int,
) -> Optional[AppointmentRecord]:
    """
    Pick the sender's earliest appointment strictly after `now`.

    Ties on time go to the lowest appointment id.
    """
    candidates = [
        record
        for record in records
        if record.owner_phone
        and record.owner_phone == phone
        and record.appointment_ts is not None
        and record.appointment_ts > now
    ]
    if not candidates:
        return None
    return min(candidates, key=lambda r: (r.appointment_ts, r.id))


class ReplyResolver:
    """Records an owner's YES/NO reply on the matching appointment"""

    def __init__(self, store):
        self.store = store

    def resolve(self, from_number: Optional[str], body: Optional[str], now: Optional[int] = None) -> ReplyOutcome:
        """
        Resolve one inbound reply.

        Unrecognized text or a missing sender is a no-op. Store failures are
        logged and returned as an error outcome rather than raised, so the
        webhook can always acknowledge.

        Args:
            from_number: Sender phone number
            body: Raw message text
            now: Current instant in epoch millis (defaults to the wall clock)

        Returns:
            ReplyOutcome describing what was recorded
        """
        phone = (from_number or "").strip()
        status = classify_reply(body)
        if not phone or status is None:
            logger.info("Ignoring inbound reply (sender present=%s, recognized=%s)", bool(phone), status is not None)
            return ReplyOutcome(status="ignored")

        now = now_millis() if now is None else now
        try:
            records = self.store.read_all()
            winner = select_nearest_future(records.values(), phone, now)
            if winner is None:
                logger.info("No upcoming appointment for reply from %s", phone)
                return ReplyOutcome(status="no_match", confirmation_status=status)

            written = self.store.write_field(winner.id, "confirmation_status", status)
        except (StoreReadFailure, StoreWriteFailure) as e:
            logger.error("Failed to record reply from %s: %s", phone, e)
            return ReplyOutcome(status="error", confirmation_status=status, error_message=str(e))

        if not written:
            logger.warning("Appointment %s disappeared before the reply from %s was recorded", winner.id, phone)
            return ReplyOutcome(status="no_match", confirmation_status=status)

        logger.info("Recorded %s for appointment %s", status.value, winner.id)
        return ReplyOutcome(
            status="recorded",
            appointment_id=winner.id,
            confirmation_status=status,
        )
