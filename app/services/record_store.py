"""
Appointment record store backed by SQLAlchemy
"""
import logging
from pydantic import ValidationError
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from app.models import Appointment
from app.schemas import AppointmentRecord, ConfirmationStatus
from app.services.errors import StoreReadFailure, StoreWriteFailure

logger = logging.getLogger(__name__)

# The only fields the reminder and reply flows ever write
WRITABLE_FIELDS = {"reminder_sent", "confirmation_status"}

_UNSET = object()


class AppointmentStore:
    """Full-collection reads and single-field writes over the appointments table"""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    def read_all(self) -> dict[str, AppointmentRecord]:
        """
        Read a snapshot of every appointment.

        Returns:
            dict mapping appointment id to its record

        Raises:
            StoreReadFailure: the collection could not be read
        """
        db = self.session_factory()
        try:
            rows = db.query(Appointment).all()
            return {row.id: AppointmentRecord.model_validate(row) for row in rows}
        except (SQLAlchemyError, ValidationError) as e:
            raise StoreReadFailure(f"Error reading appointments: {str(e)}") from e
        finally:
            db.close()

    def write_field(self, appointment_id: str, field: str, value, expected=_UNSET) -> bool:
        """
        Write one field of one appointment.

        Args:
            appointment_id: Appointment key
            field: reminder_sent or confirmation_status
            value: New value
            expected: When given, only write if the stored value still equals it

        Returns:
            True if a row was updated, False if the id is unknown or the
            stored value no longer matched `expected`

        Raises:
            StoreWriteFailure: the write could not be committed
        """
        if field not in WRITABLE_FIELDS:
            raise ValueError(f"Field {field!r} is not writable")

        column = getattr(Appointment, field)
        stmt = update(Appointment).where(Appointment.id == appointment_id)
        if expected is not _UNSET:
            stmt = stmt.where(column.is_(None) if expected is None else column == _to_column(expected))
        stmt = stmt.values({field: _to_column(value)})

        db = self.session_factory()
        try:
            result = db.execute(stmt)
            db.commit()
            return result.rowcount > 0
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreWriteFailure(
                f"Error writing {field} for appointment {appointment_id}: {str(e)}"
            ) from e
        finally:
            db.close()

    def add(self, record: AppointmentRecord) -> AppointmentRecord:
        """Insert an appointment (seeding only; scheduling owns creation)"""
        db = self.session_factory()
        try:
            row = Appointment(**{k: _to_column(v) for k, v in record.model_dump().items()})
            db.add(row)
            db.commit()
            db.refresh(row)
            return AppointmentRecord.model_validate(row)
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreWriteFailure(f"Error adding appointment {record.id}: {str(e)}") from e
        finally:
            db.close()


def _to_column(value):
    if isinstance(value, ConfirmationStatus):
        return value.value
    return value
