from app.models.appointment import Appointment

__all__ = ["Appointment"]
