"""
Error kinds raised by the reminder and reply flows
"""


class ReminderError(Exception):
    """Base class for reminder service errors"""


class GatewayDispatchFailure(ReminderError):
    """SMS send attempt failed; the appointment stays unsent"""


class StoreReadFailure(ReminderError):
    """Appointment collection could not be read; the invocation aborts"""


class StoreWriteFailure(ReminderError):
    """Single-field write failed after the snapshot was taken"""
