from sqlalchemy import BigInteger, Boolean, Column, String
from app.database import Base


class Appointment(Base):
    """Store one dog/owner appointment"""
    __tablename__ = "appointments"

    id = Column(String(64), primary_key=True)
    owner_name = Column(String(255), default="", nullable=False)
    dog_name = Column(String(255), default="", nullable=False)
    owner_phone = Column(String(20), nullable=True, index=True)  # E.164, match key for replies
    appointment_ts = Column(BigInteger, nullable=True, index=True)  # epoch millis
    reminder_sent = Column(Boolean, default=False, nullable=False)
    confirmation_status = Column(String(20), nullable=True)  # NULL until the owner replies
