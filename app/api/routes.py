import logging
from fastapi import APIRouter, Depends, Form, Response
from twilio.twiml.messaging_response import MessagingResponse
from app.config import settings
from app.database import SessionLocal
from app.schemas import AppointmentRecord
from app.services.record_store import AppointmentStore
from app.services.reply_resolver import ReplyResolver

logger = logging.getLogger(__name__)

router = APIRouter()


def get_appointment_store() -> AppointmentStore:
    """Provide the appointment store"""
    return AppointmentStore(SessionLocal)


def get_reply_resolver(store: AppointmentStore = Depends(get_appointment_store)) -> ReplyResolver:
    """Provide the reply resolver"""
    return ReplyResolver(store)


def empty_twiml() -> Response:
    """Empty TwiML acknowledgment; Twilio sends no reply SMS for it"""
    return Response(content=str(MessagingResponse()), media_type="text/xml", status_code=200)


@router.post("/sms/reply")
def sms_reply(
    from_number: str = Form(default="", alias="From"),
    body: str = Form(default="", alias="Body"),
    resolver: ReplyResolver = Depends(get_reply_resolver),
):
    """
    Twilio inbound SMS webhook.

    - Classify YES/NO replies
    - Record confirmation on the sender's nearest future appointment
    - Always answer 200 with empty TwiML
    """
    try:
        outcome = resolver.resolve(from_number, body)
        logger.info("Inbound reply handled: %s", outcome.status)
    except Exception:
        logger.exception("Unexpected error handling inbound reply")
    return empty_twiml()


@router.get("/appointments", response_model=list[AppointmentRecord])
def get_appointments(store: AppointmentStore = Depends(get_appointment_store)):
    """Get all appointments ordered by appointment time"""
    records = store.read_all().values()
    return sorted(
        records,
        key=lambda r: (r.appointment_ts is None, r.appointment_ts or 0, r.id),
    )


@router.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "ok", "app": settings.app_name}
