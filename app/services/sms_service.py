"""
SMS Service using Twilio
"""
import logging
from twilio.rest import Client

logger = logging.getLogger(__name__)


class TwilioService:
    """Service to send SMS using Twilio"""

    def __init__(self, account_sid: str, auth_token: str, phone_number: str, client=None):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.phone_number = phone_number
        self.client = client
        if self.client is None:
            self._init_client()

    def _init_client(self):
        """Initialize Twilio client"""
        if self.account_sid and self.auth_token:
            self.client = Client(self.account_sid, self.auth_token)
        else:
            logger.warning("Twilio credentials missing; reminders will not be sent")

    def send_sms(self, to_number: str, message: str) -> dict:
        """
        Send SMS using Twilio.

        Args:
            to_number: Recipient phone number
            message: Message to send

        Returns:
            dict with SMS status
        """
        if not self.client or not self.phone_number:
            return {
                "status": "error",
                "to": to_number,
                "message": "Twilio not configured",
            }

        try:
            sms = self.client.messages.create(
                body=message,
                from_=self.phone_number,
                to=to_number
            )

            return {
                "status": "success",
                "to": to_number,
                "message": message,
                "sid": sms.sid
            }

        except Exception as e:
            return {
                "status": "error",
                "to": to_number,
                "message": f"Error sending SMS: {str(e)}"
            }


def from_settings(settings) -> TwilioService:
    """Build the Twilio gateway from application settings"""
    return TwilioService(
        account_sid=settings.twilio_account_sid,
        auth_token=settings.twilio_auth_token,
        phone_number=settings.twilio_phone_number,
    )
