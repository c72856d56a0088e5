import os
from dotenv import load_dotenv
from pydantic_settings import BaseSettings

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application configuration from environment variables"""

    # App
    app_name: str = "Dog Appointment Reminders"
    debug: bool = os.getenv("DEBUG", "False").lower() == "true"

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./appointments.db")

    # Twilio
    twilio_account_sid: str = os.getenv("TWILIO_ACCOUNT_SID", "")
    twilio_auth_token: str = os.getenv("TWILIO_AUTH_TOKEN", "")
    twilio_phone_number: str = os.getenv("TWILIO_PHONE_NUMBER", "")

    # Reminders
    reminder_lookahead_hours: int = 24
    reminder_interval_minutes: int = 5
    reminder_timezone: str = "America/Denver"
    reminder_max_workers: int = 8
    scheduler_enabled: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
