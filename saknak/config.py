from dotenv import load_dotenv
import os
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent

# Database configuration
DB_HOST = os.getenv("MYSQL_HOST", "db")
DB_USER = os.getenv("MYSQL_USER", "user")
DB_PASSWORD = os.getenv("MYSQL_PASSWORD", "123456")
DB_NAME = os.getenv("MYSQL_DB", "saknak")
DB_PORT = os.getenv("MYSQL_PORT", "3306")

# JWT configuration
SECRET_KEY = os.getenv("SECRET_KEY", "your_secret_key_here")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

# Application configuration
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
APP_HOST = os.getenv("APP_HOST", "0.0.0.0")
APP_PORT = int(os.getenv("APP_PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Scheduled jobs
SCHEDULER_ENABLED = os.getenv("SCHEDULER_ENABLED", "false").lower() == "true"
# Bearer token expected by the /functions endpoints; empty leaves them open
JOBS_API_KEY = os.getenv("JOBS_API_KEY", "")

# Database URL
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"mysql+pymysql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)


class BookingSettings(BaseSettings):
    """Booking lifecycle policy. Every field can be overridden with a BOOKING_* variable."""

    # Payment window communicated to the student after a request is sent
    payment_window_minutes: int = 60
    # Pending requests older than this are garbage-collected by the stale sweep
    stale_after_days: int = 7
    deposit_rate: float = 0.2
    collection_number: str = "01000000000"

    rent_reminder_lead_days: int = 5
    rent_reminder_bonus_points: int = 10

    # APScheduler intervals
    expire_interval_minutes: int = 5
    cleanup_interval_hours: int = 24
    rent_reminder_interval_hours: int = 24
    rating_reminder_interval_hours: int = 24 * 7

    model_config = SettingsConfigDict(
        env_prefix="BOOKING_", env_file=".env", extra="ignore"
    )


booking_settings = BookingSettings()
