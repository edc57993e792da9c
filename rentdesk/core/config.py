import os
from dotenv import load_dotenv
from pydantic import BaseModel

# Load variables from .env
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() == "true"


class Settings(BaseModel):
    database_url: str = "sqlite+aiosqlite:///./rentdesk.db"

    # Wall-clock zone check-in/check-out times are expressed in
    business_timezone: str = "UTC"

    # Booking defaults
    default_check_in_time: str = "14:00"
    default_check_out_time: str = "11:00"

    # Reminder defaults (used until a user saves their own preferences)
    default_check_in_enabled: bool = True
    default_check_out_enabled: bool = True
    default_check_in_lead_hours: float = 24
    default_check_out_lead_hours: float = 24

    # When true, saving reminder settings recomputes reminders of existing bookings
    reschedule_reminders_on_settings_change: bool = False

    # Scheduler settings
    enable_reminder_dispatch: bool = True
    reminder_dispatch_interval_minutes: int = 1

    # Logging settings
    log_format: str = "console"  # Options: "console", "json"
    log_slow_request_threshold_ms: int = 500  # Log timing only if duration > threshold


settings = Settings(
    database_url=os.environ.get("DATABASE_URL", "sqlite+aiosqlite:///./rentdesk.db"),
    business_timezone=os.environ.get("BUSINESS_TIMEZONE", "UTC"),
    default_check_in_time=os.environ.get("DEFAULT_CHECK_IN_TIME", "14:00"),
    default_check_out_time=os.environ.get("DEFAULT_CHECK_OUT_TIME", "11:00"),
    default_check_in_enabled=_env_bool("DEFAULT_CHECK_IN_ENABLED", "true"),
    default_check_out_enabled=_env_bool("DEFAULT_CHECK_OUT_ENABLED", "true"),
    default_check_in_lead_hours=float(
        os.environ.get("DEFAULT_CHECK_IN_LEAD_HOURS", "24")
    ),
    default_check_out_lead_hours=float(
        os.environ.get("DEFAULT_CHECK_OUT_LEAD_HOURS", "24")
    ),
    reschedule_reminders_on_settings_change=_env_bool(
        "RESCHEDULE_REMINDERS_ON_SETTINGS_CHANGE", "false"
    ),
    enable_reminder_dispatch=_env_bool("ENABLE_REMINDER_DISPATCH", "true"),
    reminder_dispatch_interval_minutes=int(
        os.environ.get("REMINDER_DISPATCH_INTERVAL_MINUTES", "1")
    ),
    log_format=os.environ.get("LOG_FORMAT", "console"),
    log_slow_request_threshold_ms=int(
        os.environ.get("LOG_SLOW_REQUEST_THRESHOLD_MS", "500")
    ),
)
