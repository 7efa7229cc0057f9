"""
Application configuration. Loads from environment variables.
Secrets and sensitive config must never be hardcoded.
"""

import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

REPEAT_POLICY_ONCE_PER_PERIOD = "once_per_period"
REPEAT_POLICY_EVERY_CYCLE = "every_cycle"
_REPEAT_POLICIES = (REPEAT_POLICY_ONCE_PER_PERIOD, REPEAT_POLICY_EVERY_CYCLE)

_EMAIL_BACKENDS = ("log", "smtp", "testmail")


@lru_cache(maxsize=1)
def get_settings() -> "Settings":
    """Return cached settings instance."""
    return Settings()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


class Settings:
    """Application settings loaded from environment."""

    # App
    app_name: str = "EconWatch"
    debug: bool = False

    # Database (postgresql+psycopg for psycopg3; sqlite URLs are accepted for tests)
    database_url: str = "postgresql+psycopg://localhost:5432/econwatch_dev"
    db_connect_timeout: int = 10  # seconds

    # Security
    internal_job_token: str = ""  # Required for /internal/* endpoints

    # Feed (BLS public API v2)
    bls_api_url: str = "https://api.bls.gov/publicAPI/v2/timeseries/data/"
    bls_api_key: Optional[str] = None
    feed_timeout: float = 10.0
    feed_use_static: bool = False

    # Cycle scheduling
    cycle_interval_hours: float = 24.0
    cycle_run_on_start: bool = True

    # Notifications
    notification_repeat_policy: str = REPEAT_POLICY_ONCE_PER_PERIOD
    email_backend: str = "log"
    email_template_dir: str = ""

    # Sender identity (substituted into recipient templates)
    sender_first_name: str = ""
    sender_last_name: str = ""
    sender_email: str = ""

    # SMTP
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_from: str = ""

    # Testmail.app JSON API
    testmail_api_url: str = "https://api.testmail.app/api/json/send"
    testmail_api_key: str = ""
    testmail_namespace: str = ""

    def __init__(self) -> None:
        self.app_name = os.getenv("APP_NAME", self.app_name)
        self.debug = _env_flag("DEBUG")

        default_user = os.getenv("PGUSER") or os.getenv("USER") or "postgres"
        default_url = (
            f"postgresql+psycopg://{default_user}:"
            f"{os.getenv('PGPASSWORD', '')}@"
            f"{os.getenv('PGHOST', 'localhost')}:"
            f"{os.getenv('PGPORT', '5432')}/"
            f"{os.getenv('PGDATABASE', 'econwatch_dev')}"
        )
        raw_url = os.getenv("DATABASE_URL", default_url)
        # Ensure psycopg3 driver if URL uses generic postgresql://
        if raw_url.startswith("postgresql://") and not raw_url.startswith("postgresql+psycopg"):
            raw_url = raw_url.replace("postgresql://", "postgresql+psycopg://", 1)
        self.database_url = raw_url
        self.db_connect_timeout = int(os.getenv("DB_CONNECT_TIMEOUT", str(self.db_connect_timeout)))

        self.internal_job_token = os.getenv("INTERNAL_JOB_TOKEN", "")

        self.bls_api_url = os.getenv("BLS_API_URL", self.bls_api_url)
        key = os.getenv("BLS_API_KEY", "").strip()
        self.bls_api_key = key or None
        self.feed_timeout = float(os.getenv("FEED_TIMEOUT", str(self.feed_timeout)))
        self.feed_use_static = _env_flag("FEED_USE_STATIC")

        self.cycle_interval_hours = float(
            os.getenv("CYCLE_INTERVAL_HOURS", str(self.cycle_interval_hours))
        )
        self.cycle_run_on_start = _env_flag("CYCLE_RUN_ON_START", "true")

        policy = os.getenv("NOTIFICATION_REPEAT_POLICY", self.notification_repeat_policy)
        policy = policy.strip().lower()
        if policy not in _REPEAT_POLICIES:
            raise ValueError(
                f"NOTIFICATION_REPEAT_POLICY must be one of {_REPEAT_POLICIES}, got {policy!r}"
            )
        self.notification_repeat_policy = policy

        backend = os.getenv("EMAIL_BACKEND", self.email_backend).strip().lower()
        if backend not in _EMAIL_BACKENDS:
            raise ValueError(f"EMAIL_BACKEND must be one of {_EMAIL_BACKENDS}, got {backend!r}")
        self.email_backend = backend
        self.email_template_dir = os.getenv("EMAIL_TEMPLATE_DIR", "")

        self.sender_first_name = os.getenv("SENDER_FIRST_NAME", "")
        self.sender_last_name = os.getenv("SENDER_LAST_NAME", "")
        self.sender_email = os.getenv("SENDER_EMAIL", "")

        self.smtp_host = os.getenv("SMTP_HOST", "")
        self.smtp_port = int(os.getenv("SMTP_PORT", "587"))
        self.smtp_user = os.getenv("SMTP_USER", "")
        self.smtp_password = os.getenv("SMTP_PASSWORD", "")
        self.smtp_from = os.getenv("SMTP_FROM", "")

        self.testmail_api_url = os.getenv("TESTMAIL_API_URL", self.testmail_api_url)
        self.testmail_api_key = os.getenv("TESTMAIL_API_KEY", "")
        self.testmail_namespace = os.getenv("TESTMAIL_NAMESPACE", "")
