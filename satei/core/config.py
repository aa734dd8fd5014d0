import os
from pydantic import BaseModel

class Settings(BaseModel):
    # Basic
    ENV: str = os.getenv("ENV", "dev")
    DEFAULT_CURRENCY: str = os.getenv("CURRENCY", "JPY")

    # Dataset snapshot
    DATA_SOURCE: str = os.getenv("DATA_SOURCE", "file")            # file | http
    DATA_DIR: str = os.getenv("DATA_DIR", "./data/hiroshima")
    DATA_BASE_URL: str | None = os.getenv("DATA_BASE_URL")
    DATA_EARLIER_FILE: str = os.getenv("DATA_EARLIER_FILE", "l02_2023_residential.json")
    DATA_LATER_FILE: str = os.getenv("DATA_LATER_FILE", "l01_2025_residential.json")
    DATA_STATIONS_FILE: str = os.getenv("DATA_STATIONS_FILE", "stations_hiroshima.json")
    DATA_DEALS_FILE: str = os.getenv("DATA_DEALS_FILE", "deals_recent.json")
    DATA_META_FILE: str = os.getenv("DATA_META_FILE", "meta.json")

    # Security
    API_KEY: str | None = os.getenv("API_KEY")
    RATE_LIMIT_RPM: int = int(os.getenv("RATE_LIMIT_RPM", "60"))
    RATE_WINDOW_SECONDS: int = int(os.getenv("RATE_WINDOW_SECONDS", "60"))

    # CORS
    ALLOW_ORIGINS: str = os.getenv("ALLOW_ORIGINS", "*")

    # Rate-limit counters
    USE_REDIS: bool = os.getenv("USE_REDIS", "false").lower() == "true"
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")

    # Metrics
    PROMETHEUS_ENABLED: bool = os.getenv("PROMETHEUS_ENABLED", "true").lower() == "true"

    # Notifications
    NOTIFY_PROVIDER: str = os.getenv("NOTIFY_PROVIDER", "log")     # log | smtp | http
    NOTIFY_TO: str = os.getenv("NOTIFY_TO", "")                    # comma separated operators
    MAIL_FROM: str = os.getenv("MAIL_FROM", '"Satei App" <no-reply@example.com>')
    SMTP_HOST: str | None = os.getenv("SMTP_HOST")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USER: str | None = os.getenv("SMTP_USER")
    SMTP_PASS: str | None = os.getenv("SMTP_PASS")
    MAIL_API_URL: str | None = os.getenv("MAIL_API_URL")
    MAIL_API_KEY: str | None = os.getenv("MAIL_API_KEY")
    MAIL_TIMEOUT_SECONDS: float = float(os.getenv("MAIL_TIMEOUT_SECONDS", "10"))

    @property
    def notify_recipients(self) -> list[str]:
        return [a.strip() for a in self.NOTIFY_TO.split(",") if a.strip()]

settings = Settings()
