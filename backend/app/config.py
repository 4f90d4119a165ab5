"""Application configuration."""
from collections import Counter
from datetime import timedelta
from functools import lru_cache
import math
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "Daycare"
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = [
        "http://localhost:4200",
        "http://localhost:4300",
        "http://127.0.0.1:4200",
        "http://127.0.0.1:4300",
    ]

    # Database
    database_url: str = "sqlite:///./data/daycare.db"

    # Auth
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    admin_email: str = "admin@daycare.com"
    admin_password: str = "Admin@123"

    # Reminders
    reminders_enabled: bool = True
    reminder_interval_hours: float = 6.0
    birthday_window_days: int = 3
    fee_reminder_days: list[int] = [7, 3, 1]

    # Demo data
    seed_demo_data: bool = False
    base_dir: Path = Path(__file__).parent
    seed_dir: Path = base_dir / "configs" / "seed"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def reminder_interval(self) -> timedelta:
        return timedelta(hours=self.reminder_interval_hours)

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, value: str) -> str:
        """Fail closed if SECRET_KEY is weak or placeholder quality."""
        if not value:
            raise ValueError("SECRET_KEY must be set.")

        if len(value) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters.")

        weak_values = {"changeme", "changeme-in-production", "secret", "password", "test"}
        lowered = value.lower()
        if lowered in weak_values or "changeme" in lowered:
            raise ValueError("SECRET_KEY must not be a placeholder value.")

        counts = Counter(value)
        entropy_per_char = -sum((count / len(value)) * math.log2(count / len(value)) for count in counts.values())
        estimated_entropy_bits = entropy_per_char * len(value)
        if estimated_entropy_bits < 100:
            raise ValueError("SECRET_KEY entropy is too low; use a cryptographically random value.")

        return value

    @field_validator("reminder_interval_hours")
    @classmethod
    def validate_reminder_interval(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("REMINDER_INTERVAL_HOURS must be greater than zero.")
        return value

    @field_validator("birthday_window_days")
    @classmethod
    def validate_birthday_window(cls, value: int) -> int:
        if value < 0:
            raise ValueError("BIRTHDAY_WINDOW_DAYS must not be negative.")
        return value

    @field_validator("fee_reminder_days")
    @classmethod
    def validate_fee_reminder_days(cls, value: list[int]) -> list[int]:
        """Reminder offsets are exact day counts before the due date."""
        if not value:
            raise ValueError("FEE_REMINDER_DAYS must contain at least one day.")
        if any(day <= 0 for day in value):
            raise ValueError("FEE_REMINDER_DAYS must only contain positive days.")
        return sorted(set(value), reverse=True)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
