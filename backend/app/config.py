"""
Application configuration using Pydantic settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # App
    app_name: str = "Tandem"
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./tandem.db"

    # Job scheduler
    scheduler_enabled: bool = True
    scheduler_jobstore_url: Optional[str] = None  # None keeps jobs in memory
    scheduler_misfire_grace_seconds: int = 3600
    # Periodic jobs, five-field crontab in UTC
    sweep_cron: str = "15 3 * * *"
    overdue_check_cron: str = "0 0 * * *"
    due_today_check_cron: str = "0 7 * * *"
    archive_cron: str = "0 1 1 * *"

    # Notifications
    reminder_subject: str = "Task Reminder"

    # Completed tasks older than this are archived
    archive_after_days: int = 90

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    frontend_url: str = "http://localhost:5173"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )


# Global settings instance
settings = Settings()
