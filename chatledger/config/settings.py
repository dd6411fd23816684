"""
Configuration Management for Chat Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here, but only the
composition root reads it. Ledger components receive the settings objects
they need through their constructors, so tests can build them directly.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_MONTH_NAMES = (
    "ENERO,FEBRERO,MARZO,ABRIL,MAYO,JUNIO,JULIO,"
    "AGOSTO,SEPTIEMBRE,OCTUBRE,NOVIEMBRE,DICIEMBRE"
)


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    spreadsheet_id: str = Field(
        ...,
        description="ID of the Google Sheets spreadsheet holding the ledger"
    )
    credentials_path: Optional[str] = Field(
        default=None,
        description="Path to Google service account credentials JSON"
    )
    credentials_base64: Optional[str] = Field(
        default=None,
        description="Base64-encoded service account JSON (container deployments)"
    )

    # Optional sheet receiving audit events; empty disables persistence
    audit_sheet_name: str = Field(
        default="",
        description="Name of the sheet for audit logs"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: Optional[str]) -> Optional[str]:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if v and not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the application."
            )
        return v

    @model_validator(mode="after")
    def require_credentials(self) -> "GoogleSheetsSettings":
        if not self.credentials_path and not self.credentials_base64:
            raise ValueError(
                "Either GOOGLE_SHEETS_CREDENTIALS_PATH or "
                "GOOGLE_SHEETS_CREDENTIALS_BASE64 must be set"
            )
        return self


class LedgerSettings(BaseSettings):
    """
    Ledger layout configuration.

    Describes how the spreadsheet is organised: sheet naming, the
    reserved row bands for outflows and how far down each sheet is read.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    month_names: str = Field(
        default=DEFAULT_MONTH_NAMES,
        description="Comma-separated month names, January first"
    )
    expense_sheet_prefix: str = Field(
        default="GASTOS",
        description="Prefix of the personal expenses sheet"
    )
    flow_sheet_prefix: str = Field(
        default="ING-EGR",
        description="Prefix of the income/outflow sheet"
    )

    # Row bands inside the outflow sheet
    billed_start_row: int = Field(
        default=37,
        ge=1,
        description="First row of the billed outflow band"
    )
    unbilled_start_row: int = Field(
        default=16,
        ge=1,
        description="First row of the unbilled outflow band"
    )

    # Read bounds
    sales_last_row: int = Field(
        default=10000,
        ge=2,
        description="Last row read when matching existing sales"
    )
    flow_last_row: int = Field(
        default=1000,
        ge=1,
        description="Last row read when scanning outflow bands"
    )

    date_format: str = Field(
        default="%d/%m/%Y",
        description="strftime format for dates written to the ledger"
    )
    missing_client_name: str = Field(
        default="SIN NOMBRE",
        description="Client name used when a sale names nobody"
    )

    @field_validator('month_names')
    @classmethod
    def validate_month_names(cls, v: str) -> str:
        names = [name.strip() for name in v.split(",") if name.strip()]
        if len(names) != 12:
            raise ValueError(f"Expected 12 month names, got {len(names)}")
        return v

    @property
    def month_names_list(self) -> list[str]:
        """Get month names as a list (index 0 = January)."""
        return [name.strip() for name in self.month_names.split(",") if name.strip()]


class TelegramSettings(BaseSettings):
    """Telegram chat transport configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TELEGRAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    bot_token: str = Field(
        ...,
        description="Telegram bot token"
    )
    allowed_chat_ids: str = Field(
        default="",
        description="Comma-separated chat ids allowed to write; empty allows all"
    )

    @property
    def allowed_chat_ids_set(self) -> set[int]:
        """Get allowed chat ids as a set."""
        return {
            int(chat_id.strip())
            for chat_id in self.allowed_chat_ids.split(",")
            if chat_id.strip()
        }


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level"
    )

    backend_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        le=300,
        description="Upper bound for a single spreadsheet call"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Note: These are loaded lazily to allow partial configuration

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def telegram(self) -> TelegramSettings:
        return TelegramSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("google_sheets", "ledger", "telegram", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
