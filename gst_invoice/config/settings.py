from pathlib import Path

from pydantic import Field, AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict

_PACKAGE_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    # Read env from process + optionally from files
    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        extra="ignore",
        case_sensitive=False,
    )

    # App
    ENVIRONMENT: str = Field(default="dev", validation_alias=AliasChoices("ENVIRONMENT", "environment"))
    APP_NAME: str = Field(default="gst_invoice", validation_alias=AliasChoices("APP_NAME", "app_name"))
    LOG_LEVEL: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL", "log_level"))
    DEBUG: bool = Field(default=False, validation_alias=AliasChoices("DEBUG", "debug"))

    # Templates
    TEMPLATE_DIR: Path = Field(
        default=_PACKAGE_ROOT / "templates",
        validation_alias=AliasChoices("TEMPLATE_DIR", "template_dir"),
    )
    DEFAULT_TEMPLATE: str = Field(default="standard", validation_alias=AliasChoices("DEFAULT_TEMPLATE", "default_template"))

    # Amount-in-words suffix ("INR" -> Rupees/Paise, "USD" -> Dollars/Cents)
    CURRENCY: str = Field(default="INR", validation_alias=AliasChoices("CURRENCY", "currency"))

    # PDF export
    PDF_FILENAME_PREFIX: str = Field(default="Invoice", validation_alias=AliasChoices("PDF_FILENAME_PREFIX", "pdf_filename_prefix"))


settings = Settings()
