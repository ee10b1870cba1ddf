"""Shared configuration management for the invoice service.

Based on Pydantic Settings v2 best practices:
https://docs.pydantic.dev/latest/concepts/pydantic_settings/
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from invoicing.documents.schema import BankDetails, CompanyProfile


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with the prefix 'APP_'.
    Nested company and bank fields use a double underscore.
    Example: APP_LOG_LEVEL=debug, APP_COMPANY__NAME="Acme Ltd"
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    # Service configuration
    service_name: str = Field(
        default="invoice-service",
        description="Service identifier for metrics and logs",
    )
    service_version: str = Field(
        default="2.0.0",
        description="Service version",
    )
    host: str = Field(default="0.0.0.0", description="HTTP bind address")
    port: int = Field(default=3000, description="HTTP port")

    # Authentication
    admin_api_key: str = Field(
        default="",
        description="API key for protected endpoints (use env var APP_ADMIN_API_KEY)",
    )

    # Billing defaults
    default_currency: str = Field(
        default="NGN",
        description="Currency used when a request does not name one",
    )
    default_vat_rate: float = Field(
        default=7.5,
        ge=0,
        description="VAT percentage used when a request does not give one",
    )
    default_country: str = Field(
        default="Nigeria",
        description="Recipient country used when billTo omits it",
    )
    payment_terms_days: int = Field(
        default=30,
        ge=0,
        description="Days between invoice date and default due date",
    )
    logo_url: str = Field(
        default="https://infrasap.com/assets/logo.jpeg",
        description="Logo shown at the top of HTML emails",
    )

    # Email (SMTP) configuration
    email_enabled: bool = Field(
        default=True,
        description="Enable outgoing email delivery",
    )
    smtp_host: str = Field(
        default="localhost",
        description="SMTP server hostname",
    )
    smtp_port: int = Field(default=587, description="SMTP server port")
    smtp_username: str = Field(
        default="",
        description="SMTP username (use env var APP_SMTP_USERNAME)",
    )
    smtp_password: str = Field(
        default="",
        description="SMTP password (use env var APP_SMTP_PASSWORD)",
    )
    smtp_use_tls: bool = Field(
        default=True,
        description="Upgrade the SMTP connection with STARTTLS",
    )
    smtp_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Socket timeout for SMTP operations",
    )
    email_from_address: str = Field(
        default="no-reply@infrasap.com",
        description="Sender address for all outgoing email",
    )
    email_from_name: str = Field(
        default="InfraSAP Billing",
        description="Sender display name for invoices and receipts",
    )
    admissions_from_name: str = Field(
        default="InfraSAP Admissions",
        description="Sender display name for admission emails",
    )

    # Static document content
    company: CompanyProfile = Field(default_factory=CompanyProfile)
    bank: BankDetails = Field(default_factory=BankDetails)


def get_settings() -> Settings:
    """Factory function to get settings instance.

    Returns:
        Configured Settings instance
    """
    return Settings()
