"""Application configuration utilities."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO", description="Root logger level")
    json_logs: bool = Field(default=True, description="Enable JSON formatted logs")


class MerchantDefaults(BaseModel):
    """Top-level fields written around the payment methods of a composed QR."""

    payload_format_indicator: str = Field(default="01", pattern=r"^[0-9]{2}$")
    point_of_initiation: Literal["11", "12"] = Field(default="11", description="11 static, 12 dynamic")
    merchant_category_code: str = Field(default="0000", pattern=r"^[0-9]{4}$")
    transaction_currency: str = Field(default="702", pattern=r"^[0-9]{3}$", description="ISO 4217 numeric, 702 is SGD")
    country_code: str = Field(default="SG", min_length=2, max_length=2)
    merchant_name: str = Field(default="NA", min_length=1, max_length=25)
    merchant_city: str = Field(default="Singapore", min_length=1, max_length=15)


class RenderConfig(BaseModel):
    error_correction: Literal["L", "M", "Q", "H"] = Field(default="M")
    box_size: int = Field(default=10, ge=1, le=40)
    border: int = Field(default=4, ge=0, le=20)


class Settings(BaseSettings):
    """Central application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=(Path(__file__).resolve().parent.parent / ".env"),
        env_file_encoding="utf-8",
        env_prefix="SGQR_",
        env_nested_delimiter="__",
    )

    app_name: str = Field(default="sgqr")
    environment: Literal["development", "staging", "production"] = Field(default="development")
    allowed_origins: list[str] = Field(default_factory=lambda: ["*"])
    max_payload_length: int = Field(default=4296, ge=1, description="Largest QR text accepted by the API")
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    merchant: MerchantDefaults = Field(default_factory=MerchantDefaults)
    render: RenderConfig = Field(default_factory=RenderConfig)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return memoized application settings."""

    return Settings()


settings = get_settings()
