# File: app/core/config.py
import sys
import logging
from typing import List, Optional
from functools import lru_cache
from pydantic import Field, SecretStr, field_validator, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file='.env',
        env_prefix='GATEWAY_',
        case_sensitive=False,
        env_file_encoding='utf-8',
        extra='ignore'
    )

    PROJECT_NAME: str = "AI Generation Gateway"
    API_PREFIX: str = "/api/ai"
    LOG_LEVEL: str = "INFO"
    CORS_ALLOW_ORIGINS: List[str] = ["*"]

    # --- OpenAI ---
    # Fixed name, read without the GATEWAY_ prefix. Optional so a missing key fails on first use.
    OPENAI_API_KEY: Optional[SecretStr] = Field(default=None, validation_alias="OPENAI_API_KEY")
    OPENAI_BASE_URL: Optional[str] = None
    OPENAI_TIMEOUT_SECONDS: Optional[float] = Field(default=None, description="Unset means the SDK default timeout.")
    OPENAI_MAX_RETRIES: int = Field(default=0, ge=0, description="Retries on connection/rate-limit errors.")
    HEALTH_CHECK_TIMEOUT_SECONDS: float = 5.0
    CONFIGURATION_ERROR_STATUS_CODE: int = 500

    # --- Embedding ---
    EMBEDDING_MODEL_NAME: str = "text-embedding-3-small"
    EMBEDDING_DIMENSIONS: Optional[int] = None
    EMBEDDING_PRICE_INPUT: float = 0.00000002

    # --- Summarization ---
    SUMMARY_MODEL_NAME: str = "gpt-4"
    SUMMARY_MAX_TOKENS: int = 150
    SUMMARY_TEMPERATURE: float = 0.3
    SUMMARY_PRICE_INPUT: float = 0.00003
    SUMMARY_PRICE_OUTPUT: float = 0.00006

    # --- Image generation ---
    IMAGE_MODEL_NAME: str = "dall-e-3"
    IMAGE_DEFAULT_SIZE: str = "1024x1024"
    IMAGE_PRICE_PER_IMAGE: float = 0.04

    @field_validator('LOG_LEVEL')
    @classmethod
    def check_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        normalized_v = v.upper()
        if normalized_v not in valid_levels:
            raise ValueError(f"Invalid LOG_LEVEL '{v}'. Must be one of {valid_levels}")
        return normalized_v

    @field_validator('CONFIGURATION_ERROR_STATUS_CODE')
    @classmethod
    def check_configuration_status(cls, v: int) -> int:
        if v not in (500, 503):
            raise ValueError(f"Invalid CONFIGURATION_ERROR_STATUS_CODE '{v}'. Must be 500 or 503")
        return v

    @property
    def openai_configured(self) -> bool:
        return self.OPENAI_API_KEY is not None and bool(self.OPENAI_API_KEY.get_secret_value().strip())


@lru_cache()
def get_settings() -> Settings:
    temp_log = logging.getLogger("ai_gateway.config.loader")
    if not temp_log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
        temp_log.addHandler(handler)
        temp_log.setLevel(logging.INFO)

    temp_log.info("Loading AI Gateway settings...")
    try:
        settings_instance = Settings()
        temp_log.info("--- AI Gateway Settings Loaded ---")
        temp_log.info(f"  PROJECT_NAME: {settings_instance.PROJECT_NAME}")
        temp_log.info(f"  API_PREFIX: {settings_instance.API_PREFIX}")
        temp_log.info(f"  LOG_LEVEL: {settings_instance.LOG_LEVEL}")
        temp_log.info(f"  OPENAI_API_KEY configured: {settings_instance.openai_configured}")
        temp_log.info(f"  EMBEDDING_MODEL_NAME: {settings_instance.EMBEDDING_MODEL_NAME}")
        temp_log.info(f"  SUMMARY_MODEL_NAME: {settings_instance.SUMMARY_MODEL_NAME}")
        temp_log.info(f"  IMAGE_MODEL_NAME: {settings_instance.IMAGE_MODEL_NAME}")
        temp_log.info("----------------------------------")
        return settings_instance
    except ValidationError as e:
        temp_log.critical("! FATAL: Error validating AI Gateway settings: %s", e)
        sys.exit("FATAL: Invalid AI Gateway configuration. Check logs.")


settings = get_settings()
