"""
Hai Backend - Configuration Module

Purpose: Centralized configuration management using Pydantic Settings.
Loads from environment variables with validation and type checking.

Testing:
    from hai.config import settings
    print(settings.DYNAMODB_TABLE_NAME)
    print(settings.API_DATE_FORMAT)  # DDMMYYYY or YYYYMMDD

AWS Deployment Notes:
    - Set environment variables in the Lambda configuration
    - Never hardcode AWS credentials; use the Lambda execution role
    - DYNAMODB_TABLE_NAME must point at the single table with GSI1, GSI2 and GSI3
"""

from typing import List, Literal, Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import json


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # =============================================================================
    # CORE APPLICATION
    # =============================================================================
    ENVIRONMENT: Literal["local", "development", "staging", "production"] = "local"
    DEBUG: bool = True
    API_PREFIX: str = ""
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return json.loads(v)
        return v

    # =============================================================================
    # AWS CONFIGURATION
    # =============================================================================
    AWS_REGION: str = "us-east-1"

    # AWS credentials (only for local testing; use IAM roles in production)
    AWS_ACCESS_KEY_ID: Optional[str] = None
    AWS_SECRET_ACCESS_KEY: Optional[str] = None

    # =============================================================================
    # DATABASE CONFIGURATION
    # =============================================================================
    USE_DYNAMODB_LOCAL: bool = True
    DYNAMODB_LOCAL_ENDPOINT: str = "http://localhost:8000"

    # Single table holding every entity type
    DYNAMODB_TABLE_NAME: str = "hai-table-local"
    DYNAMODB_BILLING_MODE: Literal["PAY_PER_REQUEST", "PROVISIONED"] = "PAY_PER_REQUEST"
    DYNAMODB_READ_CAPACITY: int = 5
    DYNAMODB_WRITE_CAPACITY: int = 5

    # Items fetched per index query page
    QUERY_PAGE_SIZE: int = 100

    # =============================================================================
    # REPOSITORY BEHAVIOUR
    # =============================================================================

    # Date format accepted on the wire for reservation and message dates.
    # Index sort keys are always written as YYYYMMDD.
    API_DATE_FORMAT: Literal["DDMMYYYY", "YYYYMMDD"] = "DDMMYYYY"

    # random: generated token; natural: {room_id}-{checkin_date}-{checkout_date}
    RESERVATION_ID_STRATEGY: Literal["random", "natural"] = "random"

    # Attempts for the reservation read-modify-write before giving up
    OPTIMISTIC_LOCK_RETRIES: int = 3

    # Longest stay the dashboard queries look back for (departures, in-house)
    MAX_STAY_NIGHTS: int = 365

    # =============================================================================
    # LOGGING & MONITORING
    # =============================================================================
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: Literal["json", "text"] = "json"

    # =============================================================================
    # COMPUTED PROPERTIES
    # =============================================================================

    @property
    def dynamodb_endpoint(self) -> Optional[str]:
        """Get DynamoDB endpoint (None for AWS service, URL for local)"""
        if self.USE_DYNAMODB_LOCAL:
            return self.DYNAMODB_LOCAL_ENDPOINT
        return None


# Global settings instance
settings = Settings()


# Validation on startup
def validate_settings():
    """Validate required settings"""
    errors = []

    if not settings.DYNAMODB_TABLE_NAME:
        errors.append("DYNAMODB_TABLE_NAME is required")

    if not settings.USE_DYNAMODB_LOCAL and not settings.AWS_REGION:
        errors.append("AWS_REGION is required when USE_DYNAMODB_LOCAL=false")

    if settings.OPTIMISTIC_LOCK_RETRIES < 1:
        errors.append("OPTIMISTIC_LOCK_RETRIES must be at least 1")

    if settings.QUERY_PAGE_SIZE < 1:
        errors.append("QUERY_PAGE_SIZE must be at least 1")

    if settings.MAX_STAY_NIGHTS < 1:
        errors.append("MAX_STAY_NIGHTS must be at least 1")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(error_msg)


# Print config summary (for debugging)
def print_config_summary():
    """Print configuration summary (safe - no secrets)"""
    print("\n" + "="*60)
    print("Hai Configuration Summary")
    print("="*60)
    print(f"Environment: {settings.ENVIRONMENT}")
    print(f"Debug Mode: {settings.DEBUG}")
    print(f"Database: {'DynamoDB Local' if settings.USE_DYNAMODB_LOCAL else 'DynamoDB AWS'}")
    print(f"Table: {settings.DYNAMODB_TABLE_NAME}")
    print(f"Wire date format: {settings.API_DATE_FORMAT}")
    print(f"Reservation ids: {settings.RESERVATION_ID_STRATEGY}")
    print("="*60 + "\n")
