"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide defaults that match the function deployment (DYNAMODB_TABLE, ENVIRONMENT)

Collaborators:
  - container.py: builds the DynamoDB client, store and provisioner from settings
  - api/main.py: reads settings for CORS, body limits and startup logging
  - crosscutting/logger.py: reads log_level / log_json

Constraints:
  - Lives in API/infrastructure layer, NOT in domain/application
  - No business logic: pure configuration

Notes:
  - Singleton via lru_cache; tests call get_settings.cache_clear()
  - The environment label is process-wide and ends up in every event's metadata
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_TEST_ENVIRONMENTS = {"test", "testing", "ci"}
_PRODUCTION_ENVIRONMENTS = {"prod", "production"}


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        environment: Deployment label stored in metadata.environment (default: dev)
        dynamodb_table: Audit table name (default: AuditEvents)
        aws_region: Region for the DynamoDB client (blank = SDK default chain)
        dynamodb_endpoint_url: Endpoint override, e.g. DynamoDB Local
        dynamodb_connect_timeout_seconds: Socket connect timeout for the store
        dynamodb_read_timeout_seconds: Read timeout for the single put
        dynamodb_auto_create_table: Create the table on cold start when missing
        dynamodb_table_wait_delay_seconds: Waiter delay while the table activates
        dynamodb_table_wait_max_attempts: Waiter attempts before giving up
        allowed_origins: Comma-separated CORS origins ("*" allows all)
        max_body_bytes: Max request body size (default: 256KB)
        log_level: Logger level (default: INFO)
        log_json: Emit JSON logs (default: True)
    """

    # Environment
    environment: str = "dev"

    # Store - DynamoDB
    dynamodb_table: str = "AuditEvents"
    aws_region: str = ""
    dynamodb_endpoint_url: str = ""
    dynamodb_connect_timeout_seconds: float = 2.0
    dynamodb_read_timeout_seconds: float = 5.0

    # Provisioning
    dynamodb_auto_create_table: bool = True
    dynamodb_table_wait_delay_seconds: int = 2
    dynamodb_table_wait_max_attempts: int = 30

    # HTTP
    allowed_origins: str = "*"
    max_body_bytes: int = 256 * 1024  # 256KB

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    @field_validator("environment")
    @classmethod
    def environment_defaults_to_dev(cls, v: str) -> str:
        return (v or "").strip() or "dev"

    @field_validator("dynamodb_table")
    @classmethod
    def dynamodb_table_required(cls, v: str) -> str:
        name = (v or "").strip()
        if not name:
            raise ValueError("dynamodb_table must not be blank")
        return name

    @field_validator(
        "dynamodb_connect_timeout_seconds", "dynamodb_read_timeout_seconds"
    )
    @classmethod
    def timeouts_must_be_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("store timeouts must be greater than 0")
        return v

    @field_validator(
        "dynamodb_table_wait_delay_seconds", "dynamodb_table_wait_max_attempts"
    )
    @classmethod
    def waiter_values_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("table waiter settings must be greater than 0")
        return v

    @field_validator("max_body_bytes")
    @classmethod
    def max_body_bytes_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("max_body_bytes must be greater than 0")
        return v

    def get_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    def is_production(self) -> bool:
        return self.environment.lower() in _PRODUCTION_ENVIRONMENTS

    def is_test_env(self) -> bool:
        return self.environment.lower() in _TEST_ENVIRONMENTS

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If env vars are invalid
    """
    return Settings()
