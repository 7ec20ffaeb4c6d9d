"""Configuration system for Budgie.

This module provides Pydantic Settings-based configuration with environment
variable support and sensible defaults for the allocation engine.

Usage:
    from budgie_core.config import load_config

    # Load from environment variables and .env file
    config = load_config()

    # Access allocation settings
    print(config.allocation.surplus_policy)
    print(config.allocation.default_cadence)
"""

from typing import Any

from pydantic import Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .cadence import PaymentCadence
from .exceptions import ConfigurationError
from .waterfall import SurplusPolicy


class AllocationConfig(BaseSettings):
    """Allocation engine settings.

    Environment Variables:
        BUDGIE_ALLOCATION_SURPLUS_POLICY: What to do with a surplus share that
            has no target (retain, redirect)
        BUDGIE_ALLOCATION_DEFAULT_CADENCE: Pay frequency used until the user
            picks one (weekly, bi_weekly, semi_monthly, monthly)
    """

    model_config = SettingsConfigDict(
        env_prefix="BUDGIE_ALLOCATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    surplus_policy: SurplusPolicy = Field(
        default=SurplusPolicy.RETAIN,
        description="Handling of surplus with no emergency fund or debt to receive it",
    )
    default_cadence: PaymentCadence = Field(
        default=PaymentCadence.MONTHLY,
        description="Pay frequency assumed before the user chooses one",
    )

    @field_validator("surplus_policy", mode="before")
    @classmethod
    def normalize_surplus_policy(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.lower().strip()
        return v

    @field_validator("default_cadence", mode="before")
    @classmethod
    def parse_cadence(cls, v: Any) -> Any:
        """Accept display labels such as "Bi-Weekly"."""
        if isinstance(v, str):
            try:
                return PaymentCadence.parse(v)
            except ValueError:
                return v
        return v


class BudgieConfig(BaseSettings):
    """Root configuration for Budgie.

    Environment Variables:
        BUDGIE_ENV: Environment name (development, staging, production, test)
        BUDGIE_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        BUDGIE_LOG_FORMAT: Log renderer (console, json)

    Example:
        config = BudgieConfig(
            log_level="debug",
            allocation=AllocationConfig(surplus_policy="redirect"),
        )
    """

    model_config = SettingsConfigDict(
        env_prefix="BUDGIE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment settings
    env: str = Field(
        default="development",
        description="Environment name (development, staging, production, test)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: str = Field(
        default="console",
        description="Log renderer: console for humans, json for collectors",
    )

    # Nested configuration
    allocation: AllocationConfig = Field(default_factory=AllocationConfig)

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        valid_formats = {"console", "json"}
        v_lower = v.lower().strip()
        if v_lower not in valid_formats:
            raise ValueError(f"Invalid log format: {v}. Must be one of: {valid_formats}")
        return v_lower

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"

    @property
    def is_debug(self) -> bool:
        return self.log_level == "DEBUG"


def load_config(**overrides: Any) -> BudgieConfig:
    """Load configuration from the environment, applying explicit overrides.

    Raises:
        ConfigurationError: If any setting fails validation
    """
    try:
        return BudgieConfig(**overrides)
    except PydanticValidationError as e:
        error = e.errors()[0]
        key = ".".join(str(part) for part in error["loc"])
        raise ConfigurationError(
            f"Invalid configuration for {key}: {error['msg']}",
            config_key=key,
            actual=error.get("input"),
        ) from e


__all__ = [
    "AllocationConfig",
    "BudgieConfig",
    "load_config",
]
