"""Settings for the Emporium marketplace.

Where the two data files live, how new stock and order ids are generated,
and how logs and console output look. Values come from ``EMPORIUM_*``
environment variables or a .env file and are range-checked on load.
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support. Variables are prefixed with ``EMPORIUM_``.
    """

    model_config = SettingsConfigDict(
        env_prefix="EMPORIUM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Data store configuration
    users_path: str = Field(
        default="./data/users.json",
        description="JSON file holding the user directory",
    )
    products_path: str = Field(
        default="./data/products.json",
        description="JSON file holding the product catalog",
    )

    # Inventory and orders
    default_stock_quantity: int = Field(
        default=3,
        description="Stock quantity given to newly added products",
    )
    order_id_length: int = Field(
        default=4,
        description="Number of base-36 characters in an order id",
    )
    order_id_max_attempts: int = Field(
        default=1000,
        description="Draws before giving up on finding an unused order id",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    # Console
    color: bool = Field(
        default=True,
        description="Color console messages by level",
    )

    @field_validator("default_stock_quantity")
    @classmethod
    def validate_default_stock(cls, v: int) -> int:
        """Ensure new products never start with negative stock."""
        if v < 0:
            raise ValueError("default_stock_quantity must be non-negative")
        return v

    @field_validator("order_id_length")
    @classmethod
    def validate_order_id_length(cls, v: int) -> int:
        if v < 1 or v > 12:
            raise ValueError("order_id_length must be between 1 and 12")
        return v

    @field_validator("order_id_max_attempts")
    @classmethod
    def validate_max_attempts(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("order_id_max_attempts must be positive")
        return v


def load_settings(env_file: str | None = None) -> Settings:
    """Load application settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = ["Settings", "load_settings"]
