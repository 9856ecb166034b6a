"""
Configuration management for the order-finance CLI.
Handles loading and validating configuration from environment variables and files.
"""

import os
from dataclasses import dataclass
from typing import Optional
from pathlib import Path
from dotenv import load_dotenv

from ..constants import DEFAULT_MATERIAL_TAX_RATE

OUTPUT_FORMATS = ['text', 'json', 'csv']


@dataclass
class Config:
    """Configuration settings for the order-finance CLI."""

    # Database settings
    database_url: str

    # Logging settings
    log_level: str = 'INFO'

    # Output settings
    output_format: str = 'text'  # text, json, csv

    # Rate applied to material companies missing from the rate table, in percent
    default_material_tax_rate: float = DEFAULT_MATERIAL_TAX_RATE * 100

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> 'Config':
        """Create configuration from environment variables.

        Args:
            env_file: Optional path to .env file

        Returns:
            Config: Configuration instance

        Raises:
            ValueError: If required environment variables are missing
        """
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()

        database_url = os.getenv('DATABASE_URL')
        if not database_url:
            raise ValueError("DATABASE_URL environment variable is required")

        default_rate = os.getenv('DEFAULT_MATERIAL_TAX_RATE', str(DEFAULT_MATERIAL_TAX_RATE * 100))
        try:
            default_rate = float(default_rate)
        except ValueError:
            raise ValueError(f"DEFAULT_MATERIAL_TAX_RATE must be a number, got {default_rate!r}")

        return cls(
            database_url=database_url,
            log_level=os.getenv('LOG_LEVEL', 'INFO'),
            output_format=os.getenv('OUTPUT_FORMAT', 'text'),
            default_material_tax_rate=default_rate
        )

    @property
    def material_tax_fallback(self) -> float:
        """Default material tax rate as a decimal."""
        return self.default_material_tax_rate / 100

    def validate(self) -> bool:
        """Validate configuration settings.

        Returns:
            bool: True if configuration is valid
        """
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(f"output_format must be one of: {', '.join(OUTPUT_FORMATS)}")

        if self.default_material_tax_rate < 0:
            raise ValueError("default_material_tax_rate cannot be negative")

        if self.log_level.upper() not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f"Unknown log level: {self.log_level}")

        return True
