"""
Configuration management for the SensorPush client.
Handles loading and validation of settings from YAML files.
"""

import logging
import yaml
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field, field_validator

DEFAULT_BASE_URL = 'https://api.sensorpush.com/api/v1'
DEFAULT_TIMEOUT = 30


class APISettings(BaseModel):
    """API connection settings."""
    username: Optional[str] = Field(default=None, description="SensorPush account email")
    password: Optional[str] = Field(default=None, description="SensorPush account password")
    accesstoken: Optional[str] = Field(default=None, description="Pre-obtained access token")
    base_url: str = Field(default=DEFAULT_BASE_URL, description="Base URL for API")
    timeout: int = Field(default=DEFAULT_TIMEOUT, gt=0, description="Request timeout in seconds")


class LoggingSettings(BaseModel):
    """Logging configuration settings."""
    level: str = Field(default="WARNING")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return v_upper


class SensorPushConfig(BaseModel):
    """Complete client configuration."""
    api: APISettings = Field(default_factory=APISettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> 'SensorPushConfig':
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            SensorPushConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid
        """
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, 'r') as f:
                config_data = yaml.safe_load(f)

            if config_data is None:
                config_data = {}

            return cls(**config_data)

        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file: {e}")
        except Exception as e:
            raise ValueError(f"Error loading configuration: {e}")

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'SensorPushConfig':
        """Create configuration from dictionary."""
        return cls(**config_dict)

    def to_dict(self) -> dict:
        """Convert configuration to dictionary."""
        return self.model_dump()

    def save_yaml(self, config_path: str | Path) -> None:
        """
        Save configuration to YAML file.

        Credentials are redacted in the written file.

        Args:
            config_path: Path where to save configuration
        """
        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = self.to_dict()
        for secret in ('password', 'accesstoken'):
            if config_dict['api'][secret] is not None:
                config_dict['api'][secret] = '***REDACTED***'

        with open(config_path, 'w') as f:
            yaml.dump(config_dict, f, default_flow_style=False)


def configure_logging(settings: Optional[LoggingSettings] = None) -> None:
    """
    Apply logging settings to the root logger.

    Args:
        settings: LoggingSettings to apply (defaults if None)
    """
    if settings is None:
        settings = LoggingSettings()

    logging.basicConfig(level=settings.level, format=settings.format)


def load_config(config_path: Optional[str | Path] = None) -> SensorPushConfig:
    """
    Load configuration from file or return defaults.

    Args:
        config_path: Optional path to config file

    Returns:
        SensorPushConfig instance
    """
    if config_path is None:
        possible_paths = [
            Path('sensorpush_config.yaml'),
            Path('config/sensorpush_config.yaml'),
            Path('../config/sensorpush_config.yaml'),
        ]

        for path in possible_paths:
            if path.exists():
                return SensorPushConfig.from_yaml(path)

        return SensorPushConfig()

    return SensorPushConfig.from_yaml(config_path)
