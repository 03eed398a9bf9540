"""Configuration loader and validation for verification settings."""

from pathlib import Path
from typing import Any, Optional
import logging

import yaml
from pydantic import BaseModel, Field, ValidationError

from .matching.text_matcher import DEFAULT_DISPLAY_SYMBOLS
from .parsers.amount_parser import DEFAULT_CURRENCY_SYMBOLS
from .utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ParsingConfig(BaseModel):
    """Configuration for amount and currency parsing."""

    currency_symbols: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_CURRENCY_SYMBOLS)
    )
    # ISO code -> symbol rendered by the transaction history panel
    display_symbols: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_DISPLAY_SYMBOLS)
    )


class ReconciliationConfig(BaseModel):
    """Configuration for balance reconciliation."""

    default_tolerance: float = Field(default=0.0, ge=0)


class DataFilesConfig(BaseModel):
    """Configuration for CSV test data files."""

    data_dir: str = "Data"
    encoding: str = "utf-8-sig"


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    # Optional rotating log file; console only when unset
    file: Optional[str] = None


class VerificationConfig(BaseModel):
    """Main configuration model for verification."""

    parsing: ParsingConfig = Field(default_factory=ParsingConfig)
    reconciliation: ReconciliationConfig = Field(default_factory=ReconciliationConfig)
    data: DataFilesConfig = Field(default_factory=DataFilesConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    config_file_path: Optional[str] = None


def get_default_config() -> dict[str, Any]:
    """Return the default configuration as a dictionary."""
    return VerificationConfig().model_dump(exclude={"config_file_path"})


def load_config(config_path: Optional[Path] = None) -> VerificationConfig:
    """
    Load configuration from a YAML file or use defaults.

    Args:
        config_path: Path to YAML configuration file (optional)

    Returns:
        VerificationConfig object with loaded or default settings

    Raises:
        ConfigurationError: If the file is not valid YAML or fails validation
    """
    config_dict = get_default_config()

    if config_path and config_path.exists():
        logger.info(f"Loading configuration from: {config_path}")
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                user_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.error(f"Invalid YAML in {config_path}: {e}")
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

        if not isinstance(user_config, dict):
            raise ConfigurationError(
                f"Configuration file {config_path} must contain a mapping"
            )

        config_dict = _deep_merge(config_dict, user_config)
        config_dict["config_file_path"] = str(config_path)
    else:
        logger.info("Using default configuration")

    try:
        return VerificationConfig(**config_dict)
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def _deep_merge(base: dict, override: dict) -> dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Dictionary to merge on top

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def generate_default_config(output_path: Path) -> None:
    """
    Generate a default configuration file.

    Args:
        output_path: Path to write the configuration file
    """
    yaml_content = """# Internet Banking verification configuration
# Generated configuration file - customize as needed

"""
    yaml_content += yaml.dump(
        get_default_config(), default_flow_style=False, sort_keys=False, allow_unicode=True
    )

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(yaml_content)

    logger.info(f"Generated configuration file: {output_path}")
