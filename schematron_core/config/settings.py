"""
Configuration Settings
======================

Configuration dataclasses for Schematron validation runs.
"""

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional, Dict
import json
import logging

import yaml

logger = logging.getLogger(__name__)


@dataclass
class SchematronConfig:
    """Schematron compilation and evaluation settings."""

    phase: Optional[str] = None  # None = schema default phase, "#ALL" = every pattern
    output_format: str = "svrl"  # "svrl" or "text"
    parameters: Dict[str, str] = field(default_factory=dict)
    check_schema: bool = False  # validate the schema against the ISO grammar first
    dump_reports: bool = False
    dump_dir: str = ""  # Empty means use system temp


@dataclass
class ValidatorConfig:
    """
    Complete validator configuration.

    Example:
        config = ValidatorConfig()
        config.schematron.phase = "EssentialPhase"
        config.schematron.parameters["version"] = "2.0.2"
        save_config(config, Path("validator.yaml"))
    """

    schematron: SchematronConfig = field(default_factory=SchematronConfig)

    # General settings
    log_level: str = "INFO"

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'schematron': asdict(self.schematron),
            'log_level': self.log_level,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'ValidatorConfig':
        """Create from dictionary."""
        config = cls()

        if 'schematron' in data:
            config.schematron = SchematronConfig(**data['schematron'])
        if 'log_level' in data:
            config.log_level = data['log_level']

        return config


def load_config(config_path: Path) -> ValidatorConfig:
    """
    Load configuration from file.

    Supports JSON and YAML formats based on file extension.

    Args:
        config_path: Path to config file

    Returns:
        ValidatorConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If file format is not supported
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    suffix = config_path.suffix.lower()

    with open(config_path, 'r', encoding='utf-8') as f:
        if suffix in ['.yaml', '.yml']:
            data = yaml.safe_load(f) or {}
        elif suffix == '.json':
            data = json.load(f)
        else:
            raise ValueError(f"Unsupported config format: {suffix}")

    logger.info(f"Loaded configuration from {config_path}")
    return ValidatorConfig.from_dict(data)


def save_config(config: ValidatorConfig, config_path: Path) -> None:
    """
    Save configuration to file.

    Supports JSON and YAML formats based on file extension.

    Args:
        config: ValidatorConfig to save
        config_path: Path to save config file

    Raises:
        ValueError: If file format is not supported
    """
    suffix = config_path.suffix.lower()
    data = config.to_dict()

    if suffix not in ['.yaml', '.yml', '.json']:
        raise ValueError(f"Unsupported config format: {suffix}")

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w', encoding='utf-8') as f:
        if suffix == '.json':
            json.dump(data, f, indent=2)
        else:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    logger.info(f"Saved configuration to {config_path}")


def get_default_config() -> ValidatorConfig:
    """Get default configuration."""
    return ValidatorConfig()
