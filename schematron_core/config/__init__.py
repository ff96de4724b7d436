"""
Configuration Management
========================

Configuration utilities for validation runs.
"""

from schematron_core.config.settings import (
    ValidatorConfig,
    SchematronConfig,
    get_default_config,
    load_config,
    save_config,
)

__all__ = [
    "ValidatorConfig",
    "SchematronConfig",
    "get_default_config",
    "load_config",
    "save_config",
]
