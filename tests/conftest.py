"""
Shared fixtures for the Schematron validation tests.

Run with: pytest tests/ -v
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from schematron_core.validation.errors import ValidationErrorHandler

RESOURCES = Path(__file__).parent / "resources"
SCHEMAS = RESOURCES / "sch"


@pytest.fixture
def resources():
    """Directory holding the test instance documents."""
    return RESOURCES


@pytest.fixture
def schemas():
    """Directory holding the test schemas."""
    return SCHEMAS


@pytest.fixture
def diagnostics():
    """Fresh diagnostics sink."""
    return ValidationErrorHandler(schema_language="Schematron")
