"""
Validation Framework
====================

Schematron validation and the error vocabulary shared by validators.

Components:
- BaseValidator: Abstract base class for all validators
- ValidationError, ValidationErrorHandler: Error records and their sink
- SchematronValidator: Compiled Schematron constraint checker
- SVRL report helpers
"""

from schematron_core.validation.errors import (
    ErrorLocator,
    ErrorSeverity,
    ValidationError,
    ValidationErrorHandler,
)

from schematron_core.validation.exceptions import (
    SchematronCompileError,
    SchematronError,
)

from schematron_core.validation.base import BaseValidator

from schematron_core.validation.report import (
    SVRL_NS,
    ReportEntry,
    count_rule_violations,
    iter_entries,
    violation_messages,
)

from schematron_core.validation.schematron import (
    ALL_PHASES,
    EvaluationFailed,
    EvaluationOutcome,
    OutputFormat,
    SchematronValidator,
    Violations,
    compile_schema,
)

__all__ = [
    # Error model
    "ErrorLocator",
    "ErrorSeverity",
    "ValidationError",
    "ValidationErrorHandler",
    "SchematronCompileError",
    "SchematronError",
    # Base classes
    "BaseValidator",
    # Reports
    "SVRL_NS",
    "ReportEntry",
    "count_rule_violations",
    "iter_entries",
    "violation_messages",
    # Schematron
    "ALL_PHASES",
    "EvaluationFailed",
    "EvaluationOutcome",
    "OutputFormat",
    "SchematronValidator",
    "Violations",
    "compile_schema",
]
