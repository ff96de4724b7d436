"""
Validation Exceptions
=====================

Exceptions raised when a schema cannot be turned into an executable checker.
Problems found in validated content are never raised; they are reported.
"""

from typing import Optional

from schematron_core.validation.errors import ValidationErrorHandler


class SchematronError(Exception):
    """Base class for Schematron processing errors."""


class SchematronCompileError(SchematronError):
    """
    Raised when a Schematron schema cannot be compiled.

    Attributes:
        diagnostics: Messages captured from the preprocessing stages
            while the compilation was attempted
    """

    def __init__(self, message: str,
                 diagnostics: Optional[ValidationErrorHandler] = None):
        super().__init__(message)
        self.diagnostics = diagnostics if diagnostics is not None else ValidationErrorHandler()
