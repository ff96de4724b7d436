"""
Validation Error Model
======================

Shared result vocabulary for the validators in this package: severity
levels, location records, immutable error records and an accumulating
error handler with plain text and XML renderings.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, List, Optional
import logging

from lxml import etree

logger = logging.getLogger(__name__)

ERRORS_NS = "http://cite.opengeospatial.org/"
NO_INFORMATION = "No information available."


class ErrorSeverity(Enum):
    """Severity of a validation error."""

    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_log_level(cls, level_name: str) -> 'ErrorSeverity':
        """
        Map an lxml error log level name to a severity.

        Args:
            level_name: 'WARNING', 'ERROR' or 'FATAL' (anything else is an error)

        Returns:
            Matching ErrorSeverity
        """
        if level_name == "WARNING":
            return cls.WARNING
        if level_name == "FATAL":
            return cls.CRITICAL
        return cls.ERROR


@dataclass(frozen=True)
class ErrorLocator:
    """
    Location of an error in a document representation.

    Line and column numbers are -1 when unknown. The pointer is a
    fragment identifier (e.g. an XPath expression) if one is available.
    """
    line_number: int = -1
    column_number: int = -1
    pointer: Optional[str] = None


@dataclass(frozen=True)
class ValidationError:
    """
    Immutable validation error record.

    Attributes:
        severity: Error severity
        message: Error description (placeholder text if none supplied)
        diagnostics: Optional diagnostic details
        locator: Where the error occurred
    """
    severity: ErrorSeverity
    message: str = NO_INFORMATION
    diagnostics: Optional[str] = None
    locator: ErrorLocator = field(default_factory=ErrorLocator)

    def __post_init__(self):
        if not self.message:
            object.__setattr__(self, 'message', NO_INFORMATION)
        if self.locator is None:
            object.__setattr__(self, 'locator', ErrorLocator())

    @classmethod
    def create(cls,
               severity: ErrorSeverity,
               message: Optional[str],
               line: int = -1,
               column: int = -1,
               pointer: Optional[str] = None,
               diagnostics: Optional[str] = None) -> 'ValidationError':
        """Build an error from discrete location values."""
        return cls(
            severity=severity,
            message=message or NO_INFORMATION,
            diagnostics=diagnostics,
            locator=ErrorLocator(line, column, pointer),
        )

    @property
    def line_number(self) -> int:
        return self.locator.line_number

    @property
    def column_number(self) -> int:
        return self.locator.column_number

    @property
    def pointer(self) -> Optional[str]:
        return self.locator.pointer

    def to_element(self) -> etree._Element:
        """
        Build an <error> element for this record.

        Location children are only present when known: line and column
        numbers must be positive, the pointer must not be None.
        """
        error = etree.Element(f"{{{ERRORS_NS}}}error", nsmap={None: ERRORS_NS})
        etree.SubElement(error, f"{{{ERRORS_NS}}}severity").text = str(self.severity)
        etree.SubElement(error, f"{{{ERRORS_NS}}}message").text = self.message
        if self.diagnostics is not None:
            etree.SubElement(error, f"{{{ERRORS_NS}}}diagnosticInfo").text = self.diagnostics

        if self.has_location():
            location = etree.SubElement(error, f"{{{ERRORS_NS}}}location")
            if self.line_number > 0:
                etree.SubElement(location, f"{{{ERRORS_NS}}}lineNumber").text = str(self.line_number)
            if self.column_number > 0:
                etree.SubElement(location, f"{{{ERRORS_NS}}}columnNumber").text = str(self.column_number)
            if self.pointer is not None:
                etree.SubElement(location, f"{{{ERRORS_NS}}}pointer").text = self.pointer
        return error

    def has_location(self) -> bool:
        """Whether any part of the location is known."""
        return self.line_number > 0 or self.column_number > 0 or self.pointer is not None

    def to_xml(self) -> str:
        """Serialize this record as an <error> element."""
        return etree.tostring(self.to_element(), encoding="unicode", pretty_print=True)

    def __str__(self) -> str:
        lines = [
            f"Severity: {self.severity}",
            f"Message: {self.message}",
        ]
        if self.diagnostics is not None:
            lines.append(f"Diagnostic info: {self.diagnostics}")

        if self.has_location():
            location = []
            if self.line_number > 0:
                location.append(f"line={self.line_number}")
            if self.column_number > 0:
                location.append(f"column={self.column_number}")
            if self.pointer is not None:
                location.append(f"pointer={self.pointer}")
            lines.append("Location: " + " ".join(location))

        return "\n" + "\n".join(lines)


class ValidationErrorHandler:
    """
    Accumulates validation errors reported while checking a resource.

    Errors are kept in the order they were reported. The optional schema
    language tag only labels the XML envelope produced by to_xml().

    Example:
        handler = ValidationErrorHandler(schema_language="Schematron")
        handler.add_error(ErrorSeverity.ERROR, "Missing title",
                          ErrorLocator(12, 4))
        if handler.errors_detected():
            print(handler)
    """

    def __init__(self, schema_language: Optional[str] = None):
        self.schema_language = schema_language
        self._errors: List[ValidationError] = []

    def add_error(self,
                  severity: ErrorSeverity,
                  message: Optional[str],
                  locator: Optional[ErrorLocator] = None,
                  diagnostics: Optional[str] = None) -> ValidationError:
        """
        Record an error.

        Args:
            severity: Error severity
            message: Error description
            locator: Optional location of the error
            diagnostics: Optional diagnostic details

        Returns:
            The recorded ValidationError
        """
        error = ValidationError(
            severity=severity,
            message=message or NO_INFORMATION,
            diagnostics=diagnostics,
            locator=locator or ErrorLocator(),
        )
        self._errors.append(error)
        return error

    def add_errors(self, errors: Iterable[ValidationError]) -> None:
        """Record a collection of existing errors."""
        self._errors.extend(errors)

    def warning(self, message: str, line: int = -1, column: int = -1) -> None:
        self.add_error(ErrorSeverity.WARNING, message, ErrorLocator(line, column))

    def error(self, message: str, line: int = -1, column: int = -1) -> None:
        self.add_error(ErrorSeverity.ERROR, message, ErrorLocator(line, column))

    def fatal_error(self, message: str, line: int = -1, column: int = -1) -> None:
        self.add_error(ErrorSeverity.CRITICAL, message, ErrorLocator(line, column))

    def add_log_entries(self, error_log: Iterable) -> int:
        """
        Record the entries of an lxml error log.

        Args:
            error_log: lxml _ListErrorLog (or any iterable of log entries)

        Returns:
            Number of entries recorded
        """
        added = 0
        for entry in error_log:
            line = entry.line if entry.line else -1
            column = entry.column if entry.column else -1
            self.add_error(
                ErrorSeverity.from_log_level(entry.level_name),
                entry.message,
                ErrorLocator(line, column, getattr(entry, 'path', None)),
            )
            added += 1
        return added

    def errors_detected(self) -> bool:
        return bool(self._errors)

    @property
    def error_count(self) -> int:
        return len(self._errors)

    @property
    def errors(self) -> List[ValidationError]:
        return list(self._errors)

    def reset(self) -> None:
        """Discard all recorded errors."""
        self._errors.clear()

    def messages(self) -> str:
        """Concatenate the recorded messages, one per line."""
        return "\n".join(error.message for error in self._errors)

    def to_xml(self) -> str:
        """
        Render all errors as an XML envelope.

        Returns:
            <errors> document in the ERRORS_NS namespace with one <error>
            child per record
        """
        root = etree.Element(f"{{{ERRORS_NS}}}errors", nsmap={None: ERRORS_NS})
        if self.schema_language is not None:
            root.set("schemaLanguage", self.schema_language)
        for error in self._errors:
            root.append(error.to_element())
        return etree.tostring(root, encoding="unicode", pretty_print=True)

    def __iter__(self) -> Iterator[ValidationError]:
        return iter(list(self._errors))

    def __len__(self) -> int:
        return len(self._errors)

    def __str__(self) -> str:
        return "".join(str(error) for error in self._errors)
