"""
Validation Error Model Tests

Run with: pytest tests/test_errors.py -v
"""

import pytest
from lxml import etree

from schematron_core.validation.errors import (
    ERRORS_NS,
    NO_INFORMATION,
    ErrorLocator,
    ErrorSeverity,
    ValidationError,
    ValidationErrorHandler,
)

NS = {"e": ERRORS_NS}


class TestErrorSeverity:
    """Tests for severity levels."""

    def test_str_is_value(self):
        assert str(ErrorSeverity.CRITICAL) == "CRITICAL"

    @pytest.mark.parametrize("level,expected", [
        ("WARNING", ErrorSeverity.WARNING),
        ("ERROR", ErrorSeverity.ERROR),
        ("FATAL", ErrorSeverity.CRITICAL),
        ("NONE", ErrorSeverity.ERROR),
    ])
    def test_from_log_level(self, level, expected):
        assert ErrorSeverity.from_log_level(level) is expected


class TestValidationError:
    """Tests for immutable error records."""

    def test_missing_message_gets_placeholder(self):
        error = ValidationError(ErrorSeverity.ERROR, None)
        assert error.message == NO_INFORMATION

    def test_empty_message_gets_placeholder(self):
        error = ValidationError.create(ErrorSeverity.WARNING, "")
        assert error.message == NO_INFORMATION

    def test_record_is_immutable(self):
        error = ValidationError.create(ErrorSeverity.ERROR, "Missing title")
        with pytest.raises(AttributeError):
            error.message = "changed"

    def test_location_defaults_unknown(self):
        error = ValidationError.create(ErrorSeverity.ERROR, "Missing title")
        assert error.line_number == -1
        assert error.column_number == -1
        assert error.pointer is None
        assert not error.has_location()

    def test_str_without_location(self):
        error = ValidationError.create(ErrorSeverity.ERROR, "Missing title")
        text = str(error)
        assert text.startswith("\n")
        assert "Severity: ERROR" in text
        assert "Message: Missing title" in text
        assert "Location" not in text
        assert "Diagnostic info" not in text

    def test_str_with_location_and_diagnostics(self):
        error = ValidationError.create(ErrorSeverity.CRITICAL, "Bad root",
                                       line=3, column=7, pointer="/catalog",
                                       diagnostics="expected <catalog>")
        text = str(error)
        assert "Diagnostic info: expected <catalog>" in text
        assert "Location: line=3 column=7 pointer=/catalog" in text

    def test_xml_omits_unknown_location(self):
        element = ValidationError.create(ErrorSeverity.ERROR, "Missing title").to_element()
        assert element.find("e:location", NS) is None
        assert element.findtext("e:severity", namespaces=NS) == "ERROR"
        assert element.findtext("e:message", namespaces=NS) == "Missing title"

    def test_xml_includes_only_known_location_parts(self):
        element = ValidationError.create(ErrorSeverity.ERROR, "Missing title",
                                         line=12).to_element()
        location = element.find("e:location", NS)
        assert location.findtext("e:lineNumber", namespaces=NS) == "12"
        assert location.find("e:columnNumber", NS) is None
        assert location.find("e:pointer", NS) is None

    def test_to_xml_is_well_formed(self):
        xml = ValidationError.create(ErrorSeverity.WARNING, "Deprecated",
                                     pointer="/a/b", diagnostics="info").to_xml()
        root = etree.fromstring(xml.encode("utf-8"))
        assert root.tag == f"{{{ERRORS_NS}}}error"
        assert root.findtext("e:diagnosticInfo", namespaces=NS) == "info"
        assert root.findtext("e:location/e:pointer", namespaces=NS) == "/a/b"


class TestValidationErrorHandler:
    """Tests for the accumulating error sink."""

    def test_starts_empty(self):
        handler = ValidationErrorHandler()
        assert not handler.errors_detected()
        assert handler.error_count == 0
        assert str(handler) == ""

    def test_keeps_report_order(self):
        handler = ValidationErrorHandler()
        handler.warning("first")
        handler.error("second", line=2)
        handler.fatal_error("third", line=3, column=1)
        assert [e.message for e in handler] == ["first", "second", "third"]
        assert [e.severity for e in handler] == [
            ErrorSeverity.WARNING, ErrorSeverity.ERROR, ErrorSeverity.CRITICAL]
        assert handler.messages() == "first\nsecond\nthird"

    def test_add_error_returns_record(self):
        handler = ValidationErrorHandler()
        error = handler.add_error(ErrorSeverity.ERROR, None, ErrorLocator(4, 2))
        assert error.message == NO_INFORMATION
        assert error.line_number == 4
        assert len(handler) == 1

    def test_add_errors(self):
        handler = ValidationErrorHandler()
        handler.add_errors([
            ValidationError.create(ErrorSeverity.ERROR, "a"),
            ValidationError.create(ErrorSeverity.ERROR, "b"),
        ])
        assert handler.error_count == 2

    def test_errors_list_is_a_copy(self):
        handler = ValidationErrorHandler()
        handler.error("kept")
        handler.errors.clear()
        assert handler.error_count == 1

    def test_reset(self):
        handler = ValidationErrorHandler()
        handler.error("gone")
        handler.reset()
        assert not handler.errors_detected()

    def test_add_log_entries(self):
        parser = etree.XMLParser(recover=True)
        etree.fromstring(b"<a><b></a>", parser)
        handler = ValidationErrorHandler()
        added = handler.add_log_entries(parser.error_log)
        assert added == len(parser.error_log) > 0
        assert all(e.line_number >= 1 for e in handler)

    def test_str_concatenates_records(self):
        handler = ValidationErrorHandler()
        handler.error("one")
        handler.error("two")
        text = str(handler)
        assert text.count("Severity: ERROR") == 2
        assert text.index("one") < text.index("two")

    def test_to_xml_envelope(self):
        handler = ValidationErrorHandler(schema_language="Schematron")
        handler.error("one")
        handler.warning("two")
        root = etree.fromstring(handler.to_xml().encode("utf-8"))
        assert root.tag == f"{{{ERRORS_NS}}}errors"
        assert root.get("schemaLanguage") == "Schematron"
        assert len(root.findall("e:error", NS)) == 2

    def test_to_xml_without_language(self):
        root = etree.fromstring(ValidationErrorHandler().to_xml().encode("utf-8"))
        assert root.get("schemaLanguage") is None
        assert len(root) == 0
