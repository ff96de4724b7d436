"""
Schematron Validator
====================

Verifies that the content of an XML resource satisfies the constraints
defined in an ISO Schematron (ISO 19757-3) schema. The schema may use
inclusions (sch:include and xi:include) and abstract patterns.

A schema is compiled once through a three stage chain built from the ISO
skeleton stylesheets bundled with lxml:

    1. include   - flatten sch:include / xi:include
    2. abstract  - instantiate abstract patterns
    3. svrl      - generate the report stylesheet for the active phase

The generated stylesheet is compiled into an lxml XSLT object and reused
for every document validated with the same SchematronValidator.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union
import logging

from lxml import etree
from lxml import isoschematron

from schematron_core.config.settings import SchematronConfig
from schematron_core.transform.xslt import (
    RESOURCE_DIR,
    TransformError,
    XSLTTransformer,
    apply_xslt_transform,
    load_xslt_transform,
)
from schematron_core.validation.base import BaseValidator
from schematron_core.validation.errors import ValidationErrorHandler
from schematron_core.validation.exceptions import SchematronCompileError, SchematronError
from schematron_core.validation.report import (
    count_rule_violations,
    dump_report,
    empty_report,
)
from schematron_core.xml.utils import XMLSource, copy_document, to_document

logger = logging.getLogger(__name__)

SCHEMATRON_NS = "http://purl.oclc.org/dsdl/schematron"
XSD_NS = "http://www.w3.org/2001/XMLSchema"
RNG_NS = "http://relaxng.org/ns/structure/1.0"
XSL_NS = "http://www.w3.org/1999/XSL/Transform"

ALL_PHASES = "#ALL"
DEFAULT_PHASE = "#DEFAULT"

# Query bindings the XSLT 1.0 skeleton can evaluate
SUPPORTED_QUERY_BINDINGS = ("xslt", "xslt1", "xpath", "exslt")

TEXT_REPORT_XSLT = RESOURCE_DIR / "svrl2text.xsl"


class OutputFormat(Enum):
    """Rendering of a validation report."""

    SVRL = "svrl"
    TEXT = "text"


@dataclass(frozen=True)
class Violations:
    """Outcome of a completed evaluation."""
    report: 'etree._ElementTree'
    count: int


@dataclass(frozen=True)
class EvaluationFailed:
    """Outcome of an evaluation that could not run to completion."""
    reason: str


EvaluationOutcome = Union[Violations, EvaluationFailed]


def _new_messages(diagnostics: ValidationErrorHandler, mark: int) -> str:
    return "\n".join(error.message for error in diagnostics.errors[mark:])


def _compile_error(message: str, diagnostics: ValidationErrorHandler,
                   mark: int) -> SchematronCompileError:
    captured = _new_messages(diagnostics, mark)
    if captured:
        message = f"{captured}\n{message}"
    return SchematronCompileError(message, diagnostics)


def _read_schema(schema: XMLSource, base_url: Optional[str]) -> 'etree._ElementTree':
    doc = to_document(schema, base_url)
    if doc is schema:
        # never modify a caller-owned tree
        doc = copy_document(doc)
    return doc


def _extract_embedded_rules(doc: 'etree._ElementTree',
                            diagnostics: ValidationErrorHandler) -> 'etree._ElementTree':
    """Pull Schematron rules out of a W3C XML Schema or RELAX NG grammar."""
    root_tag = doc.getroot().tag
    if root_tag == f"{{{XSD_NS}}}schema":
        extractor = isoschematron.extract_xsd
    elif root_tag == f"{{{RNG_NS}}}grammar":
        extractor = isoschematron.extract_rng
    else:
        return doc

    logger.info(f"Extracting embedded Schematron rules from {root_tag}")
    return XSLTTransformer().add(extractor, "extract").transform(doc, diagnostics)


def _check_schema_root(doc: 'etree._ElementTree') -> None:
    root = doc.getroot()
    if root.tag != f"{{{SCHEMATRON_NS}}}schema":
        raise SchematronError(f"Document is not an ISO Schematron schema: {root.tag}")

    query_binding = root.get("queryBinding", "xslt")
    if query_binding.lower() not in SUPPORTED_QUERY_BINDINGS:
        raise SchematronError(
            "This implementation of ISO Schematron does not work with "
            f"schemas using the query language {query_binding}"
        )


def resolve_phase(schema_doc: 'etree._ElementTree', phase: Optional[str]) -> Optional[str]:
    """
    Resolve the requested phase against the phases a schema declares.

    Args:
        schema_doc: Schematron schema with inclusions resolved
        phase: Phase id, '#ALL', '#DEFAULT', or None/empty for the
            schema's default phase

    Returns:
        Phase to pass to the report generator; None selects the declared
        default phase (all patterns if none is declared)

    Raises:
        SchematronError: If the requested phase, or the default phase the
            schema names, is not declared in the schema
    """
    if phase == ALL_PHASES:
        return phase

    root = schema_doc.getroot()
    declared = [p.get("id") for p in root.iterfind(f"{{{SCHEMATRON_NS}}}phase")]

    if not phase or phase == DEFAULT_PHASE:
        default = root.get("defaultPhase")
        if default is not None and default != ALL_PHASES:
            _check_declared(default, declared, "Default phase")
        return default if phase else None

    _check_declared(phase, declared, "Phase")
    return phase


def _check_declared(phase: str, declared: List[str], label: str) -> None:
    if phase not in declared:
        raise SchematronError(
            f"{label} '{phase}' is not declared in the schema "
            f"(declared phases: {', '.join(declared) or 'none'})"
        )


def _expose_parameters(stylesheet: 'etree._ElementTree') -> None:
    """Turn global variables (schema-level sch:let) into stylesheet parameters."""
    for variable in stylesheet.getroot().findall(f"{{{XSL_NS}}}variable"):
        variable.tag = f"{{{XSL_NS}}}param"


def compile_schema(schema: XMLSource,
                   phase: Optional[str] = None,
                   diagnostics: Optional[ValidationErrorHandler] = None,
                   base_url: Optional[str] = None) -> 'etree.XSLT':
    """
    Compile a Schematron schema into an executable report stylesheet.

    Args:
        schema: Source of the schema (path, URL, bytes, file object, lxml
            tree or element)
        phase: The active phase; None enables the default phase (all
            patterns are active if no default is specified)
        diagnostics: Sink for messages written by the preprocessing stages
        base_url: Identifying reference used to resolve relative inclusions

    Returns:
        Compiled stylesheet producing an SVRL report when applied to a
        document

    Raises:
        SchematronCompileError: If the schema cannot be read, a stage fails,
            or the generated stylesheet cannot be compiled
    """
    if diagnostics is None:
        diagnostics = ValidationErrorHandler(schema_language="Schematron")
    mark = diagnostics.error_count

    try:
        doc = _read_schema(schema, base_url)
    except (etree.LxmlError, OSError) as e:
        raise _compile_error(f"Unable to read Schematron schema: {e}", diagnostics, mark) from e

    try:
        doc = _extract_embedded_rules(doc, diagnostics)
        _check_schema_root(doc)

        # Stage 1 + 2: inclusions, then abstract patterns
        doc.xinclude()
        preprocess = (XSLTTransformer()
                      .add(isoschematron.iso_dsdl_include, "include")
                      .add(isoschematron.iso_abstract_expand, "abstract"))
        expanded = preprocess.transform(doc, diagnostics)

        active_phase = resolve_phase(expanded, phase)

        # Stage 3: report generator for the active phase
        generator = XSLTTransformer().add(
            isoschematron.iso_svrl_for_xslt1, "svrl", phase=active_phase)
        stylesheet = generator.transform(expanded, diagnostics)
    except (TransformError, SchematronError, etree.XIncludeError) as e:
        raise _compile_error(str(e), diagnostics, mark) from e

    _expose_parameters(stylesheet)

    try:
        compiled = etree.XSLT(stylesheet)
    except etree.XSLTParseError as e:
        diagnostics.add_log_entries(e.error_log)
        raise _compile_error(f"Generated validator cannot be compiled: {e}",
                             diagnostics, mark) from e

    logger.info(f"Compiled Schematron schema (phase: {active_phase or 'default'})")
    return compiled


class SchematronValidator(BaseValidator):
    """
    Schematron constraint checker.

    The compiled schema is immutable; the violation count and last report
    describe only the most recent call. One instance must not be used from
    several threads at once.

    Example:
        validator = SchematronValidator(Path("rules.sch"), phase="Basic")
        validator.set_parameters({"version": "2.0"})
        report = validator.validate(Path("document.xml"))
        if validator.rule_violations_detected():
            print(validator.validate(Path("document.xml"), OutputFormat.TEXT))
    """

    def __init__(self,
                 schema: XMLSource,
                 phase: Optional[str] = None,
                 diagnostics: Optional[ValidationErrorHandler] = None,
                 base_url: Optional[str] = None,
                 dump_reports: bool = False,
                 dump_dir: Optional[Path] = None):
        """
        Compile a validator for the given schema and phase.

        Args:
            schema: Source of the Schematron schema
            phase: The active phase; if None, the default phase is enabled
                (all patterns are active if no default is specified)
            diagnostics: Sink for messages written during compilation
            base_url: Identifying reference of the schema
            dump_reports: Write every SVRL report to a temporary file
            dump_dir: Directory for report dumps (system temp if None)

        Raises:
            ValueError: If no schema is given
            SchematronCompileError: If the schema cannot be compiled
        """
        if schema is None:
            raise ValueError("No schema source provided.")

        self._phase = phase
        self._schema_path = Path(schema) if isinstance(schema, Path) else None
        self._validator = compile_schema(schema, phase, diagnostics, base_url)
        self._text_report = load_xslt_transform(TEXT_REPORT_XSLT)
        self._parameters: Dict[str, str] = {}
        self._violation_count = 0
        self._last_report: Optional['etree._ElementTree'] = None
        self._dump_reports = dump_reports
        self._dump_dir = dump_dir

    @classmethod
    def from_config(cls, schema: XMLSource, config: SchematronConfig,
                    diagnostics: Optional[ValidationErrorHandler] = None) -> 'SchematronValidator':
        """
        Build a validator from a SchematronConfig.

        Args:
            schema: Source of the Schematron schema
            config: SchematronConfig with phase, parameters and dump options
            diagnostics: Sink for compilation messages
        """
        validator = cls(
            schema,
            phase=config.phase,
            diagnostics=diagnostics,
            dump_reports=config.dump_reports,
            dump_dir=Path(config.dump_dir) if config.dump_dir else None,
        )
        if config.parameters:
            validator.set_parameters(config.parameters)
        return validator

    @property
    def schema_type(self) -> str:
        return "Schematron"

    @property
    def schema_path(self) -> Optional[Path]:
        return self._schema_path

    @property
    def phase(self) -> Optional[str]:
        return self._phase

    @property
    def parameters(self) -> Dict[str, str]:
        return dict(self._parameters)

    def set_parameters(self, params: Mapping[str, str]) -> None:
        """
        Set parameters required to evaluate Schematron rules.

        Values apply to every later call until they are overwritten.

        Args:
            params: Parameter names and values
        """
        for name, value in params.items():
            self._parameters[name] = str(value)

    @property
    def rule_violation_count(self) -> int:
        """Failed assertions plus successful reports of the last call."""
        return self._violation_count

    def get_rule_violation_count(self) -> int:
        return self._violation_count

    def rule_violations_detected(self) -> bool:
        return self._violation_count > 0

    @property
    def last_report(self) -> Optional['etree._ElementTree']:
        """SVRL report of the last call (None before any call)."""
        return self._last_report

    def evaluate(self, source: XMLSource,
                 base_url: Optional[str] = None) -> EvaluationOutcome:
        """
        Run the compiled schema against a document.

        Args:
            source: The XML resource to validate; an Element is validated
                as the root of a new document
            base_url: Identifying reference of the resource

        Returns:
            Violations with the SVRL report, or EvaluationFailed if the
            document could not be read or the evaluation raised an error

        Raises:
            ValueError: If no source is given
        """
        if source is None:
            raise ValueError("Nothing to validate.")

        self._violation_count = 0
        self._last_report = empty_report()

        try:
            doc = to_document(source, base_url)
            report = apply_xslt_transform(doc, self._validator, params=self._parameters)
        except (etree.LxmlError, OSError) as e:
            logger.warning(f"Schematron evaluation failed: {e}")
            return EvaluationFailed(str(e))

        if report.getroot() is None:
            logger.warning("Schematron evaluation produced no report")
            return EvaluationFailed("Evaluation produced no report")

        self._last_report = report
        self._violation_count = count_rule_violations(report)
        logger.debug(f"{self._violation_count} Schematron rule violations found")

        if self._dump_reports:
            dump_report(report, self._dump_dir)

        return Violations(report, self._violation_count)

    def validate(self, source: XMLSource,
                 output_format: Union[OutputFormat, str] = OutputFormat.SVRL,
                 base_url: Optional[str] = None) -> Union['etree._ElementTree', str]:
        """
        Validate an XML resource.

        Evaluation failures are logged and produce an empty report with a
        violation count of zero; use evaluate() to tell them apart.

        Args:
            source: The XML resource to validate
            output_format: OutputFormat.SVRL for the report document,
                OutputFormat.TEXT for a plain text digest of the violations
            base_url: Identifying reference of the resource

        Returns:
            SVRL document, or the text digest
        """
        output_format = OutputFormat(output_format)
        self.evaluate(source, base_url)

        if output_format is OutputFormat.TEXT:
            return self.render_text(self._last_report)
        return self._last_report

    def render_text(self, report: 'etree._ElementTree') -> str:
        """
        Reduce an SVRL report to plain text holding only violation messages.

        Returns:
            One message per line, without markup or XML declaration
        """
        try:
            result = apply_xslt_transform(report, self._text_report)
        except etree.XSLTApplyError as e:
            logger.warning(f"Unable to render text report: {e}")
            return ""
        return str(result)

    @staticmethod
    def validate_schema(schema: XMLSource,
                        base_url: Optional[str] = None) -> ValidationErrorHandler:
        """
        Validate a Schematron schema against the ISO Schematron RELAX NG grammar.

        Args:
            schema: Source of the schema

        Returns:
            Error handler holding the reported errors, if any

        Raises:
            SchematronError: If the grammar is not available in this lxml build
        """
        grammar = getattr(isoschematron, "schematron_schema_valid", None)
        if not isinstance(grammar, etree.RelaxNG):
            raise SchematronError("The ISO Schematron grammar is not available")

        handler = ValidationErrorHandler(schema_language="Schematron")
        doc = to_document(schema, base_url)
        if not grammar.validate(doc):
            handler.add_log_entries(grammar.error_log)
        logger.debug(f"Schema grammar check reported {handler.error_count} error(s)")
        return handler
