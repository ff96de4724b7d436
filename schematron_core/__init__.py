"""
Schematron Core Library
=======================

A reusable library for rule-based XML validation that provides:

- ISO Schematron (ISO 19757-3) schema compilation and validation
- SVRL report handling and plain text digests
- A shared validation error vocabulary
- XSLT transformation chains
- Configuration management

Architecture
------------

    schematron_core/
    ├── xml/           - Source normalization, fragment promotion
    ├── transform/     - XSLT chains and bundled stylesheets
    ├── validation/    - Error model, SVRL reports, Schematron validator
    ├── config/        - Configuration management
    └── cli.py         - Command line front end

Usage
-----

    from schematron_core import SchematronValidator, OutputFormat

    validator = SchematronValidator(Path("rules.sch"), phase="#ALL")
    report = validator.validate(Path("document.xml"))
    print(validator.get_rule_violation_count())
    print(validator.validate(Path("document.xml"), OutputFormat.TEXT))

"""

__version__ = "1.0.0"

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

from schematron_core.validation.schematron import (
    EvaluationFailed,
    OutputFormat,
    SchematronValidator,
    Violations,
    compile_schema,
)

from schematron_core.xml.utils import (
    promote_element,
    to_document,
)

from schematron_core.transform.xslt import (
    XSLTTransformer,
    load_xslt_transform,
    apply_xslt_transform,
)

from schematron_core.config.settings import (
    ValidatorConfig,
    SchematronConfig,
    load_config,
    save_config,
)

__all__ = [
    # Version
    "__version__",
    # Error model
    "ErrorLocator",
    "ErrorSeverity",
    "ValidationError",
    "ValidationErrorHandler",
    "SchematronCompileError",
    "SchematronError",
    # Schematron
    "EvaluationFailed",
    "OutputFormat",
    "SchematronValidator",
    "Violations",
    "compile_schema",
    # XML
    "promote_element",
    "to_document",
    # Transform
    "XSLTTransformer",
    "load_xslt_transform",
    "apply_xslt_transform",
    # Config
    "ValidatorConfig",
    "SchematronConfig",
    "load_config",
    "save_config",
]
