#!/usr/bin/env python3
"""
Schematron Validation CLI

Validates an XML document against an ISO Schematron schema and prints the
SVRL report or a plain text digest of the rule violations.

Usage:
    python -m schematron_core.cli <schema> <xml_file> [options]

Examples:
    # Validate with the schema's default phase
    python -m schematron_core.cli rules.sch document.xml

    # Select a phase and print only the violation messages
    python -m schematron_core.cli rules.sch document.xml --phase Essential --text

    # Bind schema parameters
    python -m schematron_core.cli rules.sch document.xml --param version=2.0

Exit codes: 0 no violations, 2 rule violations found, 1 errors.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from lxml import etree

from schematron_core.config.settings import get_default_config, load_config
from schematron_core.validation.exceptions import SchematronCompileError, SchematronError
from schematron_core.validation.schematron import (
    EvaluationFailed,
    OutputFormat,
    SchematronValidator,
)

logger = logging.getLogger(__name__)


def _parse_param(text: str) -> tuple:
    name, sep, value = text.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"Expected NAME=VALUE, got '{text}'")
    return name, value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate an XML document against an ISO Schematron schema",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s rules.sch document.xml
  %(prog)s rules.sch document.xml --phase Essential --text
  %(prog)s rules.sch document.xml --param version=2.0 --config validator.yaml
        """
    )

    parser.add_argument("schema", type=Path, help="Path to the Schematron schema")
    parser.add_argument("xml_file", type=Path, help="Path to the XML document to validate")

    parser.add_argument(
        "-p", "--phase",
        default=None,
        help="Active phase (default: the schema's default phase; '#ALL' for every pattern)"
    )
    parser.add_argument(
        "--param",
        type=_parse_param,
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Schema parameter binding (repeatable)"
    )
    parser.add_argument(
        "-t", "--text",
        action="store_true",
        help="Print a plain text digest instead of the SVRL report"
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="JSON or YAML configuration file"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: from config, INFO)"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config) if args.config else get_default_config()
    except (FileNotFoundError, ValueError, TypeError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    settings = config.schematron
    if args.phase is not None:
        settings.phase = args.phase
    if args.text:
        settings.output_format = OutputFormat.TEXT.value
    settings.parameters.update(dict(args.param))

    try:
        output_format = OutputFormat(settings.output_format)
    except ValueError:
        print(f"Invalid configuration: unknown output format '{settings.output_format}'",
              file=sys.stderr)
        return 1

    logging.basicConfig(
        level=getattr(logging, (args.log_level or config.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if settings.check_schema:
        try:
            handler = SchematronValidator.validate_schema(args.schema)
        except (SchematronError, etree.LxmlError, OSError) as e:
            print(f"Schema check failed: {e}", file=sys.stderr)
            return 1
        if handler.errors_detected():
            print(f"Schema is not valid ISO Schematron:{handler}", file=sys.stderr)
            return 1

    try:
        validator = SchematronValidator.from_config(args.schema, settings)
    except SchematronCompileError as e:
        print(f"Schema compilation failed: {e}", file=sys.stderr)
        return 1

    outcome = validator.evaluate(args.xml_file)
    if isinstance(outcome, EvaluationFailed):
        print(f"{args.xml_file.name}: could not be evaluated: {outcome.reason}", file=sys.stderr)
        return 1

    if output_format is OutputFormat.TEXT:
        sys.stdout.write(validator.render_text(outcome.report))
    else:
        sys.stdout.write(etree.tostring(outcome.report, encoding="unicode", pretty_print=True))

    logger.info(f"{args.xml_file.name}: {outcome.count} rule violation(s)")
    return 2 if validator.rule_violations_detected() else 0


if __name__ == "__main__":
    sys.exit(main())
