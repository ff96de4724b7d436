"""
SVRL Reports
============

Helpers for Schematron Validation Report Language (SVRL) documents:
counting rule violations, reading report entries and writing debug dumps.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Union
import logging
import tempfile

from lxml import etree

from schematron_core.xml.utils import local_name

logger = logging.getLogger(__name__)

SVRL_NS = "http://purl.oclc.org/dsdl/svrl"
SVRL_NSMAP = {"svrl": SVRL_NS}

FAILED_ASSERT = "failed-assert"
SUCCESSFUL_REPORT = "successful-report"

_count_violations = etree.XPath(
    "count(//svrl:failed-assert) + count(//svrl:successful-report)",
    namespaces=SVRL_NSMAP,
)
_violations = etree.XPath(
    "//svrl:failed-assert | //svrl:successful-report",
    namespaces=SVRL_NSMAP,
)

SVRLReport = Union['etree._ElementTree', 'etree._Element']


@dataclass(frozen=True)
class ReportEntry:
    """
    A single rule violation in an SVRL report.

    Attributes:
        kind: 'failed-assert' or 'successful-report'
        location: Path to the offending node in the validated document
        test: XPath test of the assertion or report
        message: Normalized message text
        flag: Flag declared on the constraint (e.g. 'warning'), if any
        role: Role declared on the constraint, if any
        id: Constraint id, if any
    """
    kind: str
    location: str
    test: str
    message: str
    flag: Optional[str] = None
    role: Optional[str] = None
    id: Optional[str] = None

    @property
    def is_warning(self) -> bool:
        return self.flag == "warning" or self.role == "warning"


def empty_report() -> 'etree._ElementTree':
    """Create an SVRL report without any entries."""
    root = etree.Element(f"{{{SVRL_NS}}}schematron-output", nsmap=SVRL_NSMAP)
    return etree.ElementTree(root)


def count_rule_violations(report: SVRLReport) -> int:
    """
    Count all rule violations: failed assertions and successful reports.

    Args:
        report: SVRL document or its root element

    Returns:
        An integer value equal to or greater than zero
    """
    return int(_count_violations(report))


def iter_entries(report: SVRLReport) -> Iterator[ReportEntry]:
    """Yield the violation entries of an SVRL report in document order."""
    for node in _violations(report):
        text_el = node.find("svrl:text", namespaces=SVRL_NSMAP)
        text = "".join(text_el.itertext()) if text_el is not None else ""
        yield ReportEntry(
            kind=local_name(node),
            location=node.get("location", ""),
            test=node.get("test", ""),
            message=" ".join(text.split()),
            flag=node.get("flag"),
            role=node.get("role"),
            id=node.get("id"),
        )


def violation_messages(report: SVRLReport) -> List[str]:
    """Return the message of every violation entry."""
    return [entry.message for entry in iter_entries(report)]


def dump_report(report: SVRLReport, directory: Optional[Path] = None) -> Path:
    """
    Write an SVRL report to a temporary file.

    Args:
        report: SVRL document
        directory: Target directory (system temp directory if None)

    Returns:
        Path of the written file
    """
    if directory is not None:
        directory.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        prefix="SchematronValidator-dump-",
        suffix=".xml",
        dir=str(directory) if directory is not None else None,
        delete=False,
    ) as out:
        out.write(etree.tostring(report, encoding="UTF-8",
                                 xml_declaration=True, pretty_print=True))
        path = Path(out.name)

    logger.debug(f"Dumped Schematron results to {path}")
    return path
