"""
XSLT Transformer
================

XSLT transformation utilities for the validation pipelines.
Supports loading, applying, and chaining XSLT transformations, with
messages emitted by each stylesheet collected into an explicit
diagnostics sink.
"""

from copy import deepcopy
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple
import logging

from lxml import etree

from schematron_core.xml.utils import XMLSource, to_document

logger = logging.getLogger(__name__)

RESOURCE_DIR = Path(__file__).resolve().parent / "resources"


class TransformError(Exception):
    """
    Raised when a stage of a transformation chain fails.

    Attributes:
        stage: Name of the failing stage
    """

    def __init__(self, stage: str, message: str):
        super().__init__(f"{stage}: {message}")
        self.stage = stage


def load_xslt_transform(xslt_path: Path) -> 'etree.XSLT':
    """
    Load an XSLT stylesheet from file.

    Args:
        xslt_path: Path to the XSLT stylesheet file

    Returns:
        Compiled XSLT transform

    Raises:
        FileNotFoundError: If XSLT file doesn't exist
        etree.XSLTParseError: If XSLT is malformed
    """
    if not xslt_path.exists():
        raise FileNotFoundError(f"XSLT stylesheet not found: {xslt_path}")

    logger.debug(f"Loading XSLT stylesheet: {xslt_path}")
    xslt_doc = etree.parse(str(xslt_path))
    return etree.XSLT(xslt_doc)


def string_params(params: Mapping[str, str]) -> Dict[str, object]:
    """Quote parameter values as XSLT string parameters."""
    return {k: etree.XSLT.strparam(str(v)) for k, v in params.items()}


def apply_xslt_transform(
    xml_input: XMLSource,
    xslt_transform: 'etree.XSLT',
    diagnostics: Optional['ValidationErrorHandler'] = None,
    params: Optional[Mapping[str, str]] = None
) -> 'etree._XSLTResultTree':
    """
    Apply an XSLT transformation to an XML document.

    Args:
        xml_input: Any source accepted by to_document()
        xslt_transform: Compiled XSLT transform
        diagnostics: Optional sink for messages emitted by the stylesheet
        params: XSLT parameter bindings, passed as string values

    Returns:
        Transformation result

    Raises:
        etree.XSLTApplyError: If transformation fails
    """
    xml_doc = to_document(xml_input)

    try:
        result = xslt_transform(xml_doc, **string_params(params or {}))
    except etree.XSLTApplyError as e:
        logger.debug(f"XSLT transformation failed: {e}")
        raise
    finally:
        if diagnostics is not None:
            diagnostics.add_log_entries(xslt_transform.error_log)

    for entry in xslt_transform.error_log:
        logger.debug(f"  {entry}")

    return result


class XSLTTransformer:
    """
    Chain of named XSLT stages.

    Each stage consumes the document produced by the previous one. Stages
    may carry their own parameters in addition to those given for the
    whole run.

    Example:
        transformer = XSLTTransformer()
        transformer.load(Path("normalize.xsl"))
        transformer.add(compiled, "report", phase="#ALL")
        result = transformer.transform(schema_tree, diagnostics=handler)
    """

    def __init__(self):
        """Initialize transformer with empty stylesheet list."""
        self._transforms: List[Tuple[str, 'etree.XSLT', Dict[str, str]]] = []

    def add(self, transform: 'etree.XSLT', name: str, **params) -> 'XSLTTransformer':
        """
        Append a compiled stylesheet.

        The stylesheet is copied so its error log belongs to this chain.

        Args:
            transform: Compiled XSLT transform
            name: Stage name used in logs and errors
            **params: Parameters for this stage only; None values are skipped

        Returns:
            Self for method chaining
        """
        stage_params = {k: v for k, v in params.items() if v is not None}
        self._transforms.append((name, deepcopy(transform), stage_params))
        return self

    def load(self, xslt_path: Path, name: Optional[str] = None, **params) -> 'XSLTTransformer':
        """Load an XSLT stylesheet from file and append it."""
        transform = load_xslt_transform(xslt_path)
        return self.add(transform, name or xslt_path.stem, **params)

    def load_string(self, xslt_string: str, name: str = "inline", **params) -> 'XSLTTransformer':
        """Load XSLT from a string and append it."""
        xslt_doc = etree.fromstring(xslt_string.encode('utf-8'))
        return self.add(etree.XSLT(xslt_doc), name, **params)

    def clear(self) -> 'XSLTTransformer':
        """
        Clear all loaded transforms.

        Returns:
            Self for method chaining
        """
        self._transforms.clear()
        return self

    def transform(self,
                  xml_input: XMLSource,
                  diagnostics: Optional['ValidationErrorHandler'] = None,
                  **params) -> 'etree._ElementTree':
        """
        Apply all loaded transformations in sequence.

        Messages written by each stage are added to the diagnostics sink
        whether or not the stage succeeds.

        Args:
            xml_input: Any source accepted by to_document()
            diagnostics: Optional sink for stylesheet messages
            **params: Parameters passed to every stage

        Returns:
            Document produced by the final stage

        Raises:
            ValueError: If no transforms are loaded
            TransformError: If a stage fails or produces no document
        """
        if not self._transforms:
            raise ValueError("No XSLT transforms loaded")

        current = to_document(xml_input)

        for name, transform, stage_params in self._transforms:
            logger.debug(f"Applying transform: {name}")
            merged = dict(params)
            merged.update(stage_params)
            try:
                current = transform(current, **string_params(merged))
            except etree.XSLTApplyError as e:
                raise TransformError(name, str(e)) from e
            finally:
                if diagnostics is not None:
                    diagnostics.add_log_entries(transform.error_log)

            if current.getroot() is None:
                raise TransformError(name, "stage produced an empty document")

        return current

    @property
    def transform_count(self) -> int:
        """Return number of loaded transforms."""
        return len(self._transforms)

    @property
    def transform_names(self) -> List[str]:
        """Return list of loaded transform names."""
        return [name for name, _, _ in self._transforms]
