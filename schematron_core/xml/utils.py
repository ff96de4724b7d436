"""
XML Utility Functions
=====================

Input normalization for the validators. Every supported source kind is
turned into a document-rooted lxml tree before a transform runs; a bare
element is promoted to the root of a new document first.
"""

from copy import deepcopy
from pathlib import Path
from typing import Any, Optional, Union
import logging

from lxml import etree

logger = logging.getLogger(__name__)

XMLSource = Union[Path, str, bytes, bytearray, Any, 'etree._Element', 'etree._ElementTree']


def local_name(element: Any) -> str:
    """
    Extract local name from element tag, stripping any namespace prefix.

    Args:
        element: XML element

    Returns:
        Local tag name without namespace

    Example:
        >>> elem = etree.Element("{http://purl.oclc.org/dsdl/svrl}failed-assert")
        >>> local_name(elem)
        'failed-assert'
    """
    tag = element.tag
    if not isinstance(tag, str):
        return ""
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def namespace_uri(element: Any) -> Optional[str]:
    """Return the namespace URI of an element tag, or None."""
    tag = element.tag
    if isinstance(tag, str) and tag.startswith("{"):
        return tag[1:].split("}", 1)[0]
    return None


def is_fragment(source: Any) -> bool:
    """True if the source is a single element rather than a document."""
    return isinstance(source, etree._Element)


def promote_element(element: 'etree._Element',
                    base_url: Optional[str] = None) -> 'etree._ElementTree':
    """
    Create a new document whose root is a deep copy of the given element.

    The source element and its tree are not modified.

    Args:
        element: Element to promote
        base_url: Identifying reference for the new document; defaults to
            the URL of the element's own document

    Returns:
        New ElementTree owning the copied element
    """
    root = deepcopy(element)
    root.tail = None
    tree = etree.ElementTree(root)

    url = base_url or element.getroottree().docinfo.URL
    if url:
        tree.docinfo.URL = url

    logger.debug(f"Promoted element <{local_name(element)}> to document root")
    return tree


def copy_document(tree: 'etree._ElementTree') -> 'etree._ElementTree':
    """Deep copy a document, keeping its base URL."""
    return promote_element(tree.getroot(), tree.docinfo.URL)


def to_document(source: XMLSource,
                base_url: Optional[str] = None,
                parser: Optional['etree.XMLParser'] = None) -> 'etree._ElementTree':
    """
    Resolve an XML source to a document-rooted tree.

    Args:
        source: Path or URL string, XML bytes, a file-like object, an lxml
            ElementTree, or an lxml Element (promoted to a new document)
        base_url: Identifying reference used to resolve relative references
        parser: Optional lxml parser

    Returns:
        ElementTree for the source

    Raises:
        TypeError: If the source kind is not supported
        etree.XMLSyntaxError: If the content is not well-formed
        OSError: If the resource cannot be read
    """
    if isinstance(source, etree._ElementTree):
        return source
    if isinstance(source, etree._Element):
        return promote_element(source, base_url)
    if isinstance(source, Path):
        logger.debug(f"Parsing XML file: {source}")
        return etree.parse(str(source), parser, base_url=base_url)
    if isinstance(source, str):
        logger.debug(f"Parsing XML resource: {source}")
        return etree.parse(source, parser, base_url=base_url)
    if isinstance(source, (bytes, bytearray)):
        root = etree.fromstring(bytes(source), parser, base_url=base_url)
        return root.getroottree()
    if hasattr(source, "read"):
        return etree.parse(source, parser, base_url=base_url)

    raise TypeError(
        "source must be a path, URL, bytes, file-like object, "
        f"lxml Element or ElementTree, not {type(source).__name__}"
    )
