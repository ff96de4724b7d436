"""
XML Processing Utilities
========================

Source normalization and element helpers shared by the validators.
"""

from schematron_core.xml.utils import (
    local_name,
    namespace_uri,
    is_fragment,
    promote_element,
    copy_document,
    to_document,
    XMLSource,
)

__all__ = [
    "local_name",
    "namespace_uri",
    "is_fragment",
    "promote_element",
    "copy_document",
    "to_document",
    "XMLSource",
]
