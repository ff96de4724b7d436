"""
Transformation Framework
========================

XSLT utilities used to preprocess schemas and render reports.

Components:
- XSLTTransformer: chain of named XSLT stages
- load_xslt_transform: Load XSLT from file
- apply_xslt_transform: Apply XSLT to XML
"""

from schematron_core.transform.xslt import (
    RESOURCE_DIR,
    TransformError,
    XSLTTransformer,
    apply_xslt_transform,
    load_xslt_transform,
    string_params,
)

__all__ = [
    "RESOURCE_DIR",
    "TransformError",
    "XSLTTransformer",
    "apply_xslt_transform",
    "load_xslt_transform",
    "string_params",
]
