"""
Base Validation Classes
=======================

Abstract base class for the validation framework. Extend this class
to create validators for different schema types (Schematron, DTD, etc.).
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional
import logging

logger = logging.getLogger(__name__)


class BaseValidator(ABC):
    """
    Abstract base class for validators.

    Subclasses implement validate(); the file, string and element entry
    points all delegate to it.

    Example:
        class MyValidator(BaseValidator):
            def validate(self, source, **kwargs):
                doc = to_document(source)
                # ... validation logic ...
                return report
    """

    @abstractmethod
    def validate(self, source: Any, **kwargs) -> Any:
        """
        Validate an XML resource.

        Args:
            source: The XML resource (path, bytes, file object, lxml tree
                or element)
            **kwargs: Additional validation options

        Returns:
            Validator-specific report
        """
        pass

    def validate_file(self, file_path: Path, **kwargs) -> Any:
        """
        Validate a single file.

        Args:
            file_path: Path to the file to validate
            **kwargs: Additional validation options
        """
        return self.validate(Path(file_path), **kwargs)

    def validate_string(self, xml_string: str, base_url: Optional[str] = None,
                        **kwargs) -> Any:
        """
        Validate XML from a string.

        Args:
            xml_string: XML content as string
            base_url: Identifying reference for the content
            **kwargs: Additional validation options
        """
        return self.validate(xml_string.encode('utf-8'), base_url=base_url, **kwargs)

    def validate_element(self, element: Any, **kwargs) -> Any:
        """Validate an lxml Element as if it were a document root."""
        return self.validate(element, **kwargs)

    @property
    def schema_type(self) -> str:
        """Return the type of schema this validator uses (e.g., 'Schematron')."""
        return "Unknown"

    @property
    def schema_path(self) -> Optional[Path]:
        """Return the path to the schema file (if applicable)."""
        return None
