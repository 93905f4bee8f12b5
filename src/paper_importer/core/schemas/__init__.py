"""
Schemas Package

JSON schema definitions and validation utilities for uploads and catalogs.
"""

from .validator import (
    ImportCheck,
    ValidationError,
    check_import_payload,
    validate_catalog,
    validate_paper,
)

__all__ = [
    "ImportCheck",
    "ValidationError",
    "check_import_payload",
    "validate_catalog",
    "validate_paper",
]
