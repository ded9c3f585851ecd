"""
Document Module
===============

Template document handling.

Components:
- normalizer: Legacy/canonical shape normalization and persisted shape validation
- editor: Pure document editing operations
"""

from .normalizer import DocumentShapeValidator, normalize_document, normalize_instance
from .editor import (
    add_instance,
    coerce_setting_value,
    create_document,
    rename_document,
    set_setting,
)

__all__ = [
    "DocumentShapeValidator",
    "normalize_document",
    "normalize_instance",
    "add_instance",
    "coerce_setting_value",
    "create_document",
    "rename_document",
    "set_setting",
]
