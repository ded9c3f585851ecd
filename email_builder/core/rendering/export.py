"""
HTML Export
===========

Render a document for download as a standalone ``.html`` file.
"""

import re

from email_builder.core.catalog import ComponentCatalog
from email_builder.core.documents.normalizer import DocumentInput, normalize_document
from email_builder.core.rendering.renderer import render_template
from email_builder.models.schemas import ExportResult

FILE_NAME_UNSAFE = re.compile(r"[^a-z0-9_-]+")
DEFAULT_FILE_NAME = "template"


def sanitize_file_name(name: str) -> str:
    """
    Derive a safe file stem from a document name.

    Lower-cases and trims the name, then replaces each run of characters
    outside ``[a-z0-9_-]`` with a single hyphen.

    Args:
        name: Document display name

    Returns:
        File stem, ``template`` when nothing usable remains
    """
    cleaned = FILE_NAME_UNSAFE.sub("-", name.strip().lower())
    return cleaned or DEFAULT_FILE_NAME


def export_template(document: DocumentInput, catalog: ComponentCatalog) -> ExportResult:
    """
    Render a document and name the resulting file.

    Args:
        document: TemplateDocument or raw document data
        catalog: Component catalog

    Returns:
        ExportResult with file name, HTML and render warnings
    """
    doc = normalize_document(document)
    result = render_template(doc, catalog)
    return ExportResult(
        file_name=f"{sanitize_file_name(doc.name)}.html",
        html=result.html,
        warnings=result.warnings,
    )
