"""
Test Assertions
===============

Custom assertion helpers for testing template rendering.
"""

from typing import List, Optional

from email_builder.models.schemas import RenderResult, TemplateDocument

DOCUMENT_PREFIX = "<!doctype html><html><body>"
DOCUMENT_SUFFIX = "</body></html>"


def extract_body(html: str) -> str:
    """Return the content between the document shell tags."""
    assert_valid_html_document(html)
    return html[len(DOCUMENT_PREFIX) : -len(DOCUMENT_SUFFIX)]


def assert_valid_html_document(html: str) -> None:
    """Assert that rendered HTML is wrapped in the document shell exactly once."""
    assert html.startswith(DOCUMENT_PREFIX), f"Missing document shell: {html[:60]!r}"
    assert html.endswith(DOCUMENT_SUFFIX), f"Unterminated document: {html[-60:]!r}"
    assert html.count("<body>") == 1


def assert_render_result(
    result: RenderResult, body: str, warnings: Optional[List[str]] = None
) -> None:
    """Assert the exact body and warnings of a render result."""
    assert isinstance(result, RenderResult)
    assert extract_body(result.html) == body
    assert result.warnings == (warnings or [])


def assert_canonical_document(document: TemplateDocument) -> None:
    """Assert that a document serializes to the canonical persisted shape only."""
    data = document.to_storage()
    assert set(data) == {"id", "name", "instances"}
    for instance in data["instances"]:
        assert set(instance) == {"id", "componentId", "overrides"}
