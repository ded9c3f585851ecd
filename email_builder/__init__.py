"""
Email Builder
=============

Assemble email-style documents from a fixed catalog of visual components
and render them to static HTML.

This package provides:
- Component catalog with typed settings schemas
- Template renderer with placeholder diagnostics
- Pure document editing operations and legacy document normalization
- Key-value template store with in-memory and Redis backends
- FastAPI REST endpoints for HTTP access
"""

__version__ = "1.0.0"
__author__ = "Email Builder Team"
