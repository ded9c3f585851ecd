"""
Rendering Module
===============

HTML generation for template documents.

Components:
- renderer: Placeholder substitution against the component catalog
- export: File name derivation and HTML export
- templates: HTML document shell
"""

from .renderer import TemplateRenderer, render_template
from .export import export_template, sanitize_file_name

__all__ = ["TemplateRenderer", "render_template", "export_template", "sanitize_file_name"]
