"""
Core Business Logic
==================

Core business logic modules for template editing and rendering.

Modules:
- catalog: Closed set of component definitions
- documents: Document normalization and pure editing operations
- rendering: Placeholder substitution, HTML shell and export
- storage: Key-value template persistence with a summary index
"""
