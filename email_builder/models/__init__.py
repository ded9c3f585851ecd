"""
Data Models
===========

Pydantic models for the component catalog, template documents, render results
and API payloads.
"""
