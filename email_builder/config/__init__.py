"""
Configuration Management
=======================

Environment-based configuration using Pydantic Settings.

Components:
- settings: Main application settings and environment configuration
- database: Redis connection management for the template store
- logging: Structured logging configuration
"""
