"""
FastAPI REST Endpoints
======================

REST API endpoints for HTTP access to the template editor.

Endpoints:
- GET /api/v1/components: Component catalog
- /api/v1/templates: Template CRUD, instance and setting edits
- GET /api/v1/templates/{id}/render: Rendered HTML with warnings
- GET /api/v1/templates/{id}/export: HTML file download
- POST /api/v1/render: Render an ad hoc document
- GET /api/v1/health: Health check endpoint
"""
