"""
Schemas module - Request/Response schemas for API endpoints.

Difference from models:
- Models: records handed around by repositories and services
- Schemas: API contract (what client sends/receives)
"""
