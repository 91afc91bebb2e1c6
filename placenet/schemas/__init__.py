"""
Schemas module - Request/Response schemas for API endpoints.

Everything lives in placenet.schemas.schemas; import from there.
"""
