"""
Schemas module - Request/Response schemas for API endpoints.

Request schemas forbid unknown fields; response schemas are the API
contract returned by the services.
"""
