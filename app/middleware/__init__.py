"""
Middleware components for request processing.

This package contains middleware for:
- Request context (request ID, request timing log)
- CORS headers on every response
"""

from app.middleware.cors import CORSMiddleware
from app.middleware.request_context import RequestContextMiddleware

__all__ = [
    "RequestContextMiddleware",
    "CORSMiddleware",
]
