"""
Messaging feature package.

This vertical slice keeps every layer of the tenant messaging flow
co-located (domain models, repositories, services and API routers):
provisioning tenant tables, classifying incoming messages through the
assistant service and storing them per tenant.
"""

from .api.errors import register_exception_handlers  # noqa: F401
from .api.router import router as messaging_router  # noqa: F401
from .services.message_pipeline import MessagePipeline  # noqa: F401
