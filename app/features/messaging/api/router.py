"""
Messaging routes.

Usage:
    1. POST /create-user-tables - Provision messages tables for a tenant hash
    2. POST /send-message - Classify a message and store it for the tenant

Both endpoints answer with the same envelope:
    {"status": "success" | "error", "code": int, "message": str, "outcome": ...}
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.config import Settings, get_settings
from app.features.messaging.api.errors import error_response, success_response
from app.features.messaging.api.schemas import (
    CreateUserTablesRequest,
    ResponseEnvelope,
    SendMessageRequest,
)
from app.features.messaging.repository import MessageRepository, TenantRepository
from app.features.messaging.services import (
    ClassificationService,
    MessagePipeline,
    TenantResolver,
)
from app.features.messaging.services.tenant_resolver import validate_tenant_hash
from app.infrastructure.observability.logging import get_logger

router = APIRouter(tags=["messaging"])
logger = get_logger(__name__)


def get_message_pipeline(config: Settings = Depends(get_settings)) -> MessagePipeline:
    """Build a pipeline for one request from the injected settings."""
    return MessagePipeline(
        resolver=TenantResolver(config),
        classifier_factory=lambda: ClassificationService(config),
        repository=MessageRepository,
    )


def get_tenant_repository() -> type[TenantRepository]:
    return TenantRepository


@router.post("/send-message", response_model=ResponseEnvelope)
async def send_message(
    payload: SendMessageRequest,
    pipeline: MessagePipeline = Depends(get_message_pipeline),
) -> JSONResponse:
    """
    Classify a message and store it in the tenant's messages table.

    Returns:
        200 with the outcome (stored / skipped_*) on success

    Raises (as error envelopes):
        400: Tenant hash is not a valid table suffix
        404: Tenant tables were never provisioned
        5xx: Assistant service or database failure
    """
    try:
        result = await pipeline.handle(payload.message, payload.tenant_hash)
    except Exception as e:
        logger.exception(
            "Send-message pipeline failed",
            tenant_hash=payload.tenant_hash,
            error_type=type(e).__name__,
            operation=getattr(e, "operation", None),
        )
        return error_response(e)

    logger.info(
        "Send-message request handled",
        tenant_hash=payload.tenant_hash,
        outcome=result.outcome.value,
        bucket_label=result.bucket_label,
    )
    return success_response(ResponseEnvelope.success(outcome=result.outcome))


@router.post("/create-user-tables", response_model=ResponseEnvelope)
async def create_user_tables(
    payload: CreateUserTablesRequest,
    config: Settings = Depends(get_settings),
    repository: type[TenantRepository] = Depends(get_tenant_repository),
) -> JSONResponse:
    """
    Provision per-tenant tables. A body without ``hash`` is a no-op.
    """
    if not payload.hash:
        logger.info("Create-user-tables request without hash, nothing to do")
        return success_response(ResponseEnvelope.success())

    try:
        validate_tenant_hash(payload.hash, prefix=config.MESSAGE_TABLE_PREFIX)
        await repository.create_tables(payload.hash)
    except Exception as e:
        logger.exception(
            "Tenant provisioning failed",
            tenant_hash=payload.hash,
            error_type=type(e).__name__,
            operation=getattr(e, "operation", None),
        )
        return error_response(e)

    return success_response(ResponseEnvelope.success())
