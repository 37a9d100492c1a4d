"""
Request and response models for the messaging endpoints.

Request fields are optional on purpose: a body missing ``message`` or the
tenant hash is a silent no-op, not a validation error.
"""

from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from app.features.messaging.domain import ClassificationOutcome


class SendMessageRequest(BaseModel):
    """Body of POST /send-message."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    message: str | None = Field(None, description="Raw user message to classify")
    tenant_hash: str | None = Field(
        None,
        validation_alias=AliasChoices("tenantHash", "hash", "tenant_hash"),
        description="Opaque tenant identifier; selects the messages table",
    )


class CreateUserTablesRequest(BaseModel):
    """Body of POST /create-user-tables."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    hash: str | None = Field(None, description="Tenant hash to provision tables for")


class ResponseEnvelope(BaseModel):
    """Uniform response wrapper shared by both endpoints."""

    status: Literal["success", "error"]
    code: int
    message: str = ""
    outcome: ClassificationOutcome | None = None

    @classmethod
    def success(cls, outcome: ClassificationOutcome | None = None) -> "ResponseEnvelope":
        return cls(status="success", code=200, message="", outcome=outcome)

    @classmethod
    def error(cls, code: int, message: str) -> "ResponseEnvelope":
        return cls(status="error", code=code, message=message)
