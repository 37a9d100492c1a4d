from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from app.config import Settings, get_settings
from app.features.messaging.api.router import get_message_pipeline, get_tenant_repository
from app.features.messaging.domain import ClassificationOutcome, PipelineResult
from app.features.messaging.repository import MessageWriteError, TenantProvisioningError
from app.features.messaging.services import InvalidTenantError
from app.main import app

CORS_HEADERS = {
    "access-control-allow-origin": "*",
    "access-control-allow-headers": "authorization, x-client-info, apikey, content-type",
    "access-control-allow-methods": "POST, GET, OPTIONS, PUT, DELETE",
}

client = TestClient(app)


def _assert_cors(response):
    for header, value in CORS_HEADERS.items():
        assert response.headers[header] == value


@pytest.fixture
def pipeline():
    fake = MagicMock()
    fake.handle = AsyncMock(return_value=PipelineResult(outcome=ClassificationOutcome.STORED))
    app.dependency_overrides[get_message_pipeline] = lambda: fake
    yield fake
    app.dependency_overrides.clear()


@pytest.fixture
def tenant_repository():
    fake = MagicMock()
    fake.create_tables = AsyncMock(return_value=None)
    app.dependency_overrides[get_tenant_repository] = lambda: fake
    yield fake
    app.dependency_overrides.clear()


def test_send_message_success_envelope(pipeline):
    response = client.post(
        "/send-message",
        json={"message": "What's your refund policy?", "tenantHash": "abc123"},
    )

    assert response.status_code == 200
    assert response.json() == {
        "status": "success",
        "code": 200,
        "message": "",
        "outcome": "stored",
    }
    pipeline.handle.assert_awaited_once_with("What's your refund policy?", "abc123")
    _assert_cors(response)
    assert response.headers["X-Request-ID"]


def test_send_message_accepts_hash_alias(pipeline):
    response = client.post("/send-message", json={"message": "hi", "hash": "abc123"})

    assert response.status_code == 200
    pipeline.handle.assert_awaited_once_with("hi", "abc123")


def test_send_message_missing_fields_reports_success(pipeline):
    pipeline.handle.return_value = PipelineResult(
        outcome=ClassificationOutcome.SKIPPED_INVALID_REQUEST
    )

    response = client.post("/send-message", json={"message": "hi"})

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["outcome"] == "skipped_invalid_request"
    pipeline.handle.assert_awaited_once_with("hi", None)


def test_send_message_timeout_is_still_success(pipeline):
    pipeline.handle.return_value = PipelineResult(outcome=ClassificationOutcome.SKIPPED_TIMED_OUT)

    response = client.post("/send-message", json={"message": "hi", "tenantHash": "abc123"})

    assert response.status_code == 200
    assert response.json()["outcome"] == "skipped_timed_out"


def test_send_message_storage_failure_uses_storage_code(pipeline):
    pipeline.handle.side_effect = MessageWriteError(
        "relation messages_abc123 does not exist", code=404, sqlstate="42P01"
    )

    response = client.post("/send-message", json={"message": "hi", "tenantHash": "abc123"})

    assert response.status_code == 404
    body = response.json()
    assert body["status"] == "error"
    assert body["code"] == 404
    assert "does not exist" in body["message"]
    _assert_cors(response)


def test_send_message_invalid_tenant_is_400(pipeline):
    pipeline.handle.side_effect = InvalidTenantError("Tenant hash must be alphanumeric")

    response = client.post("/send-message", json={"message": "hi", "tenantHash": "a-b"})

    assert response.status_code == 400
    assert response.json()["code"] == 400


def test_send_message_unexpected_error_is_500(pipeline):
    pipeline.handle.side_effect = RuntimeError("boom")

    response = client.post("/send-message", json={"message": "hi", "tenantHash": "abc123"})

    assert response.status_code == 500
    assert response.json() == {
        "status": "error",
        "code": 500,
        "message": "boom",
        "outcome": None,
    }
    _assert_cors(response)


def test_send_message_malformed_json_is_error_envelope(pipeline):
    response = client.post(
        "/send-message",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["status"] == "error"
    _assert_cors(response)
    pipeline.handle.assert_not_awaited()


def test_send_message_wrong_field_type_is_error_envelope(pipeline):
    response = client.post("/send-message", json={"message": 123, "tenantHash": "abc123"})

    assert response.status_code == 400
    pipeline.handle.assert_not_awaited()


def test_send_message_without_assistant_config_is_500():
    config = Settings(_env_file=None, OPENAI_API_KEY="sk-test", OPENAI_ASSISTANT_ID=None)
    app.dependency_overrides[get_settings] = lambda: config
    try:
        response = client.post("/send-message", json={"message": "hi", "tenantHash": "abc123"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json()["status"] == "error"
    assert "OPENAI_ASSISTANT_ID" in response.json()["message"]
    _assert_cors(response)


@pytest.mark.parametrize("path", ["/send-message", "/create-user-tables", "/anything"])
def test_preflight_returns_ok_with_cors_headers(path):
    response = client.options(path)

    assert response.status_code == 200
    assert response.text == "ok"
    _assert_cors(response)


def test_other_methods_have_no_logic_but_keep_cors():
    response = client.get("/send-message")

    assert response.status_code == 405
    _assert_cors(response)


def test_create_user_tables_provisions_tenant(tenant_repository):
    response = client.post("/create-user-tables", json={"hash": "abc123"})

    assert response.status_code == 200
    assert response.json()["status"] == "success"
    tenant_repository.create_tables.assert_awaited_once_with("abc123")
    _assert_cors(response)


def test_create_user_tables_without_hash_is_noop(tenant_repository):
    response = client.post("/create-user-tables", json={})

    assert response.status_code == 200
    assert response.json() == {"status": "success", "code": 200, "message": "", "outcome": None}
    tenant_repository.create_tables.assert_not_awaited()


def test_create_user_tables_rejects_unsafe_hash(tenant_repository):
    response = client.post("/create-user-tables", json={"hash": "abc'); DROP TABLE x;--"})

    assert response.status_code == 400
    assert response.json()["code"] == 400
    tenant_repository.create_tables.assert_not_awaited()


def test_create_user_tables_database_failure(tenant_repository):
    tenant_repository.create_tables.side_effect = TenantProvisioningError(
        "connection refused", code=503
    )

    response = client.post("/create-user-tables", json={"hash": "abc123"})

    assert response.status_code == 503
    assert response.json() == {
        "status": "error",
        "code": 503,
        "message": "connection refused",
        "outcome": None,
    }


def test_send_message_missing_fields_without_assistant_config_is_success():
    config = Settings(_env_file=None, OPENAI_API_KEY=None, OPENAI_ASSISTANT_ID=None)
    app.dependency_overrides[get_settings] = lambda: config
    try:
        response = client.post("/send-message", json={})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.json() == {
        "status": "success",
        "code": 200,
        "message": "",
        "outcome": "skipped_invalid_request",
    }
    _assert_cors(response)


def test_send_message_failure_log_names_failed_operation(pipeline, monkeypatch):
    fake_logger = MagicMock()
    monkeypatch.setattr("app.features.messaging.api.router.logger", fake_logger)
    pipeline.handle.side_effect = MessageWriteError(
        "relation messages_abc123 does not exist",
        operation="insert_message",
        code=404,
        sqlstate="42P01",
    )

    response = client.post("/send-message", json={"message": "hi", "tenantHash": "abc123"})

    assert response.status_code == 404
    fake_logger.exception.assert_called_once()
    assert fake_logger.exception.call_args.kwargs["operation"] == "insert_message"
