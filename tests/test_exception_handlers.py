"""Tests for global exception handlers.

Validates that every error type maps to its HTTP status with the minimal
``{"error": message}`` body and that server-side detail never leaks.
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from summarize_api.core.errors import (
    AppError,
    ConfigurationAppError,
    ContentBlockedAppError,
    LLMAppError,
    MethodNotAllowedAppError,
    PayloadTooLargeAppError,
    RateLimitedAppError,
    ValidationAppError,
)
from summarize_api.core.exception_handlers import (
    general_exception_handler,
    setup_exception_handlers,
    status_for,
)


@pytest.fixture
def app_with_handlers() -> FastAPI:
    """Create FastAPI app with exception handlers registered."""
    app = FastAPI()
    setup_exception_handlers(app)
    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    return TestClient(app_with_handlers, raise_server_exceptions=False)


class TestAppErrorHandler:
    """Test handler for AppError and subclasses."""

    @pytest.mark.parametrize(
        ("error", "status_code"),
        [
            (MethodNotAllowedAppError(code="method_not_allowed", message="Method Not Allowed"), 405),
            (RateLimitedAppError(code="rate_limited", message="Too many requests."), 429),
            (ValidationAppError(code="invalid_text", message="Invalid text."), 400),
            (PayloadTooLargeAppError(code="text_too_large", message="Text too large."), 413),
            (ContentBlockedAppError(code="content_blocked", message="Blocked."), 400),
        ],
    )
    def test_client_errors_return_message_verbatim(
        self, client: TestClient, app_with_handlers: FastAPI, error: AppError, status_code: int
    ) -> None:
        @app_with_handlers.get("/raise")
        async def raise_endpoint():
            raise error

        response = client.get("/raise")

        assert response.status_code == status_code
        assert response.json() == {"error": error.message}

    @pytest.mark.parametrize(
        "error",
        [
            LLMAppError(code="upstream_failure", message="Gemini API error: secret internals"),
            ConfigurationAppError(code="llm_missing_api_key", message="gemini provider requires LLM_API_KEY"),
        ],
    )
    def test_server_errors_return_generic_message(
        self, client: TestClient, app_with_handlers: FastAPI, error: AppError
    ) -> None:
        @app_with_handlers.get("/raise-server")
        async def raise_endpoint():
            raise error

        response = client.get("/raise-server")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to generate summary."}

    def test_method_not_allowed_sets_allow_header(self, client: TestClient, app_with_handlers: FastAPI) -> None:
        @app_with_handlers.get("/method")
        async def raise_endpoint():
            raise MethodNotAllowedAppError(code="method_not_allowed", message="Method Not Allowed")

        response = client.get("/method")

        assert response.headers["Allow"] == "POST"

    def test_rate_limited_sets_retry_headers(self, client: TestClient, app_with_handlers: FastAPI) -> None:
        @app_with_handlers.get("/limited")
        async def raise_endpoint():
            raise RateLimitedAppError(
                code="rate_limited",
                message="Too many requests.",
                details={"limit": 5, "remaining": 0, "retry_after": 600},
            )

        response = client.get("/limited")

        assert response.headers["Retry-After"] == "600"
        assert response.headers["X-RateLimit-Limit"] == "5"
        assert response.headers["X-RateLimit-Remaining"] == "0"

    def test_details_never_rendered_in_body(self, client: TestClient, app_with_handlers: FastAPI) -> None:
        @app_with_handlers.get("/details")
        async def raise_endpoint():
            raise ValidationAppError(
                code="invalid_text",
                message="Invalid text.",
                details={"hint": "too short", "actual_value": 3},
            )

        response = client.get("/details")

        assert response.json() == {"error": "Invalid text."}

    def test_unmapped_subclass_defaults_to_400(self) -> None:
        class CustomAppError(AppError):
            pass

        assert status_for(CustomAppError(code="x", message="y")) == 400


class TestGeneralExceptionHandler:
    """Test fallback handler for unexpected exceptions."""

    def test_unexpected_exception_handler_registered(self, app_with_handlers: FastAPI) -> None:
        assert Exception in app_with_handlers.exception_handlers

    def test_unexpected_exception_returns_generic_500(self, client: TestClient, app_with_handlers: FastAPI) -> None:
        @app_with_handlers.get("/boom")
        async def raise_endpoint():
            raise RuntimeError("database connection failed")

        response = client.get("/boom")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to generate summary."}

    def test_general_exception_handler_never_leaks_stack_trace(self) -> None:
        request = AsyncMock()
        request.url.path = "/test"
        request.method = "POST"

        exc = ValueError("Test error with details")
        response = asyncio.run(general_exception_handler(request, exc))

        response_text = bytes(response.body).decode()
        assert "Traceback" not in response_text
        assert "ValueError" not in response_text
        assert json.loads(response_text) == {"error": "Failed to generate summary."}


class TestErrorHandlerIntegration:
    def test_unknown_route_uses_error_shape(self, client: TestClient) -> None:
        response = client.get("/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}

    def test_multiple_handler_setups_does_not_fail(self) -> None:
        app = FastAPI()

        setup_exception_handlers(app)
        setup_exception_handlers(app)

        assert AppError in app.exception_handlers
