"""Tests for the /api/summarize endpoint.

The provider client is replaced through FastAPI dependency overrides, so
these tests exercise routing, the admission pipeline, the rate limiter and
the exception handlers together without any network call.
"""

import logging
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from summarize_api.adapters.llm.base import ContentBlockedError
from summarize_api.api.dependencies import get_llm_client
from summarize_api.core.app_factory import create_app
from summarize_api.core.config import settings

from conftest import FakeLLMClient

URL = "/api/summarize"
VALID_TEXT = "Photosynthesis converts light energy into chemical energy stored in glucose."


@pytest.fixture
def fake_llm() -> FakeLLMClient:
    return FakeLLMClient(summary="Plants turn light into sugar.")


@pytest.fixture
def client(fake_llm: FakeLLMClient) -> Iterator[TestClient]:
    app = create_app()
    app.dependency_overrides[get_llm_client] = lambda: fake_llm
    yield TestClient(app)
    app.dependency_overrides.clear()


def _post(client: TestClient, text=VALID_TEXT, ip: str = "1.2.3.4", **kwargs):
    return client.post(URL, json={"text": text}, headers={"X-Forwarded-For": ip}, **kwargs)


class TestSuccess:
    def test_returns_summary(self, client: TestClient, fake_llm: FakeLLMClient) -> None:
        response = _post(client)

        assert response.status_code == 200
        assert response.json() == {"summary": "Plants turn light into sugar."}
        assert fake_llm.prompts == [settings.app.summary_prompt + VALID_TEXT]

    def test_exactly_50_chars_reaches_provider(self, client: TestClient, fake_llm: FakeLLMClient) -> None:
        response = _post(client, text="x" * 50)

        assert response.status_code == 200
        assert len(fake_llm.prompts) == 1

    def test_astral_text_of_50_utf16_units_is_accepted(self, client: TestClient) -> None:
        response = _post(client, text="\U0001F600" * 25)

        assert response.status_code == 200


class TestMethodGate:
    @pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE"])
    def test_non_post_returns_405(self, client: TestClient, method: str) -> None:
        response = client.request(method, URL, json={"text": VALID_TEXT})

        assert response.status_code == 405
        assert response.json() == {"error": "Method Not Allowed"}
        assert response.headers["Allow"] == "POST"

    def test_non_post_does_not_consume_quota(self, client: TestClient) -> None:
        for _ in range(10):
            client.get(URL, headers={"X-Forwarded-For": "1.2.3.4"})

        statuses = [_post(client).status_code for _ in range(5)]

        assert statuses == [200] * 5


class TestRateLimit:
    def test_sixth_rapid_post_is_throttled(self, client: TestClient) -> None:
        statuses = [_post(client, ip="1.2.3.4").status_code for _ in range(6)]

        assert statuses == [200, 200, 200, 200, 200, 429]

    def test_throttled_body_and_headers(self, client: TestClient) -> None:
        for _ in range(5):
            _post(client)

        response = _post(client)

        assert response.status_code == 429
        assert response.json() == {"error": "Too many requests. Please try again in 10 minutes."}
        assert response.headers["Retry-After"] == "600"
        assert response.headers["X-RateLimit-Limit"] == "5"
        assert response.headers["X-RateLimit-Remaining"] == "0"

    def test_headers_can_be_disabled(self, client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings.app, "rate_limit_include_headers", False)
        for _ in range(5):
            _post(client)

        response = _post(client)

        assert response.status_code == 429
        assert "Retry-After" not in response.headers

    def test_clients_are_counted_separately(self, client: TestClient) -> None:
        for _ in range(5):
            _post(client, ip="1.2.3.4")

        assert _post(client, ip="1.2.3.4").status_code == 429
        assert _post(client, ip="5.6.7.8").status_code == 200

    def test_missing_forwarded_header_uses_shared_bucket(self, client: TestClient) -> None:
        statuses = [client.post(URL, json={"text": VALID_TEXT}).status_code for _ in range(6)]

        assert statuses[-1] == 429

    def test_invalid_requests_count_against_quota(self, client: TestClient) -> None:
        for _ in range(5):
            assert _post(client, text="short").status_code == 400

        assert _post(client).status_code == 429

    def test_disabled_rate_limit(self, client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings.app, "rate_limit_enabled", False)

        statuses = {_post(client).status_code for _ in range(10)}

        assert statuses == {200}

    def test_threshold_is_configurable(self, client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings.app, "rate_limit_requests", 2)

        statuses = [_post(client).status_code for _ in range(3)]

        assert statuses == [200, 200, 429]


class TestValidation:
    def test_49_chars_returns_400(self, client: TestClient) -> None:
        response = _post(client, text="x" * 49)

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid text. Min 50 characters required."}

    def test_30001_chars_returns_413(self, client: TestClient) -> None:
        response = _post(client, text="x" * 30001)

        assert response.status_code == 413
        assert response.json() == {"error": "Text too large. Max 30,000 characters."}

    @pytest.mark.parametrize("payload", [{}, {"text": 42}, {"text": None}, {"body": VALID_TEXT}, [VALID_TEXT]])
    def test_missing_or_wrong_type_returns_400(self, client: TestClient, payload) -> None:
        response = client.post(URL, json=payload, headers={"X-Forwarded-For": "9.9.9.9"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid text. Min 50 characters required."}

    def test_malformed_json_returns_400(self, client: TestClient) -> None:
        response = client.post(
            URL,
            content=b'{"text": "unterminated',
            headers={"Content-Type": "application/json", "X-Forwarded-For": "9.9.9.9"},
        )

        assert response.status_code == 400

    def test_deeply_nested_json_returns_400(self, client: TestClient) -> None:
        response = client.post(
            URL,
            content=b"[" * 100000,
            headers={"Content-Type": "application/json", "X-Forwarded-For": "9.9.9.9"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid text. Min 50 characters required."}

    def test_rejected_input_never_reaches_provider(self, client: TestClient, fake_llm: FakeLLMClient) -> None:
        _post(client, text="x" * 49)
        _post(client, text="x" * 30001)

        assert fake_llm.prompts == []


class TestUpstreamFailures:
    def test_safety_block_returns_400(self, client: TestClient, fake_llm: FakeLLMClient) -> None:
        fake_llm.error = ContentBlockedError("gemini", reason="SAFETY")

        response = _post(client)

        assert response.status_code == 400
        assert response.json() == {"error": "Content was blocked by safety filters."}

    def test_network_error_returns_generic_500(
        self,
        client: TestClient,
        fake_llm: FakeLLMClient,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        fake_llm.error = ConnectionError("upstream host 10.1.2.3 refused connection")

        with caplog.at_level(logging.ERROR):
            response = _post(client)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to generate summary."}
        assert "10.1.2.3" not in response.text
        assert any("10.1.2.3" in str(getattr(r, "error_msg", "")) for r in caplog.records)


class TestRouting:
    def test_unknown_path_uses_error_shape(self, client: TestClient) -> None:
        response = client.post("/api/unknown", json={"text": VALID_TEXT})

        assert response.status_code == 404
        assert "error" in response.json()

    def test_health_is_not_rate_limited(self, client: TestClient) -> None:
        for _ in range(10):
            response = client.get("/health", headers={"X-Forwarded-For": "1.2.3.4"})
            assert response.status_code == 200

        assert response.json()["status"] == "ok"

    def test_openapi_documents_request_body(self, client: TestClient) -> None:
        schema = client.get("/openapi.json").json()

        operation = schema["paths"][URL]["post"]
        assert "requestBody" in operation
        assert set(operation["responses"]) >= {"200", "400", "405", "413", "429", "500"}
        assert "get" not in schema["paths"][URL]
