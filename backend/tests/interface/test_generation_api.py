"""
模型列表与图片生成接口集成测试
提供商由桩实现替代，不访问外部网络
"""

from unittest.mock import AsyncMock

import pytest

from nanobanana_proxy.core.generation import ProviderRequestError
from nanobanana_proxy.services.delivery import DeliveryReport
from tests.utils import TINY_PNG_BASE64


@pytest.mark.integration
@pytest.mark.api
class TestModelsEndpoint:

    def test_list_models(self, client, auth_headers):
        response = client.get("/api/models", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == [
            {"id": "stub-image", "name": "Stub Image", "description": "Stub model for tests"}
        ]


@pytest.mark.integration
@pytest.mark.api
@pytest.mark.generation
class TestGenerateEndpoint:

    def test_generate_inline_image(self, client, auth_headers, stub_provider):
        response = client.post(
            "/api/generate",
            json={"prompt": "a cat", "model": "stub-image", "width": 1024, "height": 1024},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json() == {
            "type": "inline-image",
            "mimeType": "image/png",
            "data": TINY_PNG_BASE64,
            "delivery": {"b2": None, "webhook": None},
        }
        assert stub_provider.calls[0]["options"] == {"width": 1024, "height": 1024}

    def test_generate_text_result(self, client, auth_headers, stub_provider):
        stub_provider.response = {"candidates": [{"content": {"parts": [{"text": "I cannot generate that."}]}}]}

        response = client.post("/api/generate", json={"prompt": "x", "model": "stub-image"}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {
            "type": "text",
            "data": "I cannot generate that.",
            "delivery": {"b2": None, "webhook": None},
        }

    @pytest.mark.parametrize("body,error", [
        ({"model": "stub-image"}, "Prompt is required"),
        ({"prompt": "", "model": "stub-image"}, "Prompt is required"),
        ({"prompt": "a cat"}, "Model ID is required"),
    ])
    def test_missing_fields(self, client, auth_headers, body, error):
        response = client.post("/api/generate", json=body, headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"error": error}

    def test_unknown_model(self, client, auth_headers):
        response = client.post("/api/generate", json={"prompt": "a cat", "model": "nope"}, headers=auth_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Failed to generate image", "details": "Model 'nope' not found."}

    def test_provider_error(self, client, auth_headers, stub_provider):
        stub_provider.error = ProviderRequestError("Nanobanana API Error: quota exceeded", status_code=429)

        response = client.post("/api/generate", json={"prompt": "a cat", "model": "stub-image"}, headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {
            "error": "Failed to generate image",
            "details": "Nanobanana API Error: quota exceeded",
        }

    def test_unrecognized_response(self, client, auth_headers, stub_provider):
        stub_provider.response = {"unexpected": True}

        response = client.post("/api/generate", json={"prompt": "a cat", "model": "stub-image"}, headers=auth_headers)

        assert response.status_code == 500
        assert response.json()["details"] == "Unknown response format from stub"

    def test_delivery_report_included(self, client, auth_headers):
        delivery = client.app.state.delivery
        delivery.process_delivery = AsyncMock(
            return_value=DeliveryReport(b2="https://bucket.endpoint/nanobanana/x/", webhook="success")
        )

        response = client.post(
            "/api/generate",
            json={"prompt": "a cat", "model": "stub-image"},
            headers={**auth_headers, "user-agent": "pytest-agent", "x-forwarded-for": "10.0.0.1, 10.0.0.2"},
        )

        assert response.json()["delivery"] == {"b2": "https://bucket.endpoint/nanobanana/x/", "webhook": "success"}
        result, prompt, metadata = delivery.process_delivery.call_args.args
        assert result.is_image
        assert prompt == "a cat"
        assert metadata["ip"] == "10.0.0.1"
        assert metadata["userAgent"] == "pytest-agent"
        assert metadata["model"] == "stub-image"
        assert metadata["prompt"] == "a cat"
