"""
Nano Banana 提供商单元测试
使用 respx 拦截 httpx 请求，不访问外部网络
"""

import json

import httpx
import pytest
import pytest_asyncio
import respx

from nanobanana_proxy.core.generation import (
    NanoBananaProvider,
    ProviderRequestError,
    UnrecognizedResponseShape,
)

BASE_URL = "https://generativelanguage.test/v1beta/models"


@pytest_asyncio.fixture
async def provider():
    instance = NanoBananaProvider(api_key="test-api-key", base_url=BASE_URL, timeout=5)
    yield instance
    await instance.close()


@pytest.mark.unit
@pytest.mark.generation
class TestRequestBuilding:

    def test_requires_api_key(self):
        with pytest.raises(ValueError):
            NanoBananaProvider(api_key="")

    def test_gemini_request(self):
        provider = NanoBananaProvider(api_key="k", base_url=BASE_URL + "/")

        url, payload = provider._build_request("gemini-2.5-flash-image", "a cat", {})

        assert url == f"{BASE_URL}/gemini-2.5-flash-image:generateContent"
        assert payload["contents"] == [{"parts": [{"text": "a cat"}]}]
        assert payload["generationConfig"] == {}

    def test_imagen_request(self):
        provider = NanoBananaProvider(api_key="k", base_url=BASE_URL)

        url, payload = provider._build_request("imagen-4.0-generate-001", "a cat", {})

        assert url == f"{BASE_URL}/imagen-4.0-generate-001:predict"
        assert payload == {"instances": [{"prompt": "a cat"}], "parameters": {"sampleCount": 1}}

    @pytest.mark.parametrize("width,height,expected", [
        (1024, 1024, "1:1"),
        (1920, 1080, "16:9"),
        (768, 1024, "3:4"),
        (1000, 333, None),
        (None, 1024, None),
        (0, 0, None),
    ])
    def test_aspect_ratio(self, width, height, expected):
        provider = NanoBananaProvider(api_key="k")

        assert provider._aspect_ratio({"width": width, "height": height}) == expected

    def test_aspect_ratio_in_payloads(self):
        provider = NanoBananaProvider(api_key="k", base_url=BASE_URL)
        options = {"width": 1920, "height": 1080}

        _, gemini_payload = provider._build_request("gemini-2.5-flash-image", "p", options)
        _, imagen_payload = provider._build_request("imagen-4.0-fast-generate-001", "p", options)

        assert gemini_payload["generationConfig"] == {"imageConfig": {"aspectRatio": "16:9"}}
        assert imagen_payload["parameters"]["aspectRatio"] == "16:9"


@pytest.mark.unit
@pytest.mark.generation
class TestGenerate:

    @pytest.mark.asyncio
    @respx.mock
    async def test_returns_raw_json_and_sends_api_key(self, provider):
        body = {"candidates": [{"content": {"parts": [{"text": "hello"}]}}]}
        route = respx.post(f"{BASE_URL}/gemini-2.5-flash-image:generateContent").mock(
            return_value=httpx.Response(200, json=body)
        )

        raw = await provider.generate("gemini-2.5-flash-image", "a cat", {})

        assert raw == body
        request = route.calls.last.request
        assert request.headers["x-goog-api-key"] == "test-api-key"
        assert json.loads(request.content)["contents"][0]["parts"][0]["text"] == "a cat"

    @pytest.mark.asyncio
    @respx.mock
    async def test_provider_error_message_is_kept(self, provider):
        respx.post(f"{BASE_URL}/imagen-4.0-generate-001:predict").mock(
            return_value=httpx.Response(400, json={"error": {"code": 400, "message": "API key not valid."}})
        )

        with pytest.raises(ProviderRequestError) as exc_info:
            await provider.generate("imagen-4.0-generate-001", "a cat", {})

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Nanobanana API Error: API key not valid."

    @pytest.mark.asyncio
    @respx.mock
    async def test_error_without_json_body(self, provider):
        respx.post(f"{BASE_URL}/imagen-4.0-generate-001:predict").mock(
            return_value=httpx.Response(503, text="upstream unavailable")
        )

        with pytest.raises(ProviderRequestError) as exc_info:
            await provider.generate("imagen-4.0-generate-001", "a cat", {})

        assert exc_info.value.status_code == 503
        assert "upstream unavailable" in exc_info.value.message

    @pytest.mark.asyncio
    @respx.mock
    async def test_network_error(self, provider):
        respx.post(f"{BASE_URL}/gemini-2.5-flash-image:generateContent").mock(
            side_effect=httpx.ConnectError("connection refused")
        )

        with pytest.raises(ProviderRequestError) as exc_info:
            await provider.generate("gemini-2.5-flash-image", "a cat", {})

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_non_json_success_body(self, provider):
        respx.post(f"{BASE_URL}/gemini-2.5-flash-image:generateContent").mock(
            return_value=httpx.Response(200, text="<html>oops</html>")
        )

        with pytest.raises(UnrecognizedResponseShape):
            await provider.generate("gemini-2.5-flash-image", "a cat", {})

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self):
        provider = NanoBananaProvider(api_key="k")
        provider._ensure_client()

        await provider.close()
        await provider.close()

        assert provider._client is None
