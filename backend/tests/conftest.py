"""
测试配置和fixtures
为所有测试提供共享的配置和fixtures

- 图片 fixtures 使用 Pillow 在内存中生成，不依赖外部文件
- 接口测试使用 FastAPI TestClient，提供商替换为返回固定响应的桩实现
"""

from typing import Dict

import pytest
from fastapi.testclient import TestClient

from nanobanana_proxy.core.config import Settings
from tests.utils import TINY_PNG_BASE64, StubProvider, build_stub_registry, make_image_bytes

TEST_ACCESS_KEY = "test-site-key"


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes("PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image_bytes("JPEG")


@pytest.fixture
def tiny_png_base64() -> str:
    return TINY_PNG_BASE64


@pytest.fixture
def test_settings() -> Settings:
    """隔离的测试配置：无 B2、无 Webhook"""
    return Settings(
        site_access_key=TEST_ACCESS_KEY,
        nanobanana_api_key=None,
        b2_application_key_id="",
        b2_application_key="",
        custom_server_url=None,
        max_upload_size=1024 * 1024,
    )


@pytest.fixture
def stub_provider() -> StubProvider:
    return StubProvider(
        response={
            "candidates": [
                {"content": {"parts": [{"inlineData": {"mimeType": "image/png", "data": TINY_PNG_BASE64}}]}}
            ]
        }
    )


@pytest.fixture
def client(test_settings, stub_provider):
    """测试客户端fixture：启动应用后替换为桩注册表"""
    from main import create_app

    app = create_app(test_settings)
    with TestClient(app) as test_client:
        app.state.registry = build_stub_registry(stub_provider)
        yield test_client


@pytest.fixture
def auth_headers() -> Dict[str, str]:
    return {"x-site-access-key": TEST_ACCESS_KEY}


# 测试标记配置
def pytest_configure(config):
    """配置pytest标记"""
    config.addinivalue_line("markers", "unit: 单元测试")
    config.addinivalue_line("markers", "integration: 集成测试")
    config.addinivalue_line("markers", "basic: 基础功能测试")
    config.addinivalue_line("markers", "normalizer: 响应归一化测试")
    config.addinivalue_line("markers", "metadata: 提示词元数据测试")
    config.addinivalue_line("markers", "generation: 图片生成测试")
    config.addinivalue_line("markers", "delivery: 结果投递测试")
    config.addinivalue_line("markers", "storage: 存储适配器测试")
    config.addinivalue_line("markers", "api: 接口测试")
    config.addinivalue_line("markers", "logging: 日志测试")
