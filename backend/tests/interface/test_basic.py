"""
基础接口集成测试
测试应用的基础功能，包括健康检查、根路径和访问密钥
"""

import pytest


@pytest.mark.integration
@pytest.mark.basic
class TestBasicEndpoints:
    """基础端点集成测试类"""

    def test_root(self, client):
        """测试根路径"""
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Nano Banana Proxy"
        assert "version" in data
        assert data["docs"] == "/api/docs"

    def test_health(self, client):
        """测试健康检查"""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_unknown_route_uses_error_body(self, client):
        response = client.get("/api/does-not-exist")
        assert response.status_code == 404
        assert "error" in response.json()


@pytest.mark.integration
@pytest.mark.api
class TestAccessKey:
    """站点访问密钥"""

    @pytest.mark.parametrize("headers", [{}, {"x-site-access-key": "wrong"}])
    def test_models_requires_access_key(self, client, headers):
        response = client.get("/api/models", headers=headers)

        assert response.status_code == 403
        assert response.json() == {"error": "Invalid Site Access Key"}

    def test_generate_requires_access_key(self, client):
        response = client.post("/api/generate", json={"prompt": "a cat", "model": "stub-image"})

        assert response.status_code == 403
        assert response.json() == {"error": "Invalid Site Access Key"}

    def test_download_does_not_require_access_key(self, client):
        response = client.post("/api/download", json={})

        assert response.status_code == 400
