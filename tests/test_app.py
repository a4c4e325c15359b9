"""Flask API 测试。"""

import json

import pytest

from app import create_app
from giftgenie.services import AppService, RecommendationService
from giftgenie.services.app_service import FETCH_ERROR_MESSAGE


PROFILE = {
    "age": "28",
    "occasion": "Birthday",
    "hobbies": "reading",
    "budget": "₹1000",
}


@pytest.fixture
def client(mock_llm_with_gifts, favorites_store):
    """使用 Mock LLM 与临时存储的测试客户端。"""
    service = AppService(
        recommendation_service=RecommendationService(llm_service=mock_llm_with_gifts),
        store=favorites_store,
    )
    app = create_app(service)
    app.config["TESTING"] = True
    return app.test_client()


class TestRecommendationsEndpoint:
    """测试 /api/recommendations。"""

    def test_submit_returns_recommendations(self, client):
        """测试提交成功返回五条推荐。"""
        response = client.post("/api/recommendations", json=PROFILE)

        assert response.status_code == 200
        data = response.get_json()
        assert data["success"] is True
        assert len(data["recommendations"]) == 5
        assert data["state"]["loading"] is False
        assert data["state"]["error"] is None

    def test_submit_missing_fields_returns_400(self, client, mock_llm_with_gifts):
        """测试缺少字段返回 400 且不调用模型。"""
        response = client.post("/api/recommendations", json={"age": "28", "hobbies": " "})

        assert response.status_code == 400
        assert "occasion" in response.get_json()["error"]
        assert "hobbies" in response.get_json()["error"]
        assert mock_llm_with_gifts.call_count == 0

    def test_submit_failure_returns_generic_error(self, client, mock_llm_with_gifts):
        """测试模型失败时返回通用错误信息。"""
        mock_llm_with_gifts.should_fail = True

        response = client.post("/api/recommendations", json=PROFILE)

        assert response.status_code == 502
        data = response.get_json()
        assert data["success"] is False
        assert data["error"] == FETCH_ERROR_MESSAGE

    def test_get_recommendations(self, client):
        """测试获取当前推荐列表。"""
        client.post("/api/recommendations", json=PROFILE)

        response = client.get("/api/recommendations")

        assert len(response.get_json()["recommendations"]) == 5

    def test_numeric_zero_age_is_accepted(self, client, mock_llm_with_gifts):
        """测试数字 0 作为年龄不会被判定为缺失字段。"""
        response = client.post("/api/recommendations", json={**PROFILE, "age": 0})

        assert response.status_code == 200
        assert mock_llm_with_gifts.call_count == 1
        assert "Age: 0" in mock_llm_with_gifts.last_prompt


class TestFavoritesEndpoints:
    """测试收藏相关接口。"""

    def test_toggle_favorite(self, client, favorites_store, sample_gift):
        """测试收藏与取消收藏。"""
        response = client.post("/api/favorites/toggle", json={"gift": sample_gift.to_dict()})

        assert response.status_code == 200
        assert response.get_json()["favorited"] is True
        assert json.loads(favorites_store.path.read_text(encoding="utf-8")) == [sample_gift.to_dict()]

        response = client.post("/api/favorites/toggle", json=sample_gift.to_dict())

        assert response.get_json()["favorited"] is False
        assert client.get("/api/favorites").get_json()["favorites"] == []

    def test_toggle_invalid_gift_returns_400(self, client):
        """测试无效礼物数据返回 400。"""
        response = client.post("/api/favorites/toggle", json={"gift": {"giftName": "Incomplete"}})

        assert response.status_code == 400

    def test_favorites_listed_in_state(self, client, sample_gift):
        """测试状态中包含收藏数量。"""
        client.post("/api/favorites/toggle", json=sample_gift.to_dict())

        state = client.get("/api/state").get_json()

        assert state["favorites_count"] == 1
        assert state["favorites"][0]["giftName"] == "Book Light"


class TestViewModeEndpoint:
    """测试 /api/view-mode。"""

    def test_set_view_mode(self, client, sample_gift):
        """测试切换到收藏视图后 displayed 为收藏列表。"""
        client.post("/api/recommendations", json=PROFILE)
        client.post("/api/favorites/toggle", json=sample_gift.to_dict())

        response = client.post("/api/view-mode", json={"mode": "favorites"})

        data = response.get_json()
        assert data["view_mode"] == "favorites"
        assert [g["id"] for g in data["displayed"]] == [sample_gift.id]
        assert data["displayed"][0]["favorited"] is True

    def test_empty_body_flips_mode(self, client):
        """测试空请求体切换视图。"""
        assert client.post("/api/view-mode").get_json()["view_mode"] == "favorites"
        assert client.post("/api/view-mode").get_json()["view_mode"] == "results"

    def test_unknown_mode_returns_400(self, client):
        """测试未知视图模式返回 400。"""
        response = client.post("/api/view-mode", json={"mode": "grid"})

        assert response.status_code == 400


class TestAppFactory:
    """测试 create_app 工厂。"""

    def test_import_builds_no_app(self):
        """测试导入 app 模块时不会创建 Flask 实例，也不会读取数据目录。"""
        import app as app_module
        from flask import Flask

        assert callable(app_module.create_app)
        assert not any(isinstance(value, Flask) for value in vars(app_module).values())

    def test_factory_uses_injected_service(self, favorites_store, mock_llm):
        """测试注入的 AppService 被路由使用。"""
        service = AppService(
            recommendation_service=RecommendationService(llm_service=mock_llm),
            store=favorites_store,
        )
        flask_app = create_app(service)

        response = flask_app.test_client().get("/api/state")

        assert response.status_code == 200
        assert response.get_json()["loading"] is False
