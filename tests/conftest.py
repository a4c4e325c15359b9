"""测试配置和共享 Fixtures。"""

import json

import pytest

from giftgenie.models import GiftRecommendation, UserProfile
from giftgenie.services.favorites_store import FavoritesStore


# ============================================================================
# Mock Services
# ============================================================================

class MockLLMService:
    """测试用 Mock LLM 服务。

    可以通过设置 response 属性来控制返回值。
    可以通过设置 should_fail 来模拟失败。
    可以通过设置 on_call 在返回前执行回调（用于模拟并发提交）。
    """

    def __init__(self):
        self.response = "[]"
        self.should_fail = False
        self.on_call = None
        self.call_count = 0
        self.last_prompt = None
        self.last_schema = None

    def call(self, prompt: str, *, json_mode: bool = False, response_schema=None) -> str:
        self.call_count += 1
        self.last_prompt = prompt
        self.last_schema = response_schema

        if self.on_call is not None:
            callback, self.on_call = self.on_call, None
            callback()

        if self.should_fail:
            raise Exception("Mock LLM failure")

        return self.response


def make_gift_item(name: str, **overrides) -> dict:
    """构造一条模型返回的礼物 JSON 对象。"""
    item = {
        "giftName": name,
        "whyItFits": f"{name} suits them",
        "budgetCategory": "₹500 - ₹800",
        "alternatives": [f"{name} Mini"],
        "type": "Practical",
        "targetAudience": "Readers",
    }
    item.update(overrides)
    return item


# ============================================================================
# Model Fixtures
# ============================================================================

@pytest.fixture
def sample_profile() -> UserProfile:
    """创建示例 UserProfile。"""
    return UserProfile(
        age="28",
        occasion="Birthday",
        hobbies="reading",
        budget="₹1000",
    )


@pytest.fixture
def book_light_item() -> dict:
    """模型返回的单条礼物（Book Light）。"""
    return {
        "giftName": "Book Light",
        "whyItFits": "Perfect for late-night reading sessions",
        "budgetCategory": "₹500-₹800",
        "alternatives": ["Bookmark"],
        "type": "Practical",
        "targetAudience": "Readers",
    }


@pytest.fixture
def sample_gift() -> GiftRecommendation:
    """创建示例 GiftRecommendation。"""
    return GiftRecommendation(
        id="Qm9vayBMaWdodDA=",
        gift_name="Book Light",
        why_it_fits="Perfect for late-night reading sessions",
        budget_category="₹500-₹800",
        type="Practical",
        target_audience="Readers",
        alternatives=["Bookmark"],
    )


@pytest.fixture
def other_gift() -> GiftRecommendation:
    """第二个示例礼物。"""
    return GiftRecommendation(
        id="SGFuZHdyaXR0ZW4x",
        gift_name="Handwritten Letter Kit",
        why_it_fits="A keepsake they will treasure",
        budget_category="₹300 - ₹600",
        type="Sentimental",
        target_audience="Anyone who loves letters",
        alternatives=["Photo Album", "Custom Calligraphy"],
    )


# ============================================================================
# Service Fixtures
# ============================================================================

@pytest.fixture
def mock_llm() -> MockLLMService:
    """创建 Mock LLM 服务。"""
    return MockLLMService()


@pytest.fixture
def mock_llm_with_gifts(mock_llm: MockLLMService) -> MockLLMService:
    """创建返回五条礼物 JSON 的 Mock LLM。"""
    names = ["Kindle Paperwhite", "Book Light", "Tea Sampler", "Reading Pillow", "Bookstore Voucher"]
    mock_llm.response = json.dumps([make_gift_item(name) for name in names], ensure_ascii=False)
    return mock_llm


@pytest.fixture
def favorites_path(tmp_path):
    """临时收藏文件路径。"""
    return tmp_path / "data" / "giftgenie_favorites.json"


@pytest.fixture
def favorites_store(favorites_path) -> FavoritesStore:
    """使用临时目录的 FavoritesStore。"""
    return FavoritesStore(favorites_path)
