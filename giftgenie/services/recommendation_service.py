"""Recommendation Service - Gift suggestions from the hosted model.

This module handles:
- Building the gift curation prompt and its response schema from a profile
- Issuing a single model call (no retries)
- Normalizing the JSON reply into GiftRecommendation records

Interface Contract:
- build_request(profile) -> RecommendationRequest
- normalize_response(raw) -> list[GiftRecommendation]
- RecommendationService.fetch(profile) -> list[GiftRecommendation]
- Failures raise a RecommendationServiceError subclass:
  EmptyResponseError, MalformedResponseError or TransportFailureError
"""

from __future__ import annotations

import base64
import json
import logging

from giftgenie.models import (
    REQUIRED_GIFT_FIELDS,
    GiftRecommendation,
    RecommendationRequest,
    UserProfile,
)


logger = logging.getLogger(__name__)

RECOMMENDATION_COUNT = 5

GIFT_ID_LENGTH = 16

GIFT_RESPONSE_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "giftName": {"type": "string", "description": "Gift name"},
            "whyItFits": {"type": "string", "description": "Why it fits this person"},
            "budgetCategory": {
                "type": "string",
                "description": "Approximate budget category in INR (e.g., ₹2,000 - ₹3,000)",
            },
            "alternatives": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Alternative options",
            },
            "type": {"type": "string", "description": "Practical or sentimental"},
            "targetAudience": {"type": "string", "description": "Who would love this most"},
        },
        "required": list(REQUIRED_GIFT_FIELDS),
    },
}


class RecommendationServiceError(Exception):
    """Raised when recommendation service fails."""
    pass


class EmptyResponseError(RecommendationServiceError):
    """The model returned no text."""
    pass


class MalformedResponseError(RecommendationServiceError):
    """The model returned text that does not match the gift schema."""
    pass


class TransportFailureError(RecommendationServiceError):
    """The model call itself failed (network, auth, quota...)."""
    pass


def build_request(profile: UserProfile) -> RecommendationRequest:
    """Build the prompt and response schema for a recipient profile.

    Fields are interpolated as given; blank-field checks happen upstream.
    """
    prompt = f'''You are a world-class gift curator for the Indian market.
Study the recipient below and suggest exactly {RECOMMENDATION_COUNT} thoughtful, modern and relevant gifts.

RECIPIENT:
Age: {profile.age}
Occasion: {profile.occasion}
Hobbies/Interests: {profile.hobbies}
Budget: {profile.budget}

REQUIREMENTS:
1. Every budget category and price MUST be in Indian Rupees (INR) using the ₹ symbol
2. Prefer items available in India (local artisanal brands, Amazon.in, Tata CLiQ, etc.)
3. Avoid generic ideas unless they can be personalized
4. Each suggestion should be culturally relevant to the occasion in an Indian context

Return a JSON array of {RECOMMENDATION_COUNT} objects, each with:
- giftName: string
- whyItFits: string (why it suits this person)
- budgetCategory: string (price range in ₹)
- alternatives: array of strings
- type: string (practical or sentimental)
- targetAudience: string (who would love this most)

Return ONLY the JSON array, no additional text.'''
    return RecommendationRequest(prompt=prompt, response_schema=GIFT_RESPONSE_SCHEMA)


def derive_gift_id(gift_name: str, index: int) -> str:
    """Stable id from a gift's name and its position in the response.

    Not unique across responses: the same name at the same position always
    yields the same id.
    """
    encoded = base64.b64encode(f"{gift_name}{index}".encode("utf-8")).decode("ascii")
    return encoded[:GIFT_ID_LENGTH]


def normalize_response(raw: str | None) -> list[GiftRecommendation]:
    """Parse the model's JSON array into GiftRecommendation records.

    An empty array is a valid, empty result; empty text is not.

    Raises:
        EmptyResponseError: If ``raw`` is None, empty or whitespace
        MalformedResponseError: If ``raw`` is not a JSON array of complete gift objects
    """
    if raw is None or not raw.strip():
        raise EmptyResponseError("No response from model")

    try:
        data = json.loads(raw)
    except (ValueError, RecursionError) as e:
        raise MalformedResponseError(f"Invalid JSON response: {e}") from e

    if not isinstance(data, list):
        raise MalformedResponseError(
            f"Expected a JSON array, got {type(data).__name__}"
        )

    recommendations: list[GiftRecommendation] = []
    for idx, item in enumerate(data):
        if not isinstance(item, dict):
            raise MalformedResponseError(f"Item {idx} is not an object")
        missing = [name for name in REQUIRED_GIFT_FIELDS if name not in item]
        if missing:
            raise MalformedResponseError(
                f"Item {idx} is missing required fields: {', '.join(missing)}"
            )
        try:
            gift_id = derive_gift_id(str(item["giftName"]), idx)
            recommendations.append(GiftRecommendation.from_dict({**item, "id": gift_id}))
        except ValueError as e:
            raise MalformedResponseError(f"Item {idx}: {e}") from e

    return recommendations


class RecommendationService:
    """Service for fetching gift recommendations."""

    def __init__(self, llm_service=None):
        """Initialize with optional LLM service dependency.

        Args:
            llm_service: LLM service for generation. If None, uses default.
        """
        self._llm = llm_service

    @property
    def llm(self):
        """Lazy load LLM service."""
        if self._llm is None:
            from giftgenie.services.llm_service import LLMService
            self._llm = LLMService.get_instance()
        return self._llm

    def fetch(self, profile: UserProfile) -> list[GiftRecommendation]:
        """Fetch recommendations for a profile with a single model call.

        Args:
            profile: The recipient profile

        Returns:
            list[GiftRecommendation]: Suggestions in the model's order

        Raises:
            RecommendationServiceError: If the call fails or the reply is unusable
        """
        request = build_request(profile)

        try:
            raw = self.llm.call(
                request.prompt,
                json_mode=True,
                response_schema=request.response_schema,
            )
        except Exception as e:
            raise TransportFailureError(f"Recommendation request failed: {e}") from e

        recommendations = normalize_response(raw)
        logger.info(
            "[recommend] occasion=%s results=%d", profile.occasion, len(recommendations)
        )
        return recommendations
