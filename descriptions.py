"""
Marketing descriptions for new products.

Providers expose `async describe(name, price, weight) -> str` and never
raise: whatever goes wrong, a fixed fallback text comes back instead.
"""
import logging

from config import GEMINI_API_KEY, GEMINI_MODEL

logger = logging.getLogger(__name__)

FALLBACK_DESCRIPTION = "Expertly crafted for your daily needs."
EMPTY_REPLY_DESCRIPTION = "Quality product from Texpress."


def build_prompt(name: str, price: float, weight: float) -> str:
    return (
        f'Write a compelling, short marketing description for a product named "{name}" '
        f"that costs ${price} and weighs {weight}kg. Keep it under 150 characters."
    )


class StaticDescriptionProvider:
    def __init__(self, text: str = FALLBACK_DESCRIPTION):
        self.text = text

    async def describe(self, name: str, price: float, weight: float) -> str:
        return self.text


class GeminiDescriptionProvider:
    def __init__(self, api_key: str = GEMINI_API_KEY, model: str = GEMINI_MODEL, client=None):
        self.model = model
        self._api_key = api_key
        self._client = client

    @property
    def client(self):
        if self._client is None:
            from google import genai
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    async def describe(self, name: str, price: float, weight: float) -> str:
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=build_prompt(name, price, weight),
            )
            text = (response.text or "").strip()
            return text or EMPTY_REPLY_DESCRIPTION
        except Exception as e:
            logger.error("Description generation failed for %r: %s", name, e)
            return FALLBACK_DESCRIPTION


def default_provider():
    if GEMINI_API_KEY:
        return GeminiDescriptionProvider()
    logger.info("No Gemini API key configured, using static descriptions")
    return StaticDescriptionProvider()
