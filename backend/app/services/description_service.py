from typing import List, Optional

from openai import AsyncOpenAI, OpenAIError

from app.exceptions import ServiceUnavailableError, UpstreamServiceError
from app.utils.logging import get_logger

logger = get_logger("rentals.description_service")


def build_prompt(
    *,
    title: str,
    property_type: str,
    city: str,
    locality: Optional[str],
    amenities: List[str],
    furnishing_status: Optional[str],
    price: Optional[float],
) -> str:
    location = ", ".join(part for part in (city, locality) if part)
    return (
        "Write a compelling and believable description of this property in the language "
        "and accent of Mandsaur (mix of Hindi/Malwi).\n\n"
        "Details:\n"
        f"- Title: {title}\n"
        f"- Type: {property_type}\n"
        f"- Location: {location}\n"
        f"- Amenities: {', '.join(amenities) if amenities else 'Standard amenities'}\n"
        f"- Furnishing: {furnishing_status or 'Not specified'}\n"
        f"- Rent: ₹{price if price is not None else 'On request'}\n\n"
        "Keep it short, engaging, and localized. Avoid emojis overuse. Max 100 words."
    )


class DescriptionGenerator:
    """
    Drafts listing descriptions with an LLM for owners filling in the post form.
    """

    def __init__(self, api_key: str, model: str = "gpt-4o-mini", timeout: float = 20.0):
        self.model = model
        self.client = AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=1) if api_key else None

    @property
    def configured(self) -> bool:
        return self.client is not None

    async def generate(self, prompt: str) -> str:
        if self.client is None:
            raise ServiceUnavailableError("AI configuration missing (API key)")

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": "You write short rental listing descriptions."},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.7,
                max_tokens=300,
            )
        except OpenAIError as exc:
            logger.error("description_generation_failed", error=str(exc))
            raise UpstreamServiceError("AI request failed") from exc

        text = (response.choices[0].message.content or "").strip() if response.choices else ""
        if not text:
            logger.warning("description_generation_empty", model=self.model)
            raise UpstreamServiceError("No text generated")
        return text
