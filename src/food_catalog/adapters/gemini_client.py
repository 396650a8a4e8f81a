"""Google Generative Language API client."""

from dataclasses import dataclass, field

import httpx

from food_catalog.services.analysis import GenerationError, GenerativeClient

GENERATION_CONFIG: dict[str, object] = {
    "temperature": 0.7,
    "topK": 40,
    "topP": 0.95,
    "maxOutputTokens": 2048,
}

SAFETY_SETTINGS: list[dict[str, str]] = [
    {"category": category, "threshold": "BLOCK_MEDIUM_AND_ABOVE"}
    for category in (
        "HARM_CATEGORY_HARASSMENT",
        "HARM_CATEGORY_HATE_SPEECH",
        "HARM_CATEGORY_SEXUALLY_EXPLICIT",
        "HARM_CATEGORY_DANGEROUS_CONTENT",
    )
]


@dataclass
class HttpxGeminiClient(GenerativeClient):
    """HTTPX-backed Gemini generateContent client."""

    api_key: str
    base_url: str
    model: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 30.0
    generation_config: dict[str, object] = field(
        default_factory=lambda: dict(GENERATION_CONFIG)
    )

    @classmethod
    def create(
        cls, api_key: str, base_url: str, model: str, timeout_seconds: float = 30.0
    ) -> "HttpxGeminiClient":
        """Create a Gemini client with a managed httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url,
            model=model,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def generate_text(self, prompt: str) -> str:
        """Send a prompt and return the first candidate's text."""
        url = f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent"
        response = await self.http_client.post(
            url,
            params={"key": self.api_key},
            json={
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": self.generation_config,
                "safetySettings": SAFETY_SETTINGS,
            },
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        try:
            payload = response.json()
        except ValueError as exc:
            raise GenerationError("Gemini returned a non-JSON body") from exc
        return _first_candidate_text(payload)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _first_candidate_text(payload: object) -> str:
    """Extract candidates[0].content.parts[0].text from a response body."""
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]  # type: ignore[index]
    except (KeyError, IndexError, TypeError) as exc:
        raise GenerationError("Gemini response has no text candidate") from exc
    if not isinstance(text, str):
        raise GenerationError("Gemini candidate text is not a string")
    return text
