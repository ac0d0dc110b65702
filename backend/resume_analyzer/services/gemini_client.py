"""
Thin async wrapper over the google-genai SDK.

The analyzer only needs `generate(model, prompt) -> str`, so any object with
that coroutine (e.g. a fake in tests) can stand in for GeminiClient.
"""
from typing import Optional, Protocol

from google import genai
from google.genai import types


class ModelClient(Protocol):
    async def generate(self, model: str, prompt: str) -> str: ...


class GeminiClient:
    """Gemini text generation client, constructed once per process."""

    def __init__(
        self,
        api_key: str,
        temperature: float = 0.1,
        max_output_tokens: int = 8192,
    ):
        self._client = genai.Client(api_key=api_key)
        self._config = types.GenerateContentConfig(
            temperature=temperature,
            max_output_tokens=max_output_tokens,
        )

    async def generate(self, model: str, prompt: str) -> str:
        response = await self._client.aio.models.generate_content(
            model=model,
            contents=prompt,
            config=self._config,
        )
        return response.text or ""


def build_gemini_client(
    api_key: Optional[str],
    temperature: float = 0.1,
    max_output_tokens: int = 8192,
) -> Optional[GeminiClient]:
    """Return a client, or None when no API key is configured."""
    if not api_key:
        return None
    return GeminiClient(
        api_key=api_key,
        temperature=temperature,
        max_output_tokens=max_output_tokens,
    )
