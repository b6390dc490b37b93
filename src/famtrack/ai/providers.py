"""LLM providers behind a single "generate JSON from prompt" call."""

import asyncio
import json
import re
from abc import ABC, abstractmethod
from typing import Any, Optional

import openai
import structlog
from google import genai
from google.genai import types as genai_types

from famtrack.domain.errors import ProviderError

logger = structlog.get_logger(__name__)

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def parse_json_reply(text: Optional[str], provider: str) -> dict[str, Any]:
    """Pull the outermost JSON object out of a model reply.

    Models sometimes wrap the object in markdown fences or prose, so the
    first ``{`` through the last ``}`` is parsed.

    Raises:
        ProviderError: If the reply holds no parseable JSON object
    """
    if not text:
        raise ProviderError(f"{provider} returned an empty reply")
    match = _JSON_OBJECT.search(text)
    if not match:
        raise ProviderError(f"{provider} did not return JSON")
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise ProviderError(f"{provider} returned invalid JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise ProviderError(f"{provider} returned {type(parsed).__name__}, expected an object")
    return parsed


class LLMProvider(ABC):
    """A text-completion service that answers a prompt with a JSON object."""

    name = "provider"

    @abstractmethod
    async def generate_json(self, prompt: str) -> dict[str, Any]:
        """Send the prompt and return the reply's JSON object.

        Raises:
            ProviderError: If the call fails or the reply is unusable
        """
        pass


class GeminiProvider(LLMProvider):
    """Google Gemini through the google-genai client."""

    name = "gemini"

    def __init__(self, api_key: str, model: str = "gemini-2.5-flash", timeout: float = 120):
        self.model = model
        self.client = genai.Client(
            api_key=api_key,
            http_options=genai_types.HttpOptions(timeout=int(timeout * 1000)),
        )

    async def generate_json(self, prompt: str) -> dict[str, Any]:
        try:
            # The client is synchronous; keep the event loop free
            response = await asyncio.to_thread(
                self.client.models.generate_content,
                model=self.model,
                contents=prompt,
                config=genai_types.GenerateContentConfig(
                    temperature=0,
                    response_mime_type="application/json",
                ),
            )
        except Exception as e:
            raise ProviderError(f"gemini request failed: {e}") from e
        return parse_json_reply(response.text, self.name)


class OpenAIProvider(LLMProvider):
    """OpenAI chat completions in JSON mode."""

    name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: Optional[str] = None,
        timeout: float = 120,
    ):
        self.model = model
        self.client = openai.OpenAI(api_key=api_key, base_url=base_url, timeout=timeout)

    async def generate_json(self, prompt: str) -> dict[str, Any]:
        try:
            response = await asyncio.to_thread(
                self.client.chat.completions.create,
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0,
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as e:
            raise ProviderError(f"openai request failed: {e}") from e
        if not response.choices:
            raise ProviderError("openai returned no choices")
        return parse_json_reply(response.choices[0].message.content, self.name)
