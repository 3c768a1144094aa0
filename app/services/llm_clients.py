"""
Thin chat-completion clients for the hosted LLM providers.

Both clients expose the same `complete()` call so extraction strategies and
interview collaborators don't care which backend answers. Every call has an
explicit timeout and no automatic retries; any network, HTTP or envelope
problem surfaces as UpstreamProviderError.
"""

import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import httpx
import openai
from openai import OpenAI
from pydantic import BaseModel, ValidationError as PydanticValidationError
from app.core.config import Settings
from app.core.exceptions import UpstreamProviderError

logger = logging.getLogger(__name__)

_JSON_BLOCK_RE = re.compile(r"\{[\s\S]*\}")


def parse_json_block(text: Optional[str]) -> Dict[str, Any]:
    """
    Parse the JSON object embedded in a model reply.

    Tolerates prose or markdown fences around the object.

    Raises:
        UpstreamProviderError: If no JSON object can be decoded
    """
    if not text:
        raise UpstreamProviderError("Empty response from AI provider")

    match = _JSON_BLOCK_RE.search(text)
    if not match:
        raise UpstreamProviderError("No JSON found in AI response")

    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise UpstreamProviderError(f"Invalid JSON in AI response: {e}")

    if not isinstance(data, dict):
        raise UpstreamProviderError("AI response JSON is not an object")
    return data


class ChatClient(ABC):
    """Common interface for hosted LLM backends."""

    provider_name: str = "unknown"

    @abstractmethod
    def complete(self, system_prompt: str, user_prompt: str, json_mode: bool = False) -> str:
        """
        Send one system+user exchange and return the reply text.

        Raises:
            UpstreamProviderError: On any transport, HTTP or envelope failure
        """
        pass


class OpenAIChatClient(ChatClient):
    """OpenAI chat completions through the official SDK."""

    provider_name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str,
        temperature: float = 0.2,
        timeout: float = 20.0,
        max_tokens: Optional[int] = None,
    ):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.client = OpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    def complete(self, system_prompt: str, user_prompt: str, json_mode: bool = False) -> str:
        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self.temperature,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        if self.max_tokens:
            kwargs["max_tokens"] = self.max_tokens

        try:
            response = self.client.chat.completions.create(**kwargs)
        except openai.APIStatusError as e:
            raise UpstreamProviderError(f"OpenAI API error: {e.status_code}")
        except openai.APIError as e:
            raise UpstreamProviderError(f"OpenAI request failed: {e}")

        if not response.choices or not response.choices[0].message.content:
            raise UpstreamProviderError("No response text from OpenAI")
        return response.choices[0].message.content


class _GeminiPart(BaseModel):
    text: Optional[str] = None


class _GeminiContent(BaseModel):
    parts: List[_GeminiPart] = []


class _GeminiCandidate(BaseModel):
    content: Optional[_GeminiContent] = None


class GeminiResponseEnvelope(BaseModel):
    """The subset of a generateContent reply we rely on."""
    candidates: List[_GeminiCandidate] = []

    def first_text(self) -> Optional[str]:
        for candidate in self.candidates:
            if candidate.content:
                for part in candidate.content.parts:
                    if part.text:
                        return part.text
        return None


class GeminiChatClient(ChatClient):
    """Google Gemini generateContent over REST."""

    provider_name = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str,
        api_base: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 20.0,
        http_client: Optional[httpx.Client] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.http_client = http_client

    @property
    def url(self) -> str:
        return f"{self.api_base}/models/{self.model}:generateContent"

    def complete(self, system_prompt: str, user_prompt: str, json_mode: bool = False) -> str:
        payload: Dict[str, Any] = {
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            "contents": [{"role": "user", "parts": [{"text": user_prompt}]}],
        }
        if json_mode:
            payload["generationConfig"] = {"responseMimeType": "application/json"}

        try:
            if self.http_client is not None:
                response = self.http_client.post(self.url, params={"key": self.api_key}, json=payload, timeout=self.timeout)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.post(self.url, params={"key": self.api_key}, json=payload)
            response.raise_for_status()
            envelope = GeminiResponseEnvelope.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            raise UpstreamProviderError(f"Gemini API error: {e.response.status_code}")
        except httpx.HTTPError as e:
            raise UpstreamProviderError(f"Gemini request failed: {e}")
        except (ValueError, PydanticValidationError) as e:
            raise UpstreamProviderError(f"Unexpected Gemini response: {e}")

        text = envelope.first_text()
        if not text:
            raise UpstreamProviderError("No response text from Gemini")
        return text


def build_chat_client(provider: str, settings: Settings, extraction: bool = False) -> Optional[ChatClient]:
    """
    Build the client for `provider` from explicit settings.

    Returns None when the provider has no API key configured.
    """
    if provider == "openai":
        if not settings.OPENAI_API_KEY:
            return None
        return OpenAIChatClient(
            api_key=settings.OPENAI_API_KEY,
            model=settings.OPENAI_EXTRACTION_MODEL if extraction else settings.OPENAI_MODEL,
            temperature=0.1 if extraction else settings.OPENAI_TEMPERATURE,
            timeout=settings.AI_REQUEST_TIMEOUT_SECONDS,
            max_tokens=500 if extraction else None,
        )
    if provider == "gemini":
        if not settings.GEMINI_API_KEY:
            return None
        return GeminiChatClient(
            api_key=settings.GEMINI_API_KEY,
            model=settings.GEMINI_MODEL,
            api_base=settings.GEMINI_API_BASE,
            timeout=settings.AI_REQUEST_TIMEOUT_SECONDS,
        )
    raise ValueError(f"Unknown AI provider: {provider}")
