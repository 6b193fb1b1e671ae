"""Thin wrapper around Google Gemini (google-generativeai SDK).

Failures surface as ``LLMError`` subclasses so callers can fall back to the
local parser/templates. A key that does not look like a Gemini key is
treated as missing and no request is made.
"""

import json
import logging
import os
import re
from typing import Any, Dict, Optional

import google.generativeai as genai

from config import Settings

logger = logging.getLogger(__name__)


class LLMError(Exception):
    """Base class for anything that should trigger the local fallback."""


class LLMUnavailableError(LLMError):
    """No usable credential, or the request itself failed."""


class LLMResponseError(LLMError):
    """The model answered, but not with something we can use."""


def get_api_key(settings: Settings) -> str:
    return os.getenv("GEMINI_API_KEY") or settings.gemini_api_key


def has_valid_api_key(api_key: Optional[str], prefix: str) -> bool:
    return bool(api_key) and api_key.startswith(prefix)


class GeminiClient:
    def __init__(self, api_key: str, model_name: str, key_prefix: str = "AIza"):
        self.api_key = api_key or ""
        self.model_name = model_name
        self.key_prefix = key_prefix

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiClient":
        return cls(get_api_key(settings), settings.gemini_model, settings.api_key_prefix)

    @property
    def available(self) -> bool:
        return has_valid_api_key(self.api_key, self.key_prefix)

    def generate(self, system: str, user: str, *, temperature: float = 0.2, max_tokens: int = 384) -> str:
        """Send one system + user exchange and return the reply text."""
        if not self.available:
            raise LLMUnavailableError("Gemini API key not available")

        try:
            genai.configure(api_key=self.api_key)
            model = genai.GenerativeModel(self.model_name, system_instruction=system)
            resp = model.generate_content(
                user,
                generation_config={
                    "temperature": temperature,
                    "top_p": 0.9,
                    "top_k": 40,
                    "max_output_tokens": max_tokens,
                },
            )
        except Exception as e:
            raise LLMUnavailableError(f"Gemini request failed: {e}") from e

        # .text raises ValueError when the candidate was blocked or is empty
        try:
            text = resp.text if resp else None
        except ValueError as e:
            raise LLMResponseError(f"Gemini returned no text: {e}") from e
        if not text or not text.strip():
            raise LLMResponseError("Gemini response empty")
        logger.debug(f"Gemini raw response: {text}")
        return text.strip()


_FENCED_JSON_RE = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL)
_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def extract_json_object(text: str) -> Dict[str, Any]:
    """Pull the JSON object out of a model reply (fenced or bare)."""
    m = _FENCED_JSON_RE.search(text)
    if m:
        raw = m.group(1)
    else:
        m = _JSON_OBJECT_RE.search(text)
        if not m:
            raise LLMResponseError("No JSON found in response")
        raw = m.group(0)
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise LLMResponseError(f"JSON parse error: {e}") from e
    if not isinstance(data, dict):
        raise LLMResponseError("Response JSON is not an object")
    return data


def strip_null_values(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop null, "" and "null" values so absent keys mean 'no constraint'."""
    return {
        k: v
        for k, v in data.items()
        if v is not None and not (isinstance(v, str) and v.strip().lower() in ("", "null"))
    }
