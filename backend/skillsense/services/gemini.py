"""
Gemini client shared by every AI feature.

All prompts ask for JSON. Responses are cleaned of markdown fences and parsed
here so callers only ever see Python objects or a GeminiError.
"""
import json
import logging
from typing import Any, Optional

from google import genai

from ..config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

# Lazy initialization of Gemini client
_genai_client = None


class GeminiError(Exception):
    """Gemini is unavailable or the request failed."""


class GeminiResponseError(GeminiError):
    """Gemini answered, but not with usable JSON."""


def get_genai_client():
    """Get the Gemini client, initializing lazily if needed."""
    global _genai_client
    if _genai_client is None:
        if not settings.gemini_api_key:
            logger.warning("GEMINI_API_KEY not set - AI extraction disabled")
            return None
        _genai_client = genai.Client(api_key=settings.gemini_api_key)
    return _genai_client


def _strip_code_fences(text: str) -> str:
    text = text.strip()
    if text.lower().startswith("```json"):
        text = text[7:]
    if text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def parse_json_response(response_text: str) -> Any:
    """
    Parse a model response into JSON.

    Tries the fence-stripped text first, then the outermost {...} block
    for answers wrapped in prose.

    Raises:
        GeminiResponseError if nothing parses
    """
    if not response_text or not response_text.strip():
        raise GeminiResponseError("No response from Gemini")

    cleaned = _strip_code_fences(response_text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass

    start = response_text.find("{")
    end = response_text.rfind("}")
    if start != -1 and end > start:
        try:
            return json.loads(_strip_code_fences(response_text[start:end + 1]))
        except json.JSONDecodeError as e:
            raise GeminiResponseError(f"Invalid JSON from Gemini: {e}") from e

    raise GeminiResponseError("Gemini response did not contain JSON")


async def generate_json(
    prompt: str,
    temperature: float = 0.7,
    max_output_tokens: Optional[int] = None,
) -> Any:
    """
    Send a single prompt to Gemini and return the parsed JSON answer.

    Args:
        prompt: Full prompt text (instructions + input)
        temperature: Sampling temperature
        max_output_tokens: Optional output cap

    Returns:
        Parsed JSON (usually a dict)

    Raises:
        GeminiError: client not configured or the API call failed
        GeminiResponseError: the answer was empty or not JSON
    """
    client = get_genai_client()
    if not client:
        raise GeminiError("Gemini API not configured. Please set GEMINI_API_KEY.")

    try:
        response = await client.aio.models.generate_content(
            model=settings.gemini_model,
            contents=prompt,
            config=genai.types.GenerateContentConfig(
                temperature=temperature,
                max_output_tokens=max_output_tokens,
                response_mime_type="application/json",
            ),
        )
    except Exception as e:
        logger.error(f"Gemini request failed: {e}")
        raise GeminiError(f"Gemini API error: {e}") from e

    response_text = response.text or ""
    logger.debug(f"Gemini response received: {response_text[:300]}")
    return parse_json_response(response_text)
