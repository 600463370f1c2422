import base64
import time
from loguru import logger
from google import genai
from google.genai import types
from .invoice_types import ExtractedContent
from ..core.config import settings
from ..core.errors import AIServiceError


def create_gemini_client() -> genai.Client:
    if not settings.gemini_api_key:
        raise AIServiceError("Gemini is not configured. Set GEMINI_API_KEY to enable invoice extraction.")
    return genai.Client(api_key=settings.gemini_api_key)


def build_generation_config() -> types.GenerateContentConfig:
    # Low temperature keeps the extraction close to deterministic
    return types.GenerateContentConfig(
        temperature=settings.gemini_temperature,
        top_p=settings.gemini_top_p,
        top_k=settings.gemini_top_k,
        max_output_tokens=settings.gemini_max_output_tokens,
    )


def build_contents(prompt: str, content: ExtractedContent) -> list:
    if content.kind == "text":
        return [prompt, content.text or ""]
    return [
        prompt,
        types.Part.from_bytes(data=base64.b64decode(content.data or ""), mime_type=content.mime_type),
    ]


def generate_invoice_json(prompt: str, content: ExtractedContent, client: genai.Client | None = None) -> str:
    """
    Send the prompt and invoice content to Gemini and return the raw reply text.

    A single attempt is made; failures are not retried.

    Raises:
        AIServiceError: missing API key, SDK/network failure, or empty reply
    """
    client = client or create_gemini_client()
    contents = build_contents(prompt, content)

    logger.info(
        "Calling Gemini for invoice extraction",
        model=settings.gemini_model,
        content_kind=content.kind,
        content_size=content.size,
    )
    started = time.perf_counter()
    try:
        response = client.models.generate_content(
            model=settings.gemini_model,
            contents=contents,
            config=build_generation_config(),
        )
    except Exception as e:
        logger.error(f"Gemini request failed: {str(e)}")
        raise AIServiceError(f"AI service request failed: {str(e)}") from e

    text = response.text
    logger.info(
        "Gemini response received",
        elapsed_ms=round((time.perf_counter() - started) * 1000),
        response_chars=len(text or ""),
    )
    if not text or not text.strip():
        raise AIServiceError("AI service returned an empty response")
    return text
