"""
LLM Client
Single-shot call to an OpenAI-compatible Chat Completions endpoint
"""
import logging
from typing import Optional

import httpx

from quizgen.core.config import settings

logger = logging.getLogger(__name__)

# Fixed sampling parameters, not configurable
MAX_TOKENS = 1000
TEMPERATURE = 0.7


class LLMClientError(Exception):
    """Base exception for LLM client errors"""
    pass


class NetworkError(LLMClientError):
    """Raised when the request to the completion endpoint cannot complete"""
    pass


class MalformedResponseError(LLMClientError):
    """Raised when the response body lacks choices[0].message.content"""
    pass


def build_payload(prompt: str) -> dict:
    """Request body: one user message plus the fixed sampling parameters"""
    return {
        "model": settings.completion_model,
        "messages": [
            {"role": "user", "content": prompt}
        ],
        "max_tokens": MAX_TOKENS,
        "temperature": TEMPERATURE
    }


def extract_content(data) -> str:
    """
    Read choices[0].message.content from a decoded response body

    Raises:
        MalformedResponseError: If any part of the path is missing
    """
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise MalformedResponseError(f"Response has no completion content: {e!r}")

    if not isinstance(content, str):
        raise MalformedResponseError(
            f"Completion content must be a string, got {type(content).__name__}"
        )
    return content


async def request_completion(
    prompt: str,
    api_key: str,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> str:
    """
    Send a prompt to the completion endpoint and return the raw text

    No retry is attempted; the only timeout is the transport timeout
    from settings.

    Args:
        prompt: The quiz generation prompt
        api_key: Bearer credential supplied by the user
        transport: Optional httpx transport (e.g. httpx.MockTransport)

    Returns:
        Raw string output from the LLM (no parsing)

    Raises:
        NetworkError: If the HTTP call fails at the transport level
        MalformedResponseError: If the body is not JSON or lacks content
    """
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json"
    }
    payload = build_payload(prompt)

    logger.info(
        f"🤖 Requesting completion from {settings.completion_api_url} "
        f"(model: {settings.completion_model})"
    )

    try:
        async with httpx.AsyncClient(
            timeout=settings.completion_timeout,
            transport=transport
        ) as client:
            response = await client.post(
                settings.completion_api_url,
                headers=headers,
                json=payload
            )
    except httpx.TransportError as e:
        logger.error(f"❌ Completion request failed: {e!r}")
        raise NetworkError(f"Completion request failed: {e}")

    if response.is_error:
        logger.warning(f"⚠️ Completion API returned status {response.status_code}")

    try:
        data = response.json()
    except ValueError as e:
        logger.error(f"❌ Completion API returned a non-JSON body ({response.status_code})")
        raise MalformedResponseError(f"Response body is not JSON: {e}")

    content = extract_content(data)
    logger.info(f"✅ Completion received ({len(content)} chars)")
    return content
