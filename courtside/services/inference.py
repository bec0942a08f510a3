"""Hosted LLM inference over an OpenAI-compatible chat completions API.

Any provider exposing POST {base}/chat/completions works (OpenAI, or Cloudflare
Workers AI at https://api.cloudflare.com/client/v4/accounts/{id}/ai/v1).

Contract: messages (system + user) and a token budget in, one text string out.
Every failure surfaces as InferenceError so callers can degrade per call.
"""

import logging
from typing import Any

import httpx

from courtside.settings import get_settings

logger = logging.getLogger("uvicorn.error")


class InferenceError(RuntimeError):
    pass


def extract_message_content(data: Any) -> str:
    """Return choices[0].message.content as text ("" when absent).

    Some providers return content as a list of {"type": "text", "text": ...} parts.
    """
    if not isinstance(data, dict) or not isinstance(data.get("choices"), list):
        return ""
    for choice in data["choices"]:
        msg = choice.get("message") if isinstance(choice, dict) else None
        if not isinstance(msg, dict):
            continue
        content = msg.get("content")
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            parts = [p["text"] for p in content if isinstance(p, dict) and isinstance(p.get("text"), str)]
            return "\n".join(parts)
    return ""


async def chat_completion(
    messages: list[dict[str, str]],
    *,
    max_tokens: int | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """Run one chat completion and return the generated text.

    Args:
        messages: Chat messages, e.g. [{"role": "system", ...}, {"role": "user", ...}].
        max_tokens: Completion token budget (defaults to LLM_MAX_TOKENS).
        transport: Optional httpx transport (tests).

    Raises:
        InferenceError: Not configured, HTTP failure, or empty completion.
    """
    settings = get_settings()
    if not settings.llm_api_key:
        raise InferenceError("LLM_API_KEY is not set")

    url = settings.llm_base_url.rstrip("/") + "/chat/completions"
    headers = {"Authorization": f"Bearer {settings.llm_api_key}", "Content-Type": "application/json"}
    body = {
        "model": settings.llm_model,
        "messages": messages,
        "max_completion_tokens": max_tokens or settings.llm_max_tokens,
    }

    try:
        async with httpx.AsyncClient(timeout=settings.llm_request_timeout, transport=transport) as client:
            r = await client.post(url, headers=headers, json=body)
            r.raise_for_status()
            data = r.json()
    except httpx.HTTPStatusError as e:
        status = int(e.response.status_code) if e.response is not None else 0
        response_text = e.response.text[:500] if e.response is not None else ""
        logger.error(
            f"[inference] LLM HTTP {status} url={url} model={settings.llm_model} response={response_text}"
        )
        raise InferenceError(f"LLM responded with status {status}") from e
    except (httpx.HTTPError, ValueError) as e:
        raise InferenceError(f"LLM request failed: {e}") from e

    text_out = extract_message_content(data).strip()
    if not text_out:
        raise InferenceError("LLM returned an empty completion")
    return text_out
