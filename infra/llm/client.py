import asyncio
import json
import logging
import re
from typing import AsyncIterator, Dict, List, Optional

import httpx

from app.settings import settings
from domain.errors import GatewayError, GatewayPaymentRequired, GatewayRateLimited

logger = logging.getLogger(__name__)

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def _headers() -> Dict[str, str]:
    if not settings.AI_GATEWAY_API_KEY:
        raise GatewayError("AI_GATEWAY_API_KEY is not configured")
    return {
        "Authorization": f"Bearer {settings.AI_GATEWAY_API_KEY}",
        "Content-Type": "application/json",
        "X-Title": settings.APP_NAME,
    }


def _raise_for_gateway_status(status: int, body: str) -> None:
    if status == 429:
        raise GatewayRateLimited()
    if status == 402:
        raise GatewayPaymentRequired()
    logger.error("AI gateway error %s: %s", status, body[:500])
    raise GatewayError(f"AI gateway error: {status}")


async def _post_with_retries(
    url: str,
    headers: Dict[str, str],
    payload: Dict,
    *,
    timeout: float = 60,
    max_attempts: int = 3,
) -> Dict:
    # 429 and 402 are surfaced to the caller instead of being retried here.
    backoff = 1.0
    for attempt in range(1, max_attempts + 1):
        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await client.post(url, headers=headers, json=payload)
            if response.status_code in (402, 429):
                _raise_for_gateway_status(response.status_code, response.text)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            retriable = status >= 500 or status == 408
            if not retriable or attempt == max_attempts:
                _raise_for_gateway_status(status, exc.response.text)
        except httpx.RequestError as exc:
            if attempt == max_attempts:
                raise GatewayError(f"AI gateway unreachable: {exc}") from exc
        logger.warning("AI gateway attempt %d failed, retrying in %.1fs", attempt, backoff)
        await asyncio.sleep(backoff)
        backoff *= 2
    raise RuntimeError("Unexpected retry exhaustion")


async def chat_completion(
    messages: List[Dict],
    *,
    model: Optional[str] = None,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
    tools: Optional[List[Dict]] = None,
    tool_choice: Optional[Dict] = None,
) -> Dict:
    payload: Dict = {"model": model or settings.AI_MODEL, "messages": messages}
    if temperature is not None:
        payload["temperature"] = temperature
    if max_tokens is not None:
        payload["max_tokens"] = max_tokens
    if tools:
        payload["tools"] = tools
    if tool_choice:
        payload["tool_choice"] = tool_choice
    return await _post_with_retries(
        settings.AI_GATEWAY_URL, _headers(), payload, timeout=settings.AI_TIMEOUT_SECONDS)


def _first_message(data: Dict) -> Dict:
    try:
        return data["choices"][0]["message"]
    except (KeyError, IndexError, TypeError) as exc:
        raise GatewayError("Invalid AI response format") from exc


async def complete_text(system: str, user, **opts) -> str:
    """Single system+user exchange; `user` may be a string or multimodal parts."""
    messages = [
        {"role": "system", "content": system},
        {"role": "user", "content": user},
    ]
    data = await chat_completion(messages, **opts)
    return _first_message(data).get("content") or ""


async def call_tool(system: str, user: str, tool: Dict, **opts) -> Dict:
    name = tool["function"]["name"]
    messages = [
        {"role": "system", "content": system},
        {"role": "user", "content": user},
    ]
    data = await chat_completion(
        messages,
        tools=[tool],
        tool_choice={"type": "function", "function": {"name": name}},
        **opts,
    )
    calls = _first_message(data).get("tool_calls") or []
    if not calls or calls[0].get("function", {}).get("name") != name:
        raise GatewayError("Invalid AI response format")
    try:
        return json.loads(calls[0]["function"]["arguments"])
    except (KeyError, TypeError, json.JSONDecodeError) as exc:
        raise GatewayError("Invalid AI response format") from exc


async def open_chat_stream(messages: List[Dict], model: Optional[str] = None) -> AsyncIterator[bytes]:
    """Start a streaming completion and return an iterator over the raw SSE bytes.

    Gateway errors are raised here, before the first byte is handed out, so the
    caller can still answer with a JSON error instead of an event stream.
    """
    client = httpx.AsyncClient(timeout=httpx.Timeout(settings.AI_TIMEOUT_SECONDS, read=None))
    payload = {"model": model or settings.AI_MODEL, "messages": messages, "stream": True}
    try:
        request = client.build_request("POST", settings.AI_GATEWAY_URL,
                                       headers=_headers(), json=payload)
        response = await client.send(request, stream=True)
    except httpx.RequestError as exc:
        await client.aclose()
        raise GatewayError(f"AI gateway unreachable: {exc}") from exc
    except GatewayError:
        await client.aclose()
        raise

    if response.status_code != 200:
        body = (await response.aread()).decode("utf-8", "replace")
        await response.aclose()
        await client.aclose()
        _raise_for_gateway_status(response.status_code, body)

    async def relay() -> AsyncIterator[bytes]:
        try:
            async for chunk in response.aiter_bytes():
                yield chunk
        finally:
            await response.aclose()
            await client.aclose()

    return relay()


def extract_json_object(text: str) -> Dict:
    """Parse the JSON object in a model answer, tolerating markdown fences around it."""
    match = _JSON_OBJECT.search(text or "")
    candidate = match.group(0) if match else (text or "")
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise ValueError("LLM response was not valid JSON") from exc
    if not isinstance(parsed, dict):
        raise ValueError("LLM response was not a JSON object")
    return parsed
