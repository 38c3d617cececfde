import json
import os
from typing import Any

import openai


OPENAI_TOKEN = os.environ.get("OPENAI_API_KEY")
MAX_TOKENS = 3000
TIMEOUT = 60 * 2
DEFAULT_MODEL = os.environ.get("OPENAI_MODEL", "gpt-4o-mini")
DEFAULT_IMAGE_MODEL = os.environ.get("OPENAI_IMAGE_MODEL", "dall-e-3")


def openai_client_factory(token: str | None = None) -> openai.AsyncClient:
    token = OPENAI_TOKEN if token is None else token
    return openai.AsyncClient(api_key=token, timeout=TIMEOUT)


async def json_chat(
    prompt: str,
    *,
    schema: dict[str, Any],
    schema_name: str,
    openai_client: openai.AsyncClient,
    system: str | None = None,
    model: str | None = None,
    temperature: float | None = None,
    max_tokens: int = MAX_TOKENS,
) -> Any:
    """Ask for a JSON answer following `schema` and decode it.

    Returns None when the model sends back no content.
    """
    model = DEFAULT_MODEL if model is None else model
    messages: list[dict[str, str]] = []
    if system:
        messages.append({"role": "system", "content": system})
    messages.append({"role": "user", "content": prompt})

    kwargs: dict[str, Any] = {}
    if temperature is not None:
        kwargs["temperature"] = temperature

    resp = await openai_client.chat.completions.create(
        model=model,
        messages=messages,  # pyright: ignore[reportArgumentType]
        max_tokens=max_tokens,
        response_format={
            "type": "json_schema",
            "json_schema": {"name": schema_name, "schema": schema, "strict": False},
        },
        **kwargs,
    )
    if not resp.choices:
        return None
    content = (resp.choices[0].message.content or "").strip()
    if not content:
        return None
    return json.loads(content)


async def image(
    prompt: str,
    *,
    openai_client: openai.AsyncClient,
    model: str | None = None,
    size: str = "1024x1024",
    quality: str = "standard",
) -> tuple[str, str | None] | None:
    """Base64 image data and the prompt the model actually used."""
    model = DEFAULT_IMAGE_MODEL if model is None else model
    resp = await openai_client.images.generate(
        model=model,
        prompt=prompt,
        n=1,
        size=size,  # pyright: ignore[reportArgumentType]
        quality=quality,  # pyright: ignore[reportArgumentType]
        response_format="b64_json",
    )
    if not resp.data or not resp.data[0].b64_json:
        return None
    return resp.data[0].b64_json, resp.data[0].revised_prompt
