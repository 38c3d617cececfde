import logging
from typing import Any

import openai

from domain.aopenai import (
    DEFAULT_IMAGE_MODEL,
    DEFAULT_MODEL,
    MAX_TOKENS,
    image,
    json_chat,
    openai_client_factory,
)
from domain.pipeline import GenerationRequest
from domain.shapes import ExpectedShape


logger = logging.getLogger(__name__)


class OpenAIGenerationClient:
    """Generation calls backed by the OpenAI API.

    Holds no per-run state, so one instance can serve concurrent pipelines.
    """

    def __init__(
        self,
        openai_client: openai.AsyncClient | None = None,
        *,
        token: str | None = None,
        model: str = DEFAULT_MODEL,
        image_model: str = DEFAULT_IMAGE_MODEL,
        temperature: float = 0.8,
        max_tokens: int = MAX_TOKENS,
    ) -> None:
        self._openai_client = openai_client
        self.token = token
        self.model = model
        self.image_model = image_model
        self.temperature = temperature
        self.max_tokens = max_tokens

    @property
    def openai_client(self) -> openai.AsyncClient:
        # Built on first use so the app imports without a key.
        if self._openai_client is None:
            self._openai_client = openai_client_factory(self.token)
        return self._openai_client

    async def generate(self, request: GenerationRequest, shape: ExpectedShape) -> Any:
        if request.output == "image":
            return await self._image(request)
        logger.debug("Chat completion for %s with %s", shape.name, self.model)
        return await json_chat(
            request.prompt,
            schema=shape.json_schema(),
            schema_name=shape.name,
            openai_client=self.openai_client,
            system=request.system,
            model=request.params.get("model", self.model),
            temperature=request.params.get("temperature", self.temperature),
            max_tokens=self.max_tokens,
        )

    async def _image(self, request: GenerationRequest) -> dict[str, Any] | None:
        logger.debug("Image generation with %s", self.image_model)
        result = await image(
            request.prompt,
            openai_client=self.openai_client,
            model=request.params.get("model", self.image_model),
            size=request.params.get("size", "1024x1024"),
            quality=request.params.get("quality", "standard"),
        )
        if result is None:
            return None
        b64, revised = result
        return {"imageBase64": b64, "mimeType": "image/png", "revisedPrompt": revised}

    async def close(self) -> None:
        if self._openai_client is not None:
            await self._openai_client.close()
