from __future__ import annotations

import json
import logging
from typing import TypeVar

from openai import AsyncOpenAI
from pydantic import BaseModel

from storyloop.llm.base import ImageProvider, LLMProvider
from storyloop.parsing.output_parser import OutputParser

T = TypeVar("T", bound=BaseModel)
log = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """Story provider backed by the OpenAI chat completions API."""

    DEFAULT_MODEL = "gpt-4.1-mini"

    MODELS = [
        "gpt-4.1",
        "gpt-4.1-mini",
    ]

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        temperature: float = 0.9,
    ):
        super().__init__(model=model or self.DEFAULT_MODEL, temperature=temperature)
        self._client = AsyncOpenAI(api_key=api_key)

    async def _chat_json(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float | None,
        max_tokens: int,
    ) -> str:
        log.info("OpenAI chat: model=%s, prompt_len=%d", self.model, len(user_prompt))
        kwargs: dict = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self._temperature(temperature),
            "max_completion_tokens": max_tokens,
            "response_format": {"type": "json_object"},
        }
        try:
            response = await self._client.chat.completions.create(**kwargs)
        except Exception as exc:
            log.error("OpenAI API error: %s", exc)
            raise
        result = response.choices[0].message.content or ""
        log.info("OpenAI response: %d chars", len(result))
        return result

    async def complete_structured(
        self,
        system_prompt: str,
        user_prompt: str,
        response_model: type[T],
        *,
        temperature: float | None = None,
        max_tokens: int = 1024,
    ) -> T:
        log.info("OpenAI structured: model=%s, target=%s",
                 self.model, response_model.__name__)
        schema = response_model.model_json_schema(by_alias=True)
        augmented_system = (
            f"{system_prompt}\n\n"
            f"Respond with a single JSON object matching this schema:\n"
            f"```json\n{json.dumps(schema, indent=2)}\n```"
        )
        raw = await self._chat_json(augmented_system, user_prompt, temperature, max_tokens)
        try:
            return OutputParser.parse(raw, response_model)
        except ValueError as exc:
            log.error("OpenAI structured parse failed: %s", exc)
            raise


class OpenAIImageProvider(ImageProvider):
    """Illustration provider backed by the OpenAI images API."""

    DEFAULT_MODEL = "gpt-image-1"

    MODELS = [
        "gpt-image-1",
        "dall-e-3",
    ]

    def __init__(self, api_key: str, model: str | None = None, size: str = "1024x1024"):
        super().__init__(model=model or self.DEFAULT_MODEL, size=size)
        self._client = AsyncOpenAI(api_key=api_key)

    async def generate_image(self, prompt: str) -> str:
        log.info("OpenAI image: model=%s, size=%s, prompt_len=%d",
                 self.model, self.size, len(prompt))
        kwargs: dict = {"model": self.model, "prompt": prompt, "size": self.size, "n": 1}
        # gpt-image-1 always answers with base64; dall-e needs asking
        if self.model.startswith("dall-e"):
            kwargs["response_format"] = "b64_json"
        try:
            response = await self._client.images.generate(**kwargs)
        except Exception as exc:
            log.error("OpenAI image API error: %s", exc)
            raise
        if not response.data or not response.data[0].b64_json:
            raise ValueError("image response contained no image data")
        b64 = response.data[0].b64_json
        log.info("OpenAI image: %d base64 chars", len(b64))
        return f"data:image/png;base64,{b64}"
