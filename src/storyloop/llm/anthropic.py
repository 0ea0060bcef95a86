from __future__ import annotations

import logging
from typing import TypeVar

from anthropic import AsyncAnthropic
from pydantic import BaseModel

from storyloop.llm.base import LLMProvider
from storyloop.parsing.output_parser import OutputParser

T = TypeVar("T", bound=BaseModel)
log = logging.getLogger(__name__)


class AnthropicProvider(LLMProvider):
    """Story provider backed by the Anthropic messages API."""

    DEFAULT_MODEL = "claude-haiku-4-5-20251001"

    MODELS = [
        "claude-sonnet-4-5-20250929",
        "claude-haiku-4-5-20251001",
    ]

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        temperature: float = 0.9,
    ):
        super().__init__(model=model or self.DEFAULT_MODEL, temperature=temperature)
        self._client = AsyncAnthropic(api_key=api_key)

    def _temperature(self, override: float | None) -> float:
        # the messages API caps temperature at 1.0
        return min(super()._temperature(override), 1.0)

    async def complete_structured(
        self,
        system_prompt: str,
        user_prompt: str,
        response_model: type[T],
        *,
        temperature: float | None = None,
        max_tokens: int = 1024,
    ) -> T:
        """Use a forced tool call to get the story turn as structured input."""
        log.info("Anthropic structured: model=%s, target=%s",
                 self.model, response_model.__name__)
        tool_name = "story_turn"
        try:
            response = await self._client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                temperature=self._temperature(temperature),
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
                tools=[
                    {
                        "name": tool_name,
                        "description": f"Return the result as a {response_model.__name__} object.",
                        "input_schema": response_model.model_json_schema(by_alias=True),
                    }
                ],
                tool_choice={"type": "tool", "name": tool_name},
            )
        except Exception as exc:
            log.error("Anthropic API error: %s", exc)
            raise

        for block in response.content:
            if block.type == "tool_use" and block.name == tool_name:
                return response_model.model_validate(block.input)

        log.warning("Anthropic: no tool_use block, falling back to text parse")
        raw = "\n".join(b.text for b in response.content if b.type == "text")
        return OutputParser.parse(raw, response_model)
