from __future__ import annotations

import asyncio

import pytest

from storyloop.errors import ImageFetchError, StoryFetchError
from storyloop.llm.base import ImageProvider, LLMProvider
from storyloop.models.story import StoryResponse
from storyloop.prompts.loader import PromptLoader
from storyloop.services.image import ImageService
from storyloop.services.story import StoryService


class RecordingLLM(LLMProvider):
    def __init__(self, result=None):
        super().__init__(model="fake-model")
        self.result = result
        self.prompts: list[tuple[str, str]] = []

    async def complete_structured(self, system_prompt, user_prompt, response_model, **kwargs):
        self.prompts.append((system_prompt, user_prompt))
        if isinstance(self.result, Exception):
            raise self.result
        return response_model.model_validate(self.result)


class StubImageProvider(ImageProvider):
    def __init__(self, result):
        super().__init__(model="fake-image")
        self.result = result

    async def generate_image(self, prompt):
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


FOREST = {
    "new_story_segment": "You wake in a forest.",
    "choices": ["Go north", "Go south"],
    "image_prompt": "a dark forest at dawn",
}


def test_opening_fetch_uses_opening_prompt() -> None:
    llm = RecordingLLM(FOREST)
    svc = StoryService(llm, PromptLoader())

    resp = asyncio.run(svc.fetch(None, None))

    assert isinstance(resp, StoryResponse)
    assert resp.choice_texts == ["Go north", "Go south"]
    system, user = llm.prompts[0]
    assert "new_story_segment" in system
    assert "Begin a new adventure" in user


def test_continuation_includes_story_and_choice() -> None:
    llm = RecordingLLM(FOREST)
    svc = StoryService(llm, PromptLoader())

    asyncio.run(svc.fetch("You wake in a forest.", "Go north"))

    _, user = llm.prompts[0]
    assert "You wake in a forest." in user
    assert "The player chose: Go north" in user
    assert "{previous_story}" not in user


def test_provider_failure_becomes_story_fetch_error() -> None:
    svc = StoryService(RecordingLLM(RuntimeError("quota exceeded")), PromptLoader())
    with pytest.raises(StoryFetchError, match="quota exceeded"):
        asyncio.run(svc.fetch(None, None))


def test_invalid_turn_becomes_story_fetch_error() -> None:
    svc = StoryService(RecordingLLM({"new_story_segment": "x", "choices": []}), PromptLoader())
    with pytest.raises(StoryFetchError):
        asyncio.run(svc.fetch(None, None))


def test_image_service_returns_provider_data() -> None:
    svc = ImageService(StubImageProvider("data:image/png;base64,AAAA"))
    assert asyncio.run(svc.generate("a cave")) == "data:image/png;base64,AAAA"


def test_image_failure_becomes_image_fetch_error() -> None:
    svc = ImageService(StubImageProvider(ValueError("image response contained no image data")))
    with pytest.raises(ImageFetchError, match="no image data"):
        asyncio.run(svc.generate("a cave"))


def test_prompt_loader_leaves_unknown_placeholders(tmp_path) -> None:
    (tmp_path / "story").mkdir()
    (tmp_path / "story" / "T.txt").write_text("{a} and {b}\n", encoding="utf-8")
    loader = PromptLoader(tmp_path)
    assert loader.render("story", "T", a="x") == "x and {b}"


def test_braces_in_prior_story_are_sent_verbatim() -> None:
    llm = RecordingLLM(FOREST)
    svc = StoryService(llm, PromptLoader())
    story = 'A sign reads {player_choice}. Below it: {"x": 1}.'

    asyncio.run(svc.fetch(story, "Go north"))

    _, user = llm.prompts[0]
    assert f"The story so far:\n{story}\n" in user
    assert "The player chose: Go north" in user


def test_choice_text_with_placeholder_is_not_expanded() -> None:
    loader = PromptLoader()
    out = loader.render("story", "CONTINUATION", previous_story="Dawn.", player_choice="Say {previous_story}")
    assert "The player chose: Say {previous_story}" in out
    assert out.count("Dawn.") == 1
