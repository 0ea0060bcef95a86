from __future__ import annotations

import logging

from storyloop.errors import StoryFetchError
from storyloop.llm.base import LLMProvider
from storyloop.models.story import StoryResponse
from storyloop.prompts.loader import PromptLoader

log = logging.getLogger(__name__)


class StoryService:
    """Ask the story provider for the next segment of the adventure.

    ``fetch(None, None)`` opens a new adventure; ``fetch(story, choice)``
    continues *story* with the player's *choice*.  Every failure (network,
    quota, unparseable output) comes back as :class:`StoryFetchError`
    carrying the provider's message.
    """

    def __init__(
        self,
        llm: LLMProvider,
        prompts: PromptLoader | None = None,
        max_tokens: int = 1024,
    ):
        self._llm = llm
        self._prompts = prompts or PromptLoader()
        self._max_tokens = max_tokens

    def _user_prompt(self, prior_story: str | None, chosen_option: str | None) -> str:
        if prior_story is None and chosen_option is None:
            return self._prompts.render("story", "OPENING")
        return self._prompts.render(
            "story",
            "CONTINUATION",
            previous_story=prior_story or "(the adventure has not begun)",
            player_choice=chosen_option or "(no choice)",
        )

    async def fetch(
        self,
        prior_story: str | None = None,
        chosen_option: str | None = None,
    ) -> StoryResponse:
        system_prompt = self._prompts.render("story", "NARRATOR_SYSTEM")
        user_prompt = self._user_prompt(prior_story, chosen_option)
        try:
            turn = await self._llm.complete_structured(
                system_prompt=system_prompt,
                user_prompt=user_prompt,
                response_model=StoryResponse,
                max_tokens=self._max_tokens,
            )
        except Exception as exc:
            raise StoryFetchError(str(exc)) from exc
        log.info("Story turn: %d chars, %d choices, image_prompt=%s",
                 len(turn.story_segment), len(turn.choice_texts), bool(turn.image_prompt))
        return turn
