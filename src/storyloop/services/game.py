from __future__ import annotations

import logging
from typing import Literal, Optional

from pydantic import BaseModel, model_validator

from storyloop.errors import ServiceError
from storyloop.models.session import Choice, SessionState, SessionView
from storyloop.services.image import ImageService
from storyloop.services.story import StoryService

log = logging.getLogger(__name__)

CRITICAL_MESSAGE = (
    "Critical: the API key for the story service is not set or is empty. "
    "Configure it to use this application."
)
START_FAILED = "Failed to start the adventure"
PLAY_FAILED = "Something went wrong"
UNKNOWN_ERROR = "An unknown error occurred."


class GameEvent(BaseModel):
    """A request from the presentation layer."""

    type: Literal["start", "choose", "restart"]
    text: Optional[str] = None

    @model_validator(mode="after")
    def _choose_needs_text(self) -> "GameEvent":
        if self.type == "choose" and not (self.text and self.text.strip()):
            raise ValueError("a 'choose' event needs the text of the chosen option")
        return self


class GameController:
    """Sole writer of the session state.

    Each ``start`` / ``choose`` / ``restart`` runs one *cycle*: story fetch,
    then (only when the story asked for one) an image fetch, then release of
    both loading flags.  Cycles are numbered; when a newer cycle has begun
    before an older one's calls come back, the older results are dropped so
    only the most recently started cycle ever reaches the state.

    A controller built with ``service_available=False`` is degraded for its
    whole lifetime: it carries a fixed critical error and never calls out.
    """

    def __init__(
        self,
        story: StoryService | None,
        images: ImageService | None = None,
        *,
        service_available: bool = True,
    ):
        self._story = story
        self._images = images
        self._generation = 0
        self._state = SessionState(service_available=service_available and story is not None)
        if not self._state.service_available:
            log.error("Story service is not configured; session is degraded")
            self._state.error = CRITICAL_MESSAGE
            self._state.story_loading = False
            self._state.image_loading = False
            self._state.phase = "degraded"

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def degraded(self) -> bool:
        return not self._state.service_available

    def view(self) -> SessionView:
        return SessionView.of(self._state)

    async def dispatch(self, event: GameEvent) -> SessionView:
        if event.type == "choose":
            return await self.choose(event.text or "")
        if event.type == "restart":
            return await self.restart()
        return await self.start()

    async def start(self) -> SessionView:
        """Open a new adventure over whatever is currently shown."""
        await self._cycle(None, None, START_FAILED)
        return self.view()

    async def choose(self, option_text: str) -> SessionView:
        """Continue the story with *option_text* as the player's action.

        Membership in the offered choices is not checked; the story service
        decides what a valid continuation is.
        """
        await self._cycle(self._state.story_text, option_text, PLAY_FAILED)
        return self.view()

    async def restart(self) -> SessionView:
        if self.degraded:
            log.warning("Restart ignored: session is degraded")
            return self.view()
        state = self._state
        state.story_text = ""
        state.image_data = None
        state.image_prompt = None
        state.choices = []
        return await self.start()

    async def _cycle(
        self,
        prior_story: str | None,
        chosen_option: str | None,
        failure_prefix: str,
    ) -> None:
        if self.degraded:
            log.warning("Fetch refused: session is degraded")
            return

        self._generation += 1
        generation = self._generation
        state = self._state
        state.error = None
        state.story_loading = True
        state.image_loading = True
        state.image_data = None
        state.phase = "loading"
        log.info("Cycle %d started (choice=%r)", generation, chosen_option)

        try:
            turn = await self._story.fetch(prior_story, chosen_option)
            if generation != self._generation:
                log.info("Cycle %d superseded by %d; story result dropped",
                         generation, self._generation)
                return
            state.story_text = turn.story_segment
            state.choices = Choice.batch(turn.choice_texts)
            state.image_prompt = turn.image_prompt

            if turn.image_prompt and self._images is not None:
                image = await self._images.generate(turn.image_prompt)
                if generation != self._generation:
                    log.info("Cycle %d superseded by %d; image dropped",
                             generation, self._generation)
                    return
                state.image_data = image
        except ServiceError as exc:
            if generation != self._generation:
                log.info("Cycle %d superseded; failure dropped: %s", generation, exc)
                return
            log.error("Cycle %d failed: %s", generation, exc)
            state.error = f"{failure_prefix}: {str(exc) or UNKNOWN_ERROR}"
        finally:
            if generation == self._generation:
                state.story_loading = False
                state.image_loading = False
                state.phase = "ready"
                log.info("Cycle %d committed", generation)
