from __future__ import annotations

import itertools
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, computed_field

_choice_ids = itertools.count(1)

Phase = Literal["idle", "loading", "ready", "degraded"]


class Choice(BaseModel):
    """An option offered to the player.  ``id`` is unique per process."""

    id: str
    text: str

    @classmethod
    def batch(cls, texts: List[str]) -> List["Choice"]:
        """Build a fresh batch; duplicate texts still get distinct ids."""
        return [cls(id=f"choice-{next(_choice_ids)}", text=t) for t in texts]


class SessionState(BaseModel):
    """The single mutable record owned by the game controller."""

    story_text: str = ""
    image_data: Optional[str] = None
    image_prompt: Optional[str] = None
    choices: List[Choice] = Field(default_factory=list)
    story_loading: bool = True
    image_loading: bool = False
    error: Optional[str] = None
    service_available: bool = True
    phase: Phase = "idle"


class SessionView(BaseModel):
    """Read-only snapshot handed to the presentation layer."""

    story_text: str
    image_data: Optional[str]
    image_prompt: Optional[str]
    choices: List[Choice]
    story_loading: bool
    image_loading: bool
    error: Optional[str]
    phase: Phase
    critical: bool = False

    @computed_field
    @property
    def busy(self) -> bool:
        return self.story_loading or self.image_loading

    @classmethod
    def of(cls, state: SessionState) -> "SessionView":
        return cls(
            story_text=state.story_text,
            image_data=state.image_data,
            image_prompt=state.image_prompt,
            choices=[c.model_copy() for c in state.choices],
            story_loading=state.story_loading,
            image_loading=state.image_loading,
            error=state.error,
            phase=state.phase,
            critical=not state.service_available,
        )
