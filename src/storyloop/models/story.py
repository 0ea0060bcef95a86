from __future__ import annotations

from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class StoryResponse(BaseModel):
    """One story turn as returned by the story backend.

    The JSON contract uses ``new_story_segment`` / ``choices`` /
    ``image_prompt``; the attribute names are accepted too so fakes and
    tests can build instances directly.
    """

    model_config = ConfigDict(populate_by_name=True)

    story_segment: str = Field(
        validation_alias=AliasChoices("new_story_segment", "story_segment"),
    )
    choice_texts: List[str] = Field(
        validation_alias=AliasChoices("choices", "choice_texts"),
    )
    image_prompt: Optional[str] = None

    @field_validator("story_segment")
    @classmethod
    def _segment_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("story segment is empty")
        return v

    @field_validator("choice_texts")
    @classmethod
    def _clean_choices(cls, v: List[str]) -> List[str]:
        cleaned = [c.strip() for c in v if c and c.strip()]
        if not cleaned:
            raise ValueError("no choices offered")
        return cleaned

    @field_validator("image_prompt")
    @classmethod
    def _blank_prompt_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()
