from storyloop.models.session import Choice, SessionState, SessionView
from storyloop.models.story import StoryResponse

__all__ = [
    "Choice",
    "SessionState",
    "SessionView",
    "StoryResponse",
]
