from __future__ import annotations

import re
from typing import Iterator, TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar("T", bound=BaseModel)

_FENCE = re.compile(r"```(?:json)?\s*\n?(.*?)```", re.DOTALL | re.IGNORECASE)


class OutputParser:
    """Turn model output text into a validated Pydantic model.

    Story models tend to wrap their JSON in markdown fences or chat before
    it, so several candidate slices of the text are tried in order:

    - the body of the first ```json fence
    - the first balanced ``{...}`` object
    - the whole text
    """

    @staticmethod
    def parse(text: str, model: type[T]) -> T:
        last_exc: Exception | None = None
        for candidate in OutputParser._candidates(text):
            try:
                return model.model_validate_json(candidate)
            except ValidationError as exc:
                last_exc = exc
        raise ValueError(
            f"Could not parse model output into {model.__name__}: {last_exc}\n"
            f"Raw text (first 300 chars): {text[:300]}"
        ) from last_exc

    @staticmethod
    def _candidates(text: str) -> Iterator[str]:
        fenced = _FENCE.search(text)
        if fenced:
            yield fenced.group(1).strip()
        obj = OutputParser._first_object(text)
        if obj:
            yield obj
        yield text.strip()

    @staticmethod
    def _first_object(text: str) -> str | None:
        start = text.find("{")
        if start == -1:
            return None
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
            elif ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return text[start : i + 1]
        return None
