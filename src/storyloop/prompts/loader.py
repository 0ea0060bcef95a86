from __future__ import annotations

import re
from pathlib import Path

from storyloop.config import settings

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


class PromptLoader:
    """Reads ``<category>/<NAME>.txt`` templates once and fills them in.

    ``{name}`` placeholders are substituted in a single pass, so a value
    that itself contains ``{...}`` (player text, model-written story) is
    inserted verbatim.  Unknown placeholders and JSON braces stay as they are.
    """

    def __init__(self, templates_dir: str | Path | None = None):
        self._dir = Path(templates_dir or settings.prompts_dir)
        self._templates: dict[tuple[str, str], str] = {}

    def template(self, category: str, name: str) -> str:
        key = (category, name)
        if key not in self._templates:
            path = self._dir / category / f"{name}.txt"
            self._templates[key] = path.read_text(encoding="utf-8").strip()
        return self._templates[key]

    def render(self, category: str, name: str, **variables: str) -> str:
        return _PLACEHOLDER.sub(
            lambda m: variables.get(m.group(1), m.group(0)),
            self.template(category, name),
        )
