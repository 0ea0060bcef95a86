"""Terminal front end: shows the session view and sends the player's picks.

Run the API first (``uvicorn storyloop.main:app``), then ``storyloop-play``.
"""

from __future__ import annotations

import argparse
import time

import requests

from storyloop.models.session import SessionView

DEFAULT_URL = "http://localhost:8000"
POLL_SECONDS = 1.0


def render(view: SessionView) -> str:
    """Text rendering of *view*; never touches the session."""
    if view.critical:
        return f"!! {view.error}\n\nSet the API key and restart the server."

    lines: list[str] = []
    if view.story_loading and not view.story_text:
        lines.append("Weaving your adventure...")
    else:
        lines.append(view.story_text or "An adventure awaits...")

    if view.image_loading:
        lines.append("[illustration loading]")
    elif view.image_data:
        lines.append(f"[illustration: {view.image_prompt or 'untitled'}]")

    if view.error:
        lines.append(f"! {view.error}")

    if view.busy and view.choices:
        lines.append("The world is reacting to your choice...")
    elif view.choices:
        lines.append("")
        lines.append("Choose your path:")
        for n, choice in enumerate(view.choices, start=1):
            lines.append(f"  {n}. {choice.text}")
    if not view.busy:
        lines.append("  r. Restart the adventure")
        lines.append("  q. Quit")
    return "\n".join(lines)


def fetch_view(base_url: str) -> SessionView:
    response = requests.get(f"{base_url}/api/game", timeout=10)
    response.raise_for_status()
    return SessionView.model_validate(response.json())


def send_event(base_url: str, event_type: str, text: str | None = None) -> SessionView:
    response = requests.post(
        f"{base_url}/api/game/events",
        json={"type": event_type, "text": text},
        timeout=300,
    )
    if response.status_code not in (200, 503):
        response.raise_for_status()
    return SessionView.model_validate(response.json())


def read_action(view: SessionView, raw: str) -> tuple[str, str | None] | None:
    """Map what the player typed to an event, or ``None`` if it is not one."""
    raw = raw.strip().lower()
    if raw == "q":
        return ("quit", None)
    if raw == "r":
        return ("restart", None)
    if raw.isdigit() and 1 <= int(raw) <= len(view.choices):
        return ("choose", view.choices[int(raw) - 1].text)
    return None


def main() -> None:
    parser = argparse.ArgumentParser(description="Play storyloop in the terminal.")
    parser.add_argument("--url", default=DEFAULT_URL, help="storyloop API base URL")
    args = parser.parse_args()

    view = fetch_view(args.url)
    while view.busy:
        time.sleep(POLL_SECONDS)
        view = fetch_view(args.url)

    while True:
        print()
        print(render(view))
        if view.critical:
            return
        action = read_action(view, input("> "))
        if action is None:
            print("Pick a number, r or q.")
            continue
        kind, text = action
        if kind == "quit":
            return
        view = send_event(args.url, kind, text)


if __name__ == "__main__":
    main()
