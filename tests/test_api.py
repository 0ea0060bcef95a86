from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from fakes import FakeImageService, FakeStoryService, turn
from storyloop.api import dependencies
from storyloop.config import Settings
from storyloop.errors import StoryFetchError
from storyloop.main import app
from storyloop.services.game import CRITICAL_MESSAGE, GameController


@pytest.fixture
def use_controller(monkeypatch):
    def _install(controller: GameController) -> GameController:
        monkeypatch.setattr(dependencies, "_controller", controller)
        return controller

    return _install


def test_get_view_before_any_cycle(use_controller) -> None:
    use_controller(GameController(FakeStoryService()))
    client = TestClient(app)

    resp = client.get("/api/game")

    assert resp.status_code == 200
    body = resp.json()
    assert body["story_loading"] is True
    assert body["busy"] is True
    assert body["choices"] == []


def test_start_and_choose_through_events(use_controller, forest_turn) -> None:
    story = FakeStoryService(forest_turn, StoryFetchError("quota exceeded"))
    use_controller(GameController(story, FakeImageService("IMG1")))
    client = TestClient(app)

    started = client.post("/api/game/events", json={"type": "start"}).json()
    assert started["story_text"] == "You wake in a forest."
    assert started["image_data"] == "IMG1"
    assert [c["text"] for c in started["choices"]] == ["Go north", "Go south"]

    failed = client.post("/api/game/events", json={"type": "choose", "text": "Go north"}).json()
    assert failed["story_text"] == "You wake in a forest."
    assert failed["choices"] == started["choices"]
    assert "quota exceeded" in failed["error"]
    assert failed["busy"] is False

    assert client.get("/api/game").json() == failed


def test_restart_event(use_controller, forest_turn) -> None:
    story = FakeStoryService(forest_turn, turn("A new dawn.", ["Stand up"]))
    use_controller(GameController(story, FakeImageService("IMG1")))
    client = TestClient(app)

    client.post("/api/game/events", json={"type": "start"})
    body = client.post("/api/game/events", json={"type": "restart"}).json()

    assert body["story_text"] == "A new dawn."
    assert body["image_data"] is None
    assert story.calls == [(None, None), (None, None)]


def test_choose_without_text_is_rejected(use_controller) -> None:
    story = FakeStoryService()
    use_controller(GameController(story))
    client = TestClient(app)

    resp = client.post("/api/game/events", json={"type": "choose"})

    assert resp.status_code == 422
    assert story.calls == []


def test_degraded_session_answers_503(use_controller) -> None:
    use_controller(GameController(None, service_available=False))
    client = TestClient(app)

    resp = client.post("/api/game/events", json={"type": "restart"})

    assert resp.status_code == 503
    assert resp.json()["error"] == CRITICAL_MESSAGE
    assert resp.json()["critical"] is True
    assert client.get("/api/game").json()["phase"] == "degraded"


def test_lifespan_opens_the_story(use_controller, forest_turn) -> None:
    story = FakeStoryService(forest_turn)
    use_controller(GameController(story, FakeImageService("IMG1")))

    with TestClient(app) as client:
        body = client.get("/api/game").json()
        for _ in range(50):
            if not body["busy"]:
                break
            body = client.get("/api/game").json()

    assert story.calls == [(None, None)]
    assert body["story_text"] == "You wake in a forest."


def test_build_controller_without_key_is_degraded() -> None:
    ctl = dependencies.build_controller(Settings(openai_api_key="", _env_file=None))
    assert ctl.degraded is True


def test_build_controller_without_image_key_plays_text_only() -> None:
    s = Settings(
        anthropic_api_key="ak",
        openai_api_key="",
        story_provider="anthropic",
        _env_file=None,
    )
    ctl = dependencies.build_controller(s)
    assert ctl.degraded is False
    assert ctl._images is None


def test_providers_endpoint_lists_known_providers() -> None:
    body = TestClient(app).get("/api/providers").json()
    assert set(body["providers"]) == {"openai", "anthropic"}
    assert "service_configured" in body
