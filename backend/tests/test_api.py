import pytest
from httpx import AsyncClient, ASGITransport

from renkioo.main import app
from renkioo.services import story_engine
from renkioo.services.errors import GenerationParseError


def _client():
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
async def test_health_and_root():
    async with _client() as ac:
        assert (await ac.get("/health")).json() == {"status": "ok"}
        assert (await ac.get("/")).status_code == 200


@pytest.mark.asyncio
async def test_generate_and_play_through(fake_llm):
    async with _client() as ac:
        resp = await ac.post("/api/interactive-story/generate", json={"child_age": 5, "child_name": "Ela"})
        assert resp.status_code == 200
        body = resp.json()
        session_id = body["session_id"]
        assert body["current_segment"]["id"] == "seg_start"
        assert body["current_choice_point"]["id"] == "choice_1"
        assert body["progress"] == {"current_choice": 0, "total_choices": 4}

        resp = await ac.post(f"/api/interactive-story/session/{session_id}/report", json={})
        assert resp.status_code == 409

        for n in range(1, 5):
            resp = await ac.post("/api/interactive-story/choice", json={
                "session_id": session_id,
                "choice_point_id": f"choice_{n}",
                "option_id": f"opt_{n}_1",
            })
            assert resp.status_code == 200
        body = resp.json()
        assert body["is_ending"] is True
        assert body["segment"]["id"] == "seg_ending_1"
        assert body["next_choice_point"] is None

        resp = await ac.get(f"/api/interactive-story/session/{session_id}")
        assert resp.json()["is_ending"] is True
        assert resp.json()["session"]["status"] == "completed"

        resp = await ac.post("/api/interactive-story/choice", json={
            "session_id": session_id, "choice_point_id": "choice_4", "option_id": "opt_4_0",
        })
        assert resp.status_code == 409

        resp = await ac.post(f"/api/interactive-story/session/{session_id}/report", json={"child_name": "Ela"})
        assert resp.status_code == 200
        assert resp.json()["total_choices"] == 4

        resp = await ac.get(f"/api/interactive-story/session/{session_id}/report")
        assert resp.json()["child_name"] == "Ela"

        stories = (await ac.get("/api/interactive-story/list")).json()["stories"]
        assert stories[0]["generated_segments"] == 5


@pytest.mark.asyncio
async def test_choice_error_mapping(fake_llm):
    async with _client() as ac:
        session_id = (await ac.post("/api/interactive-story/generate", json={"child_age": 7})).json()["session_id"]

        resp = await ac.post("/api/interactive-story/choice", json={
            "session_id": session_id, "choice_point_id": "choice_1", "option_id": "opt_1_9",
        })
        assert resp.status_code == 400

        resp = await ac.post("/api/interactive-story/choice", json={
            "session_id": session_id, "choice_point_id": "choice_2", "option_id": "opt_2_0",
        })
        assert resp.status_code == 400

        resp = await ac.post("/api/interactive-story/choice", json={
            "session_id": "nope", "choice_point_id": "choice_1", "option_id": "opt_1_0",
        })
        assert resp.status_code == 404

        resp = await ac.post(f"/api/interactive-story/session/{session_id}/abandon")
        assert resp.json()["status"] == "abandoned"
        assert (await ac.get("/api/interactive-story/session/nope")).status_code == 404


@pytest.mark.asyncio
async def test_generate_parse_failure_is_bad_gateway(monkeypatch):
    async def broken_plan(request):
        raise GenerationParseError("LLM 响应中没有 JSON 对象")

    monkeypatch.setattr(story_engine, "plan_interactive_outline", broken_plan)
    async with _client() as ac:
        resp = await ac.post("/api/interactive-story/generate", json={"child_age": 5})
    assert resp.status_code == 502


@pytest.mark.asyncio
async def test_generate_validates_age():
    async with _client() as ac:
        resp = await ac.post("/api/interactive-story/generate", json={"child_age": 20})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_traits_endpoints():
    async with _client() as ac:
        traits = (await ac.get("/api/interactive-story/traits", params={"language": "en"})).json()["traits"]
        assert len(traits) == 8
        resp = await ac.get("/api/interactive-story/traits/sharing")
        assert resp.json()["name"] == "Paylaşım"
        assert (await ac.get("/api/interactive-story/traits/bravery")).status_code == 404
