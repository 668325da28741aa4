import asyncio

import pytest

from renkioo.models.story import (
    GenerateInteractiveStoryRequest,
    InteractiveOutline,
    StoryPage,
    StorySegment,
)
from renkioo.services import story_engine
from renkioo.utils import paths, store


def make_outline_data(points=4, options=2, name="Pamuk"):
    """构造 LLM 风格（camelCase）的大纲 JSON。"""
    traits = ["empathy", "courage", "curiosity", "creativity", "problem_solving", "sharing", "patience", "independence"]
    choice_points = []
    for i in range(points):
        choice_points.append({
            "position": i + 1,
            "question": f"Soru {i + 1}?",
            "options": [
                {
                    "text": f"Seçenek {i + 1}-{j}",
                    "emoji": "⭐",
                    "trait": traits[(i + j) % len(traits)],
                    "storyDirection": f"Yön {i + 1}-{j}",
                }
                for j in range(options)
            ],
        })
    return {
        "title": "Orman Macerası",
        "mainCharacter": {
            "name": name,
            "type": "tavşan",
            "age": 5,
            "appearance": "beyaz tüylü, pembe kulaklı",
            "personality": ["meraklı", "nazik"],
            "speechStyle": "neşeli",
            "arc": {"start": "çekingen", "middle": "cesaret buluyor", "end": "kendine güveniyor"},
        },
        "storyArc": "Pamuk ormanda kaybolan arkadaşını arar.",
        "choicePoints": choice_points,
        "convergencePoints": ["Nehir kıyısında yollar birleşir"],
        "endingTheme": "Arkadaşlık her şeyi güzelleştirir",
        "mood": "adventure",
    }


@pytest.fixture
def outline_data():
    return make_outline_data()


@pytest.fixture
def outline(outline_data):
    return InteractiveOutline.model_validate(outline_data)


@pytest.fixture
def small_outline():
    """2 个选择点、每个 2 个选项。"""
    return InteractiveOutline.model_validate(make_outline_data(points=2, options=2))


@pytest.fixture
def generate_request():
    return GenerateInteractiveStoryRequest(child_age=5, child_name="Ela", language="tr")


@pytest.fixture(autouse=True)
def isolated_store(tmp_path, monkeypatch):
    """存储目录重定向到临时目录，并清空内存缓存。"""
    for name in ("stories", "sessions", "reports"):
        (tmp_path / name).mkdir()
    monkeypatch.setattr(paths, "STORIES_DIR", tmp_path / "stories")
    monkeypatch.setattr(paths, "SESSIONS_DIR", tmp_path / "sessions")
    monkeypatch.setattr(paths, "REPORTS_DIR", tmp_path / "reports")
    monkeypatch.setattr(store, "_stories", {})
    monkeypatch.setattr(store, "_story_order", [])
    monkeypatch.setattr(store, "_sessions", {})
    monkeypatch.setattr(store, "_reports", {})
    return tmp_path


class FakeLLM:
    """替换大纲规划与段落生成，记录每次段落生成调用。"""

    def __init__(self, outline: InteractiveOutline, delay: float = 0):
        self.outline = outline
        self.delay = delay
        self.segment_calls = []
        self.outline_calls = 0

    async def plan(self, request):
        self.outline_calls += 1
        return self.outline.model_copy(deep=True)

    async def segment(self, character, style_context, previous_choices, segment_id,
                      segment_description, is_ending, language, child_age):
        self.segment_calls.append({
            "segment_id": segment_id,
            "description": segment_description,
            "is_ending": is_ending,
            "previous_choices": list(previous_choices),
            "language": language,
            "child_age": child_age,
        })
        if self.delay:
            await asyncio.sleep(self.delay)
        return StorySegment(
            id=segment_id,
            pages=[StoryPage(page_number=1, text=f"{character.name}: {segment_description}")],
            ends_with_choice=not is_ending,
        )


@pytest.fixture
def fake_llm(outline, monkeypatch):
    fake = FakeLLM(outline)
    monkeypatch.setattr(story_engine, "plan_interactive_outline", fake.plan)
    monkeypatch.setattr(story_engine, "generate_segment", fake.segment)
    return fake
