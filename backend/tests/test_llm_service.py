import json
import logging

import pytest

from renkioo.models.story import (
    GenerateInteractiveStoryRequest,
    InteractiveCharacter,
    PreviousChoice,
    SegmentStyleContext,
    TherapeuticContext,
)
from renkioo.services import llm_service
from renkioo.services.errors import GenerationParseError

from conftest import make_outline_data


def test_normalize_json_strips_fences_and_trailing_commas():
    raw = '```json\n{"a": [1, 2,], "b": {"c": "x}"},}\n```'
    assert json.loads(llm_service._normalize_json(raw)) == {"a": [1, 2], "b": {"c": "x}"}}


def test_normalize_json_keeps_commas_inside_strings():
    raw = '{"text": "a, ]", "pages": ["b,}", "c \\", ]",],}'
    assert json.loads(llm_service._normalize_json(raw)) == {"text": "a, ]", "pages": ["b,}", 'c ", ]']}


def test_normalize_json_takes_first_object_from_prose():
    raw = 'Tabii! İşte hikaye: {"title": "X"} umarım beğenirsin {"other": 1}'
    assert llm_service._normalize_json(raw) == '{"title": "X"}'


def test_parse_outline_accepts_camel_case():
    outline = llm_service.parse_outline(json.dumps(make_outline_data(points=2)))
    assert outline.main_character.speech_style == "neşeli"
    assert outline.choice_points[1].options[0].story_direction == "Yön 2-0"


def test_parse_outline_normalizes_trait_spelling():
    data = make_outline_data(points=1)
    data["choicePoints"][0]["options"][0]["trait"] = "Problem-Solving"
    outline = llm_service.parse_outline(json.dumps(data))
    assert outline.choice_points[0].options[0].trait == "problem_solving"


def test_parse_outline_rejects_unknown_trait():
    data = make_outline_data(points=1)
    data["choicePoints"][0]["options"][0]["trait"] = "bravery"
    with pytest.raises(GenerationParseError):
        llm_service.parse_outline(json.dumps(data))


@pytest.mark.parametrize("raw", [
    "Üzgünüm, hikaye oluşturamadım.",
    '{"title": "eksik"',
    '{"title": "X", "choicePoints": [}',
    '{"title": "X"}',
])
def test_parse_outline_failures(raw):
    with pytest.raises(GenerationParseError):
        llm_service.parse_outline(raw)


def test_parse_segment_fills_page_numbers():
    raw = json.dumps({"pages": [
        {"text": "Bir", "sceneDescription": "orman"},
        {"text": "İki", "visualPrompt": "forest", "emotion": "happy"},
    ]})
    segment = llm_service.parse_segment(raw, "seg_1_0", is_ending=False)
    assert [p.page_number for p in segment.pages] == [1, 2]
    assert segment.pages[0].scene_description == "orman"
    assert segment.pages[1].emotion == "happy"
    assert segment.ends_with_choice is True
    assert segment.id == "seg_1_0"


def test_parse_segment_ending_and_missing_pages():
    ending = llm_service.parse_segment('{"pages": [{"text": "Son"}]}', "seg_ending_0", is_ending=True)
    assert ending.ends_with_choice is False
    with pytest.raises(GenerationParseError):
        llm_service.parse_segment('{"pages": []}', "seg_1_0", is_ending=False)
    with pytest.raises(GenerationParseError):
        llm_service.parse_segment('{"pages": [{"emotion": "happy"}]}', "seg_1_0", is_ending=False)


def test_outline_prompts_defaults_and_therapeutic_block():
    request = GenerateInteractiveStoryRequest(
        child_age=3,
        therapeutic_context=TherapeuticContext(concern_type="loneliness"),
        drawing_insights=["Çocuk yalnız bir ağaç çizmiş", "Renkler soluk"],
    )
    system_prompt, user_prompt = llm_service.build_outline_prompts(request)
    assert "TERAPÖTİK BAĞLAM" in system_prompt
    assert "ÖNERİLEN TERAPÖTİK ÖZELLİKLER" in system_prompt
    assert "Çocuk adı: Kahraman" in user_prompt
    assert "Seçilen tema: Macera" in user_prompt
    assert "Çizim analizi: Çocuk yalnız bir ağaç çizmiş. Renkler soluk" in user_prompt
    assert "Çok basit" in user_prompt


def test_outline_prompts_english():
    request = GenerateInteractiveStoryRequest(child_age=10, language="en", selected_theme="Space")
    system_prompt, user_prompt = llm_service.build_outline_prompts(request)
    assert "THERAPEUTIC CONTEXT" not in system_prompt
    assert "Child name: Hero" in user_prompt
    assert "Selected theme: Space" in user_prompt
    assert "Drawing analysis" not in user_prompt


def test_segment_prompts_include_history():
    character = InteractiveCharacter(name="Pamuk", type="tavşan", personality=["nazik"])
    style = SegmentStyleContext(ending_theme="Arkadaşlık kazanır")
    history = [PreviousChoice(question="Nereye?", chosen="Nehre", trait="courage")]

    system_prompt, user_prompt = llm_service.build_segment_prompts(
        character, style, history, "seg_ending_1", "Eve dönüş", True, "tr", 7,
    )
    assert '1. "Nereye?" → "Nehre" (courage)' in system_prompt
    assert "BİTİŞ sahnesi" in system_prompt
    assert "BİTİŞ SAHNESİ: Arkadaşlık kazanır" in user_prompt
    assert "Segment ID: seg_ending_1" in user_prompt

    system_prompt, _ = llm_service.build_segment_prompts(
        character, style, [], "seg_start", "Başlangıç", False, "en", 7,
    )
    assert "No choices made yet" in system_prompt
    assert "prepare for a choice point" in system_prompt


@pytest.mark.asyncio
async def test_plan_interactive_outline_warns_on_few_points(monkeypatch, caplog):
    calls = []

    async def fake_chat(system_prompt, user_prompt, max_tokens):
        calls.append(max_tokens)
        return "```json\n" + json.dumps(make_outline_data(points=2)) + "\n```"

    monkeypatch.setattr(llm_service, "_chat", fake_chat)
    with caplog.at_level(logging.WARNING, logger="renkioo.services.llm_service"):
        outline = await llm_service.plan_interactive_outline(GenerateInteractiveStoryRequest(child_age=6))

    assert len(outline.choice_points) == 2
    assert calls == [2000]
    assert any("选择点只有 2 个" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_generate_segment_raises_on_bad_reply(monkeypatch):
    async def fake_chat(system_prompt, user_prompt, max_tokens):
        return "no json here"

    monkeypatch.setattr(llm_service, "_chat", fake_chat)
    with pytest.raises(GenerationParseError):
        await llm_service.generate_segment(
            InteractiveCharacter(name="Pamuk"), SegmentStyleContext(), [],
            "seg_start", "Başlangıç", False, "tr", 6,
        )
