import asyncio

import pytest

from renkioo.models.story import GenerateInteractiveStoryRequest, PreviousChoice, TherapeuticContext
from renkioo.services import story_engine
from renkioo.services.errors import GenerationParseError, UnknownChoicePointError, UnknownOptionError

from conftest import FakeLLM


@pytest.mark.asyncio
async def test_create_session_generates_only_start(fake_llm, generate_request):
    result = await story_engine.create_session(generate_request)
    story = result.story

    assert list(story.segments) == ["seg_start"]
    assert result.first_segment.id == "seg_start"
    assert result.first_segment.ends_with_choice is True
    assert result.first_segment.choice_point_id == "choice_1"
    assert result.first_choice_point.id == "choice_1"
    assert story.id.startswith("interactive_")
    assert story.total_choice_points == 4
    assert story.estimated_duration == "12-20 dakika"
    assert len(story.themes) == 8
    assert story.educational_value == fake_llm.outline.story_arc
    assert len(fake_llm.segment_calls) == 1
    assert fake_llm.segment_calls[0]["previous_choices"] == []


@pytest.mark.asyncio
async def test_english_duration_and_therapeutic_context(fake_llm):
    request = GenerateInteractiveStoryRequest(
        child_age=8,
        language="en",
        therapeutic_context=TherapeuticContext(concern_type="fear"),
    )
    story = (await story_engine.create_session(request)).story
    assert story.estimated_duration == "12-20 minutes"
    assert story.enhanced_therapeutic_context.concern_type == "fear"
    assert "courage" in story.enhanced_therapeutic_context.recommended_traits


@pytest.mark.asyncio
async def test_create_session_propagates_planner_failure(monkeypatch, generate_request):
    async def broken_plan(request):
        raise GenerationParseError("no json")

    monkeypatch.setattr(story_engine, "plan_interactive_outline", broken_plan)
    with pytest.raises(GenerationParseError):
        await story_engine.create_session(generate_request)


@pytest.mark.asyncio
async def test_advance_grows_segments_by_one(fake_llm, generate_request):
    story = (await story_engine.create_session(generate_request)).story

    result = await story_engine.advance(story, "choice_1", "opt_1_1", [])
    assert result.segment.id == "seg_1_1"
    assert result.is_ending is False
    assert result.next_choice_point.id == "choice_2"
    assert result.segment.choice_point_id == "choice_2"
    assert set(story.segments) == {"seg_start", "seg_1_1"}
    assert fake_llm.segment_calls[-1]["description"] == "Yön 1-1"


@pytest.mark.asyncio
async def test_full_path_reaches_ending(fake_llm, generate_request):
    story = (await story_engine.create_session(generate_request)).story
    history = []
    sizes = [len(story.segments)]
    result = None
    for n in range(1, 5):
        cp = story.choice_points[f"choice_{n}"]
        option = cp.options[0]
        history.append(PreviousChoice(question=cp.question, chosen=option.text, trait=option.trait))
        result = await story_engine.advance(story, cp.id, option.id, history)
        sizes.append(len(story.segments))

    assert sizes == [1, 2, 3, 4, 5]
    assert result.is_ending is True
    assert result.segment.id == "seg_ending_0"
    assert result.next_choice_point is None
    assert result.segment.ends_with_choice is False
    assert len(fake_llm.segment_calls[-1]["previous_choices"]) == 4


@pytest.mark.asyncio
async def test_unknown_choice_point_does_not_mutate(fake_llm, generate_request):
    story = (await story_engine.create_session(generate_request)).story
    before = dict(story.segments)

    with pytest.raises(UnknownChoicePointError):
        await story_engine.advance(story, "choice_99", "opt_1_0", [])
    with pytest.raises(UnknownOptionError):
        await story_engine.advance(story, "choice_1", "opt_1_9", [])

    assert story.segments == before
    assert len(fake_llm.segment_calls) == 1


@pytest.mark.asyncio
async def test_advance_after_ending_fails(fake_llm, generate_request):
    story = (await story_engine.create_session(generate_request)).story
    # 结局段之后不存在选择点
    with pytest.raises(UnknownChoicePointError):
        await story_engine.advance(story, "choice_5", "opt_5_0", [])


@pytest.mark.asyncio
async def test_repeated_advance_returns_cached_segment(fake_llm, generate_request):
    story = (await story_engine.create_session(generate_request)).story
    first = await story_engine.advance(story, "choice_1", "opt_1_0", [])
    second = await story_engine.advance(story, "choice_1", "opt_1_0", [])

    assert second.segment is first.segment
    assert len(fake_llm.segment_calls) == 2


@pytest.mark.asyncio
async def test_concurrent_advance_generates_once(outline, monkeypatch, generate_request):
    fake = FakeLLM(outline, delay=0.01)
    monkeypatch.setattr(story_engine, "plan_interactive_outline", fake.plan)
    monkeypatch.setattr(story_engine, "generate_segment", fake.segment)
    story = (await story_engine.create_session(generate_request)).story

    a, b = await asyncio.gather(
        story_engine.advance(story, "choice_1", "opt_1_0", []),
        story_engine.advance(story, "choice_1", "opt_1_0", []),
    )

    assert a.segment is b.segment
    assert [c["segment_id"] for c in fake.segment_calls] == ["seg_start", "seg_1_0"]


def test_estimate_duration():
    assert story_engine.estimate_duration(5) == "15-25 dakika"
    assert story_engine.estimate_duration(3, "en") == "9-15 minutes"
