from datetime import datetime, timezone

import pytest

from renkioo.models.session import ChoiceMade, ParentReport, StorySession
from renkioo.models.story import TherapeuticContext
from renkioo.services import session_service, story_engine
from renkioo.services.errors import ReportNotReadyError, SessionNotFoundError
from renkioo.services.parent_report import build_parent_report, count_traits, generate_parent_report
from renkioo.utils import paths, store


async def _story(generate_request):
    return (await story_engine.create_session(generate_request)).story


def _session(story, picks):
    """picks: [(choice_point_id, option_id)]"""
    choices = []
    for cp_id, opt_id in picks:
        option = next(o for o in story.choice_points[cp_id].options if o.id == opt_id)
        choices.append(ChoiceMade(choice_point_id=cp_id, option_id=opt_id, trait=option.trait))
    return StorySession(
        id="s1",
        story_id=story.id,
        current_segment_id="seg_ending_0",
        choices_made=choices,
        status="completed",
    )


@pytest.mark.asyncio
async def test_trait_counts_sorted_with_percentages(fake_llm, generate_request):
    story = await _story(generate_request)
    # opt_1_1 -> courage, opt_2_0 -> courage, opt_3_0 -> curiosity
    session = _session(story, [("choice_1", "opt_1_1"), ("choice_2", "opt_2_0"), ("choice_3", "opt_3_0")])

    counts = count_traits(session)
    assert [(c.trait, c.count, c.percentage) for c in counts] == [
        ("courage", 2, 67),
        ("curiosity", 1, 33),
    ]


@pytest.mark.asyncio
async def test_report_sections_turkish(fake_llm, generate_request):
    story = await _story(generate_request)
    session = _session(story, [
        ("choice_1", "opt_1_0"), ("choice_2", "opt_2_0"), ("choice_3", "opt_3_0"), ("choice_4", "opt_4_0"),
    ])

    report = build_parent_report(story, session, child_name="Ela")

    assert report.total_choices == 4
    assert report.story_title == "Orman Macerası"
    assert [t.percentage for t in report.dominant_traits] == [25, 25, 25, 25]
    assert report.choice_timeline[0].choice_number == 1
    assert report.choice_timeline[0].question == "Soru 1?"
    assert report.choice_timeline[0].chosen_option == "Seçenek 1-0"
    assert len(report.activity_suggestions) == 3
    assert report.activity_suggestions[0].title == "Empati için aktivite"
    assert report.conversation_starters[0] == '"Orman Macerası" hikayesinde en çok hangi kısmı sevdin?'
    assert report.conversation_starters[1] == "Pamuk gibi davranmak nasıl hissettirdi?"
    assert len(report.conversation_starters) == 4
    assert set(report.trait_insights) == {"empathy", "courage", "curiosity", "creativity"}
    assert report.therapeutic_section is None


@pytest.mark.asyncio
async def test_report_therapeutic_section(fake_llm, generate_request):
    generate_request.therapeutic_context = TherapeuticContext(concern_type="fear")
    story = await _story(generate_request)
    # courage 在 fear 的推荐特质中，creativity 不在
    session = _session(story, [("choice_1", "opt_1_1"), ("choice_2", "opt_2_0"), ("choice_3", "opt_3_1")])

    section = build_parent_report(story, session).therapeutic_section

    assert section.concern_type == "fear"
    assert section.concern_name_tr == "Korku"
    assert section.concern_name_en == "Fear"
    assert section.recommended_traits == ["courage", "problem_solving", "patience"]
    assert section.child_strengths[0] == (
        "Cesaret: Çocuğunuz önerilen terapötik özelliklerden birini güçlü bir şekilde gösterdi."
    )
    assert section.encouraging_message.startswith(
        "Çocuğunuz zorluklarla karşılaşırken cesaret özelliğini güçlü bir şekilde gösterdi."
    )


@pytest.mark.asyncio
async def test_report_english(fake_llm, generate_request):
    story = await _story(generate_request)
    session = _session(story, [("choice_1", "opt_1_0")])
    report = build_parent_report(story, session, language="en")
    assert report.activity_suggestions[0].title == "Activity for Empathy"
    assert report.conversation_starters[1] == "How did it feel to act like Pamuk?"


@pytest.mark.asyncio
async def test_generate_report_requires_completed_session(fake_llm, generate_request):
    started = await session_service.start_story(generate_request)

    with pytest.raises(ReportNotReadyError):
        generate_parent_report(started.session_id)
    with pytest.raises(SessionNotFoundError):
        generate_parent_report("missing")

    for n in range(1, 5):
        await session_service.make_choice(started.session_id, f"choice_{n}", f"opt_{n}_0")

    report = generate_parent_report(started.session_id, child_name="Ela")
    assert report.child_name == "Ela"
    assert store.get_report(started.session_id) is report
    assert store.get_session(started.session_id).parent_report_generated is True


@pytest.mark.asyncio
async def test_regenerated_report_survives_reload(fake_llm, generate_request):
    started = await session_service.start_story(generate_request)
    for n in range(1, 5):
        await session_service.make_choice(started.session_id, f"choice_{n}", f"opt_{n}_0")

    for i in range(6):
        generate_parent_report(started.session_id, child_name=f"Child{i}")
        store._reports.clear()
        store.load_from_disk()
        assert store.get_report(started.session_id).child_name == f"Child{i}"

    assert [p.name for p in paths.REPORTS_DIR.glob("*.json")] == [f"{started.session_id}.json"]


def test_reload_keeps_newest_of_duplicate_report_files():
    older = ParentReport(
        id="report_old", session_id="s1", child_name="Old", story_title="T", dominant_traits=[],
        trait_insights={}, choice_timeline=[], activity_suggestions=[], conversation_starters=[],
        total_choices=0, generated_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    newer = older.model_copy(update={"id": "report_new", "child_name": "New",
                                     "generated_at": datetime(2024, 1, 2, tzinfo=timezone.utc)})
    for report in (newer, older):
        (paths.REPORTS_DIR / f"{report.id}.json").write_text(report.model_dump_json(), encoding="utf-8")

    store.load_from_disk()
    assert store.get_report("s1").child_name == "New"
