from renkioo.models.story import InteractiveOutline
from renkioo.services.story_graph import build_story_graph, next_choice_point

from conftest import make_outline_data


def test_two_by_two_outline_ids(small_outline):
    graph = build_story_graph(small_outline)

    assert list(graph.segments) == ["seg_start", "seg_1_0", "seg_1_1", "seg_ending_0", "seg_ending_1"]
    assert graph.choice_point_order == ["choice_1", "choice_2"]
    assert graph.start_segment_id == "seg_start"
    assert graph.ending_segment_ids == ["seg_ending_0", "seg_ending_1"]

    choice_1 = graph.choice_points["choice_1"]
    assert [o.id for o in choice_1.options] == ["opt_1_0", "opt_1_1"]
    assert choice_1.options[0].next_segment_id == "seg_1_0"
    assert [o.next_segment_id for o in graph.choice_points["choice_2"].options] == ["seg_ending_0", "seg_ending_1"]


def test_build_is_deterministic(outline):
    first = build_story_graph(outline)
    second = build_story_graph(outline)
    assert first.model_dump() == second.model_dump()


def test_every_option_targets_a_known_segment(outline):
    graph = build_story_graph(outline)
    for cp in graph.choice_points.values():
        for option in cp.options:
            assert option.next_segment_id in graph.segments


def test_start_and_non_ending_segments_point_at_next_choice(outline):
    graph = build_story_graph(outline)

    start = graph.segments["seg_start"]
    assert start.is_ending is False
    assert start.choice_point_index == 0
    assert start.description == f"{outline.main_character.name} hikayeye başlıyor: {outline.story_arc}"

    seg = graph.segments["seg_2_1"]
    assert seg.is_ending is False
    assert seg.choice_point_index == 2
    assert seg.description == "Yön 2-1"


def test_ending_set_matches_flags(outline):
    graph = build_story_graph(outline)
    flagged = {sid for sid, d in graph.segments.items() if d.is_ending}
    assert set(graph.ending_segment_ids) == flagged
    assert all(graph.segments[sid].choice_point_index is None for sid in flagged)
    assert "seg_start" not in flagged


def test_convergence_points_do_not_dedupe_segments(outline):
    graph = build_story_graph(outline)
    # 1 个起始段 + 4 个选择点 × 2 个选项
    assert len(graph.segments) == 1 + 4 * 2


def test_three_option_points():
    outline = InteractiveOutline.model_validate(make_outline_data(points=3, options=3))
    graph = build_story_graph(outline)
    assert graph.ending_segment_ids == ["seg_ending_0", "seg_ending_1", "seg_ending_2"]
    assert graph.choice_points["choice_3"].index == 2


def test_degenerate_outline_without_options():
    data = make_outline_data(points=2, options=0)
    graph = build_story_graph(InteractiveOutline.model_validate(data))
    assert list(graph.segments) == ["seg_start"]
    assert all(not cp.options for cp in graph.choice_points.values())
    assert graph.ending_segment_ids == []


def test_degenerate_outline_without_choice_points():
    data = make_outline_data(points=0)
    graph = build_story_graph(InteractiveOutline.model_validate(data))
    assert graph.choice_points == {}
    assert graph.segments["seg_start"].choice_point_index is None


def test_next_choice_point_by_index(outline):
    graph = build_story_graph(outline)
    first = graph.choice_points["choice_1"]
    assert next_choice_point(graph, first).id == "choice_2"
    assert next_choice_point(graph, graph.choice_points["choice_4"]) is None


def test_missing_positions_are_filled():
    data = make_outline_data(points=2)
    for cp in data["choicePoints"]:
        cp.pop("position")
    graph = build_story_graph(InteractiveOutline.model_validate(data))
    assert [graph.choice_points[c].position for c in graph.choice_point_order] == [1, 2]
