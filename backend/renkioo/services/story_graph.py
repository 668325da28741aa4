"""故事图谱构建：把大纲展开为段落描述 + 选择点的有向无环图（纯函数，无 I/O）"""
import logging
from typing import Dict, Optional, Union

from renkioo.models.story import (
    ChoiceOption,
    ChoicePoint,
    InteractiveOutline,
    InteractiveStory,
    SegmentDescriptor,
    StoryGraph,
)

logger = logging.getLogger(__name__)

START_SEGMENT_ID = "seg_start"


def choice_point_id(index: int) -> str:
    return f"choice_{index + 1}"


def option_id(index: int, option_index: int) -> str:
    return f"opt_{index + 1}_{option_index}"


def target_segment_id(index: int, option_index: int, is_last: bool) -> str:
    """第 index 个选择点的第 option_index 个选项指向的段落 ID。"""
    if is_last:
        return f"seg_ending_{option_index}"
    return f"seg_{index + 1}_{option_index}"


def build_story_graph(outline: InteractiveOutline) -> StoryGraph:
    """
    根据大纲构建故事图谱

    - 起始段 seg_start 之后是第 0 个选择点
    - 第 i 个选择点的每个选项指向一个新段落；最后一个选择点的选项指向结局段
    - 非结局段记录其后的选择点下标，结局段为 None

    同一大纲多次调用得到的 ID 与结构完全一致。
    汇合点（convergence_points）只是叙事提示，不做段落去重。
    """
    segments: Dict[str, SegmentDescriptor] = {}
    choice_points: Dict[str, ChoicePoint] = {}
    order = []

    segments[START_SEGMENT_ID] = SegmentDescriptor(
        id=START_SEGMENT_ID,
        description=f"{outline.main_character.name} hikayeye başlıyor: {outline.story_arc}",
        is_ending=False,
        choice_point_index=0 if outline.choice_points else None,
    )

    last_index = len(outline.choice_points) - 1
    for i, planned in enumerate(outline.choice_points):
        cp_id = choice_point_id(i)
        is_last = i == last_index
        options = []
        for j, planned_option in enumerate(planned.options):
            next_id = target_segment_id(i, j, is_last)
            options.append(ChoiceOption(
                id=option_id(i, j),
                text=planned_option.text,
                emoji=planned_option.emoji,
                trait=planned_option.trait,
                next_segment_id=next_id,
                story_direction=planned_option.story_direction,
            ))
            segments[next_id] = SegmentDescriptor(
                id=next_id,
                description=planned_option.story_direction,
                is_ending=is_last,
                choice_point_index=None if is_last else i + 1,
            )

        choice_points[cp_id] = ChoicePoint(
            id=cp_id,
            question=planned.question,
            position=planned.position if planned.position is not None else i + 1,
            index=i,
            options=options,
        )
        order.append(cp_id)

    ending_ids = [seg_id for seg_id, desc in segments.items() if desc.is_ending]
    if not ending_ids:
        logger.warning("[故事图谱] ⚠️ 图谱没有结局段（大纲缺少选择点或选项）")

    logger.info(
        f"[故事图谱] ✅ 构建完成: {len(segments)} 个段落, {len(choice_points)} 个选择点, "
        f"{len(ending_ids)} 个结局"
    )
    return StoryGraph(
        segments=segments,
        choice_points=choice_points,
        choice_point_order=order,
        start_segment_id=START_SEGMENT_ID,
        ending_segment_ids=ending_ids,
    )


def next_choice_point(
    graph: Union[StoryGraph, InteractiveStory],
    current: ChoicePoint,
) -> Optional[ChoicePoint]:
    """按下标取当前选择点之后的选择点；已是最后一个时返回 None。"""
    next_index = current.index + 1
    if next_index >= len(graph.choice_point_order):
        return None
    return graph.choice_points[graph.choice_point_order[next_index]]
