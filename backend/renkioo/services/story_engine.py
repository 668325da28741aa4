"""故事引擎：编排大纲规划、图谱构建与按需段落生成"""
import asyncio
import logging
import uuid
from threading import Lock
from typing import List

from renkioo.constants.therapeutic import build_enhanced_therapeutic_context
from renkioo.models.story import (
    AdvanceResult,
    CreateSessionResult,
    GenerateInteractiveStoryRequest,
    InteractiveStory,
    PreviousChoice,
    SegmentStyleContext,
    StoryGraph,
    InteractiveOutline,
)
from renkioo.services.errors import UnknownChoicePointError, UnknownOptionError
from renkioo.services.llm_service import plan_interactive_outline, generate_segment
from renkioo.services.story_graph import build_story_graph, next_choice_point

logger = logging.getLogger(__name__)

_advance_locks: dict[str, asyncio.Lock] = {}
_locks_guard = Lock()


def _get_advance_lock(story_id: str) -> asyncio.Lock:
    with _locks_guard:
        lock = _advance_locks.get(story_id)
        if lock is None:
            lock = asyncio.Lock()
            _advance_locks[story_id] = lock
        return lock


def new_interactive_story_id() -> str:
    return f"interactive_{uuid.uuid4().hex}"


def estimate_duration(total_choice_points: int, language: str = "tr") -> str:
    """每个选择点约 3-5 分钟阅读时间。"""
    unit = "dakika" if language == "tr" else "minutes"
    return f"{total_choice_points * 3}-{total_choice_points * 5} {unit}"


def style_context_of(story: InteractiveStory) -> SegmentStyleContext:
    return SegmentStyleContext(
        mood=story.mood,
        ending_theme=story.ending_theme,
        story_arc=story.educational_value,
    )


def _assemble_story(
    request: GenerateInteractiveStoryRequest,
    outline: InteractiveOutline,
    graph: StoryGraph,
) -> InteractiveStory:
    total = len(graph.choice_point_order)
    themes = [opt.trait for cp in outline.choice_points for opt in cp.options]
    enhanced = None
    if request.therapeutic_context:
        enhanced = build_enhanced_therapeutic_context(
            request.therapeutic_context.concern_type, request.language
        )
    return InteractiveStory(
        id=new_interactive_story_id(),
        title=outline.title,
        main_character=outline.main_character,
        segments={},
        segment_descriptors=graph.segments,
        choice_points=graph.choice_points,
        choice_point_order=graph.choice_point_order,
        start_segment_id=graph.start_segment_id,
        ending_segment_ids=graph.ending_segment_ids,
        total_choice_points=total,
        estimated_duration=estimate_duration(total, request.language),
        themes=themes,
        educational_value=outline.story_arc,
        ending_theme=outline.ending_theme,
        mood=outline.mood,
        language=request.language,
        child_age=request.child_age,
        therapeutic_context=request.therapeutic_context,
        enhanced_therapeutic_context=enhanced,
    )


async def create_session(request: GenerateInteractiveStoryRequest) -> CreateSessionResult:
    """
    创建互动故事：规划大纲 -> 构建图谱 -> 只生成起始段

    任一步失败直接抛出，不返回半成品。返回时 story.segments 只有起始段。
    """
    logger.info(
        f"[互动故事] 开始创建: age={request.child_age}, language={request.language}, "
        f"theme={request.selected_theme or '-'}"
    )
    outline = await plan_interactive_outline(request)
    graph = build_story_graph(outline)
    story = _assemble_story(request, outline, graph)

    start = graph.segments[graph.start_segment_id]
    first_segment = await generate_segment(
        story.main_character,
        style_context_of(story),
        [],
        start.id,
        start.description,
        False,
        story.language,
        story.child_age,
    )
    first_choice_point = None
    if graph.choice_point_order:
        first_choice_point = graph.choice_points[graph.choice_point_order[0]]
        first_segment.choice_point_id = first_choice_point.id
    story.segments[start.id] = first_segment

    logger.info(
        f"[互动故事] ✅ 创建完成: {story.id}《{story.title}》，"
        f"{story.total_choice_points} 个选择点，预计 {story.estimated_duration}"
    )
    return CreateSessionResult(
        story=story,
        first_segment=first_segment,
        first_choice_point=first_choice_point,
    )


async def advance(
    story: InteractiveStory,
    choice_point_id: str,
    option_id: str,
    previous_choices: List[PreviousChoice],
) -> AdvanceResult:
    """
    根据孩子的选择推进故事，生成目标段落并写入 story.segments

    Args:
        story: 运行中的互动故事
        choice_point_id: 选择点 ID（如 choice_1）
        option_id: 选项 ID（如 opt_1_0）
        previous_choices: 截至本次（含本次）的选择历史，用于提示词

    Raises:
        UnknownChoicePointError / UnknownOptionError: ID 不存在，此时不做任何生成与修改
    """
    choice_point = story.choice_points.get(choice_point_id)
    if choice_point is None:
        raise UnknownChoicePointError(choice_point_id)
    option = next((o for o in choice_point.options if o.id == option_id), None)
    if option is None:
        raise UnknownOptionError(choice_point_id, option_id)

    target_id = option.next_segment_id
    is_ending = target_id in story.ending_segment_ids
    following = None if is_ending else next_choice_point(story, choice_point)

    async with _get_advance_lock(story.id):
        # 在锁内再次检查，避免并发重复生成同一段落
        cached = story.segments.get(target_id)
        if cached is not None:
            logger.info(f"[互动故事] 段落 {target_id} 已生成，直接返回")
            return AdvanceResult(segment=cached, next_choice_point=following, is_ending=is_ending)

        descriptor = story.segment_descriptors.get(target_id)
        description = descriptor.description if descriptor else option.story_direction
        logger.info(
            f"[互动故事] 推进: {story.id} {choice_point_id}/{option_id} -> {target_id}"
            f"{'（结局）' if is_ending else ''}"
        )
        segment = await generate_segment(
            story.main_character,
            style_context_of(story),
            previous_choices,
            target_id,
            description,
            is_ending,
            story.language,
            story.child_age,
        )
        if following is not None:
            segment.choice_point_id = following.id
        story.segments[target_id] = segment

    return AdvanceResult(segment=segment, next_choice_point=following, is_ending=is_ending)
