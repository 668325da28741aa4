"""互动故事会话：创建、选择推进、查询与放弃"""
import asyncio
import logging
import uuid
from datetime import datetime, timezone
from threading import Lock
from typing import List, Optional

from renkioo.constants.traits import get_trait_info
from renkioo.models.story import (
    AdvanceResult,
    ChoicePoint,
    GenerateInteractiveStoryRequest,
    InteractiveStory,
    PreviousChoice,
)
from renkioo.models.session import (
    ChoiceMade,
    ChoiceResponse,
    SessionProgress,
    SessionStateResponse,
    StartStoryResponse,
    StorySession,
    StorySummary,
)
from renkioo.services import story_engine
from renkioo.services.errors import (
    ChoicePointNotReachableError,
    SessionCompletedError,
    SessionNotFoundError,
    UnknownChoicePointError,
    UnknownOptionError,
)
from renkioo.utils.store import get_session, get_story, save_session, save_story

logger = logging.getLogger(__name__)

_session_locks: dict[str, asyncio.Lock] = {}
_session_locks_guard = Lock()


def _get_session_lock(session_id: str) -> asyncio.Lock:
    with _session_locks_guard:
        lock = _session_locks.get(session_id)
        if lock is None:
            lock = asyncio.Lock()
            _session_locks[session_id] = lock
        return lock


def new_session_id() -> str:
    return str(uuid.uuid4())


def _summary(story: InteractiveStory) -> StorySummary:
    return StorySummary(
        id=story.id,
        title=story.title,
        main_character=story.main_character,
        total_choice_points=story.total_choice_points,
        mood=story.mood,
        estimated_duration=story.estimated_duration,
    )


def _progress(story: InteractiveStory, session: StorySession) -> SessionProgress:
    return SessionProgress(
        current_choice=len(session.choices_made),
        total_choices=story.total_choice_points,
    )


def _choice_response(story: InteractiveStory, session: StorySession, trait: str, result: AdvanceResult) -> ChoiceResponse:
    return ChoiceResponse(
        segment=result.segment,
        next_choice_point=result.next_choice_point,
        is_ending=result.is_ending,
        progress=_progress(story, session),
        trait=trait,
        trait_info=get_trait_info(trait, story.language),
    )


def load_session(session_id: str) -> tuple[StorySession, InteractiveStory]:
    """取会话及其故事，任一不存在都视为会话不存在。"""
    session = get_session(session_id)
    if session is None:
        raise SessionNotFoundError(session_id)
    story = get_story(session.story_id)
    if story is None:
        logger.error(f"[会话] ❌ 会话 {session_id} 对应的故事 {session.story_id} 不存在")
        raise SessionNotFoundError(session_id)
    return session, story


def expected_choice_point(story: InteractiveStory, session: StorySession) -> Optional[ChoicePoint]:
    """会话当前段落之后等待的选择点；已到结局时为 None。"""
    if session.status != "in_progress":
        return None
    descriptor = story.segment_descriptors.get(session.current_segment_id)
    if descriptor is None or descriptor.choice_point_index is None:
        return None
    if descriptor.choice_point_index >= len(story.choice_point_order):
        return None
    return story.choice_points[story.choice_point_order[descriptor.choice_point_index]]


def build_previous_choices(story: InteractiveStory, choices: List[ChoiceMade]) -> List[PreviousChoice]:
    """把已保存的选择还原为提示词使用的问答历史。"""
    history = []
    for c in choices:
        cp = story.choice_points.get(c.choice_point_id)
        option = next((o for o in cp.options if o.id == c.option_id), None) if cp else None
        history.append(PreviousChoice(
            question=cp.question if cp else "",
            chosen=option.text if option else "",
            trait=c.trait,
        ))
    return history


async def start_story(request: GenerateInteractiveStoryRequest) -> StartStoryResponse:
    """生成新的互动故事并开启会话。"""
    result = await story_engine.create_session(request)
    story = result.story
    save_story(story)

    session = StorySession(
        id=new_session_id(),
        story_id=story.id,
        current_segment_id=story.start_segment_id,
        path_taken=[story.start_segment_id],
    )
    save_session(session)
    logger.info(f"[会话] ✅ 新会话 {session.id}（故事 {story.id}）")

    return StartStoryResponse(
        story_id=story.id,
        session_id=session.id,
        story=_summary(story),
        current_segment=result.first_segment,
        current_choice_point=result.first_choice_point,
        progress=_progress(story, session),
    )


async def make_choice(session_id: str, choice_point_id: str, option_id: str) -> ChoiceResponse:
    """
    在会话中做出一次选择并生成下一段

    只接受当前段落之后的那个选择点；读到结局后会话标记为 completed。
    同一会话的选择串行处理，校验与生成都在会话锁内完成。
    """
    load_session(session_id)  # 不存在的会话不创建锁
    async with _get_session_lock(session_id):
        session, story = load_session(session_id)

        if session.choices_made:
            last = session.choices_made[-1]
            if last.choice_point_id == choice_point_id and last.option_id == option_id:
                # 重复提交：目标段落已生成，直接返回
                result = await story_engine.advance(story, choice_point_id, option_id, [])
                logger.info(f"[会话] 重复提交 {session_id} {choice_point_id}/{option_id}，返回已生成段落")
                return _choice_response(story, session, last.trait, result)

        if session.status != "in_progress":
            raise SessionCompletedError(session_id, session.status)

        choice_point = story.choice_points.get(choice_point_id)
        if choice_point is None:
            raise UnknownChoicePointError(choice_point_id)
        expected = expected_choice_point(story, session)
        if expected is None or expected.id != choice_point_id:
            raise ChoicePointNotReachableError(choice_point_id, expected.id if expected else None)
        option = next((o for o in choice_point.options if o.id == option_id), None)
        if option is None:
            raise UnknownOptionError(choice_point_id, option_id)

        choice = ChoiceMade(choice_point_id=choice_point_id, option_id=option_id, trait=option.trait)
        history = build_previous_choices(story, session.choices_made + [choice])
        result = await story_engine.advance(story, choice_point_id, option_id, history)

        session.choices_made.append(choice)
        session.path_taken.append(option.next_segment_id)
        session.current_segment_id = option.next_segment_id
        if result.is_ending:
            session.status = "completed"
            session.completed_at = datetime.now(timezone.utc)
        save_story(story)
        save_session(session)

    logger.info(
        f"[会话] 🎯 {session_id} 选择 {choice_point_id}/{option_id} ({option.trait})"
        f"{'，故事完结' if result.is_ending else ''}"
    )
    return _choice_response(story, session, option.trait, result)


def get_session_state(session_id: str) -> SessionStateResponse:
    session, story = load_session(session_id)
    return SessionStateResponse(
        session=session,
        story=_summary(story),
        current_segment=story.segments.get(session.current_segment_id),
        current_choice_point=expected_choice_point(story, session),
        progress=_progress(story, session),
        is_ending=session.status == "completed",
    )


def abandon_session(session_id: str) -> StorySession:
    """放弃阅读；已完结的会话不能放弃。"""
    session, _ = load_session(session_id)
    if session.status == "completed":
        raise SessionCompletedError(session_id, session.status)
    if session.status != "abandoned":
        session.status = "abandoned"
        save_session(session)
        logger.info(f"[会话] 会话 {session_id} 已放弃")
    return session
