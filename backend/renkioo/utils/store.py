"""互动故事、会话与家长报告存储：内存+文件持久化（后端重启不丢失）"""
import json
import logging
from pathlib import Path
from typing import Optional, List, TypeVar, Type
from pydantic import BaseModel, ValidationError
from renkioo.models.story import InteractiveStory
from renkioo.models.session import StorySession, ParentReport
from renkioo.utils import paths

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

# 内存缓存
_stories: dict[str, InteractiveStory] = {}
_story_order: List[str] = []  # 创建顺序，新在前展示
_sessions: dict[str, StorySession] = {}
_reports: dict[str, ParentReport] = {}  # 以 session_id 为键

INDEX_NAME = "_index.json"


def _stories_dir() -> Path:
    return paths.STORIES_DIR


def _sessions_dir() -> Path:
    return paths.SESSIONS_DIR


def _reports_dir() -> Path:
    return paths.REPORTS_DIR


def _write_json(directory: Path, item_id: str, model: BaseModel) -> None:
    """将模型保存到 {directory}/{item_id}.json"""
    try:
        target = directory / f"{item_id}.json"
        target.write_text(model.model_dump_json(indent=2), encoding="utf-8")
        logger.debug(f"[存储] 已保存到文件: {target}")
    except OSError as e:
        logger.error(f"[存储] ❌ 保存文件失败 {item_id}: {e}", exc_info=True)


def _read_json(directory: Path, item_id: str, model_cls: Type[M]) -> Optional[M]:
    target = directory / f"{item_id}.json"
    if not target.exists():
        return None
    try:
        return model_cls.model_validate_json(target.read_text(encoding="utf-8"))
    except (OSError, ValidationError) as e:
        logger.error(f"[存储] ❌ 读取文件失败 {target}: {e}", exc_info=True)
        return None


def _load_dir(directory: Path, model_cls: Type[M]) -> List[M]:
    loaded = []
    for item_file in directory.glob("*.json"):
        if item_file.name == INDEX_NAME:
            continue
        item = _read_json(directory, item_file.stem, model_cls)
        if item is not None:
            loaded.append(item)
    return loaded


def _save_index() -> None:
    """保存故事索引（顺序）"""
    try:
        (_stories_dir() / INDEX_NAME).write_text(json.dumps(_story_order, ensure_ascii=False), encoding="utf-8")
        logger.debug(f"[存储] 索引已保存，共 {len(_story_order)} 个故事")
    except OSError as e:
        logger.error(f"[存储] ❌ 保存索引失败: {e}", exc_info=True)


def load_from_disk() -> None:
    """启动时从磁盘加载故事、会话与报告到内存"""
    logger.info("[存储] 开始从磁盘加载数据...")

    index_file = _stories_dir() / INDEX_NAME
    if index_file.exists():
        try:
            _story_order.clear()
            _story_order.extend(json.loads(index_file.read_text(encoding="utf-8")))
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"[存储] ❌ 加载索引失败: {e}", exc_info=True)

    for story in _load_dir(_stories_dir(), InteractiveStory):
        _stories[story.id] = story
        if story.id not in _story_order:
            _story_order.append(story.id)
    for session in _load_dir(_sessions_dir(), StorySession):
        _sessions[session.id] = session
    for report in _load_dir(_reports_dir(), ParentReport):
        # 同一会话可能有多份报告文件，保留最新一份
        existing = _reports.get(report.session_id)
        if existing is None or report.generated_at >= existing.generated_at:
            _reports[report.session_id] = report

    logger.info(
        f"[存储] ✅ 加载完成: {len(_stories)} 个故事, {len(_sessions)} 个会话, {len(_reports)} 份报告"
    )


def save_story(story: InteractiveStory) -> InteractiveStory:
    """保存故事到内存和文件"""
    _stories[story.id] = story
    if story.id not in _story_order:
        _story_order.append(story.id)
        _save_index()
    _write_json(_stories_dir(), story.id, story)
    return story


def get_story(story_id: str) -> Optional[InteractiveStory]:
    """获取故事（先从内存，如未找到则尝试从文件加载）"""
    if story_id in _stories:
        return _stories[story_id]
    story = _read_json(_stories_dir(), story_id, InteractiveStory)
    if story is not None:
        _stories[story_id] = story
        if story_id not in _story_order:
            _story_order.append(story_id)
        logger.info(f"[存储] 从文件加载故事: {story_id}")
    return story


def list_stories() -> List[dict]:
    """返回所有故事摘要，按创建时间倒序。"""
    result = []
    for story_id in reversed(_story_order):
        story = get_story(story_id)
        if not story:
            continue
        result.append({
            "story_id": story.id,
            "title": story.title,
            "language": story.language,
            "mood": story.mood,
            "total_choice_points": story.total_choice_points,
            "generated_segments": len(story.segments),
            "estimated_duration": story.estimated_duration,
            "created_at": story.created_at.isoformat(),
        })
    return result


def save_session(session: StorySession) -> StorySession:
    _sessions[session.id] = session
    _write_json(_sessions_dir(), session.id, session)
    return session


def get_session(session_id: str) -> Optional[StorySession]:
    if session_id in _sessions:
        return _sessions[session_id]
    session = _read_json(_sessions_dir(), session_id, StorySession)
    if session is not None:
        _sessions[session_id] = session
    return session


def save_report(report: ParentReport) -> ParentReport:
    """每个会话只保留一份报告，文件以 session_id 命名，重新生成时覆盖"""
    _reports[report.session_id] = report
    _write_json(_reports_dir(), report.session_id, report)
    return report


def get_report(session_id: str) -> Optional[ParentReport]:
    """按会话取已生成的家长报告（仅内存，启动时已全部加载）"""
    return _reports.get(session_id)
