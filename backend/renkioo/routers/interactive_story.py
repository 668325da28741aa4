"""互动故事 API：生成故事、做选择、查询/放弃会话、家长报告、特质信息"""
import logging
from fastapi import APIRouter, HTTPException
from openai import APIError
from renkioo.constants.traits import TRAIT_DEFINITIONS, get_all_traits, get_trait_info
from renkioo.models.story import GenerateInteractiveStoryRequest, Language
from renkioo.models.session import MakeChoiceRequest, ParentReportRequest
from renkioo.services.errors import (
    GenerationParseError,
    ReportNotReadyError,
    SessionCompletedError,
    SessionNotFoundError,
    UnknownChoicePointError,
    UnknownOptionError,
)
from renkioo.services.parent_report import generate_parent_report
from renkioo.services.session_service import (
    abandon_session,
    get_session_state,
    make_choice,
    start_story,
)
from renkioo.utils.store import get_report, list_stories

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/interactive-story", tags=["interactive-story"])


def _to_http_error(e: Exception) -> HTTPException:
    """把服务层异常翻译为 HTTP 状态码。"""
    if isinstance(e, SessionNotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, (UnknownChoicePointError, UnknownOptionError)):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, (SessionCompletedError, ReportNotReadyError)):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, GenerationParseError):
        return HTTPException(status_code=502, detail=f"故事生成失败，请重试: {e}")
    if isinstance(e, APIError):
        return HTTPException(status_code=502, detail=f"LLM 服务异常: {e}")
    logger.error(f"[API] ❌ 未预期的错误: {type(e).__name__}: {e}", exc_info=True)
    return HTTPException(status_code=500, detail=str(e))


@router.post("/generate")
async def generate(body: GenerateInteractiveStoryRequest):
    """生成新的互动故事并开启会话，只返回起始段与第一个选择点。"""
    logger.info(f"[API] 🚀 生成互动故事: age={body.child_age}, language={body.language}")
    try:
        result = await start_story(body)
    except Exception as e:
        raise _to_http_error(e)
    return result.model_dump(mode="json")


@router.post("/choice")
async def choice(body: MakeChoiceRequest):
    """做出选择，生成并返回下一段。"""
    logger.info(f"[API] 🎯 选择: session={body.session_id}, {body.choice_point_id}/{body.option_id}")
    try:
        result = await make_choice(body.session_id, body.choice_point_id, body.option_id)
    except Exception as e:
        raise _to_http_error(e)
    return result.model_dump(mode="json")


@router.get("/session/{session_id}")
async def session_state(session_id: str):
    try:
        state = get_session_state(session_id)
    except Exception as e:
        raise _to_http_error(e)
    return state.model_dump(mode="json")


@router.post("/session/{session_id}/abandon")
async def abandon(session_id: str):
    try:
        session = abandon_session(session_id)
    except Exception as e:
        raise _to_http_error(e)
    return {"ok": True, "session_id": session.id, "status": session.status}


@router.post("/session/{session_id}/report")
async def create_report(session_id: str, body: ParentReportRequest | None = None):
    """为已读完的会话生成家长报告。"""
    body = body or ParentReportRequest()
    try:
        report = generate_parent_report(session_id, child_name=body.child_name, language=body.language)
    except Exception as e:
        raise _to_http_error(e)
    return report.model_dump(mode="json")


@router.get("/session/{session_id}/report")
async def read_report(session_id: str):
    """获取已生成的家长报告。"""
    report = get_report(session_id)
    if report is None:
        raise HTTPException(status_code=404, detail="报告不存在")
    return report.model_dump(mode="json")


@router.get("/list")
async def list_interactive_stories():
    """获取所有互动故事摘要（按创建时间倒序）。"""
    return {"stories": list_stories()}


@router.get("/traits")
async def list_traits(language: Language = "tr"):
    return {"traits": get_all_traits(language)}


@router.get("/traits/{trait}")
async def trait_info(trait: str, language: Language = "tr"):
    if trait not in TRAIT_DEFINITIONS:
        raise HTTPException(status_code=404, detail=f"特质不存在: {trait}")
    return {"id": trait, **get_trait_info(trait, language)}
