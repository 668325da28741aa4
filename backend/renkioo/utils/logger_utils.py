"""统一日志格式工具"""
import time
from typing import Literal, Callable
from functools import wraps
import logging


def log_llm_call(
    logger: logging.Logger,
    stage: Literal["大纲规划", "段落生成"],
    model: str,
    language: str,
    **kwargs
) -> None:
    """
    记录 LLM 调用日志

    Args:
        logger: 日志记录器
        stage: 调用阶段
        model: 模型名称
        language: 故事语言（tr / en）
        **kwargs: 额外的日志信息（如 segment_id, child_age 等）

    Examples:
        >>> log_llm_call(logger, "段落生成", "gpt-4o", "tr", segment_id="seg_1_0")
        [段落生成] 模型: gpt-4o, 语言: tr, segment_id=seg_1_0
    """
    extra_info = ", ".join(f"{k}={v}" for k, v in kwargs.items() if v is not None)
    extra_str = f", {extra_info}" if extra_info else ""

    logger.info(f"[{stage}] 模型: {model}, 语言: {language}{extra_str}")


def timed_execution(service_type: str):
    """
    装饰器：自动记录函数执行时间

    Args:
        service_type: 服务类型名称

    Examples:
        @timed_execution("段落生成")
        async def generate_segment(...):
            ...
    """
    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            start_time = time.time()
            logger = logging.getLogger(func.__module__)

            try:
                result = await func(*args, **kwargs)
                elapsed = time.time() - start_time
                logger.info(f"[{service_type}] ⏱️ 执行耗时: {elapsed:.2f}s")
                return result
            except Exception as e:
                elapsed = time.time() - start_time
                logger.error(
                    f"[{service_type}] ❌ 执行失败，耗时: {elapsed:.2f}s, 错误: {e}",
                    exc_info=True
                )
                raise

        return wrapper
    return decorator
