"""应用配置 - 从环境变量读取"""
from pathlib import Path
from pydantic_settings import BaseSettings
from functools import lru_cache

# 支持从项目根目录的 .env 加载（当在 backend/ 下启动时）
_root_env = Path(__file__).resolve().parent.parent.parent / ".env"
_env_file = _root_env if _root_env.exists() else ".env"


class Settings(BaseSettings):
    # 后端
    backend_host: str = "0.0.0.0"
    backend_port: int = 8100
    api_cors_origins: str = "http://localhost:8081,http://127.0.0.1:8081"

    # LLM (OpenAI 兼容)
    llm_api_base: str = "https://api.openai.com/v1"
    llm_api_key: str = ""
    llm_model: str = "gpt-4o"
    llm_timeout: float = 90.0
    llm_temperature: float = 0.7
    outline_max_tokens: int = 2000
    segment_max_tokens: int = 1500

    # 互动故事
    min_choice_points: int = 4  # 少于该数量只记录警告，不报错

    # 故事与会话数据（本地文件存储）
    data_dir: str = "data"

    class Config:
        env_file = _env_file
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()
