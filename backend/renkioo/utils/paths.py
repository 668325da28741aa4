"""项目路径常量，避免因工作目录不同导致文件读写错位。"""
from pathlib import Path

from renkioo.config import get_settings

# .../backend
BACKEND_ROOT = Path(__file__).resolve().parents[2]

# 统一数据目录（相对路径落在 backend/ 下）
_data_dir = Path(get_settings().data_dir)
BACKEND_DATA_DIR = _data_dir if _data_dir.is_absolute() else BACKEND_ROOT / _data_dir
STORIES_DIR = BACKEND_DATA_DIR / "stories"
SESSIONS_DIR = BACKEND_DATA_DIR / "sessions"
REPORTS_DIR = BACKEND_DATA_DIR / "reports"

# 初始化目录
for _p in [BACKEND_DATA_DIR, STORIES_DIR, SESSIONS_DIR, REPORTS_DIR]:
    _p.mkdir(parents=True, exist_ok=True)
