import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from renkioo.config import get_settings
from renkioo.routers import interactive_story
from renkioo.utils.store import load_from_disk

# 配置日志
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用启动和关闭时的生命周期管理"""
    logger.info("========== 应用启动 ==========")
    load_from_disk()
    logger.info("========== 应用启动完成 ==========")
    yield
    logger.info("========== 应用关闭 ==========")


app = FastAPI(
    title="Renkioo 互动故事 API",
    version="0.1.0",
    lifespan=lifespan,
)
settings = get_settings()
allowed_origins = []
for origin in settings.api_cors_origins.split(","):
    normalized = origin.strip().rstrip("/")
    if normalized:
        allowed_origins.append(normalized)

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(interactive_story.router)


@app.get("/")
def root():
    return {"message": "Renkioo 互动故事 API", "docs": "/docs"}


@app.get("/health")
def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("renkioo.main:app", host=settings.backend_host, port=settings.backend_port)
