import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.dependencies.http import close_http_client
from app.dependencies.redis import close_redis_client
from app.routers import frames, og, users

logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Farcaster Anniversary Frame")
    logger.debug("Debug mode: %s", settings.DEBUG)

    yield

    # Shutdown: close shared upstream clients
    logger.info("Shutting down Farcaster Anniversary Frame")
    await close_http_client()
    await close_redis_client()
    logger.info("HTTP and Redis cleanup complete")


app = FastAPI(
    title="Farcaster Anniversary Frame",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
logger.debug("CORS configured with origins: %s", settings.CORS_ORIGINS)

app.include_router(frames.router)
app.include_router(og.router)
app.include_router(users.router)
logger.debug("Routers registered: /, /frames, /api/og, /api/farcaster-user")


@app.get("/health")
def health():
    return {"status": "healthy"}
