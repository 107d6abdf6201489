"""
DevConnector API — application entry point.
"""

from __future__ import annotations

import logging
import pathlib
import sys

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from pymongo.errors import PyMongoError

from api.errors import register_exception_handlers
from api.middleware import register_middleware
from api.posts import router as posts_router
from api.profile import router as profile_router
from api.users import router as users_router
from auth.routes import router as auth_router
from config.settings import config
from database.session import close_db, connect_db

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("httpcore", "httpx", "pymongo", "urllib3"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="DevConnector API",
        version="1.0.0",
        description="Developer profiles, posts, likes and comments.",
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)
    register_exception_handlers(app)

    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    async def root() -> str:
        return "API Running"

    # Routes
    app.include_router(users_router, prefix="/api/users")
    app.include_router(auth_router, prefix="/api/auth")
    app.include_router(profile_router, prefix="/api/profile")
    app.include_router(posts_router, prefix="/api/posts")

    frontend_dir = pathlib.Path(__file__).resolve().parent / "frontend"
    if frontend_dir.is_dir():
        app.mount("/app", StaticFiles(directory=str(frontend_dir), html=True), name="frontend")

    @app.on_event("startup")
    async def on_startup():
        logger.info("Connecting to MongoDB…")
        try:
            await connect_db()
        except PyMongoError as exc:
            logger.critical("Could not connect to MongoDB at startup: %s", exc)
            raise SystemExit(1) from exc
        logger.info("Application ready to accept requests.")

    @app.on_event("shutdown")
    async def on_shutdown():
        close_db()

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
