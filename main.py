"""
Credential Gate — application entry point.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import register_exception_handlers, register_middleware
from api.routes import router as api_router
from auth.gate import AuthGate
from auth.jwt import TokenIssuer, resolve_token_secret
from auth.routes import router as auth_router
from config.settings import Settings, config
from database.store import CredentialStore

logging.basicConfig(
    level=logging.DEBUG if config.debug else getattr(logging, config.log_level.upper(), logging.INFO),
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("sqlalchemy.engine", "aiosqlite", "asyncio"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or config

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        description="Username/email + password authentication with signed session tokens.",
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    )

    register_middleware(app)
    register_exception_handlers(app, debug=settings.debug)

    store = CredentialStore.from_url(
        settings.database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_recycle=settings.db_pool_recycle,
    )
    tokens = TokenIssuer(resolve_token_secret(settings), settings.jwt_expiry_seconds)
    app.state.settings = settings
    app.state.store = store
    app.state.gate = AuthGate(
        store,
        tokens,
        bcrypt_rounds=settings.bcrypt_rounds,
        timing_floor_ms=settings.auth_timing_floor_ms,
    )

    # Routes
    app.include_router(auth_router, prefix="/auth")
    app.include_router(api_router)

    @app.on_event("startup")
    async def on_startup():
        logger.info("Initialising credential store…")
        await store.create_schema()
        logger.info(
            "Application ready (environment=%s, bcrypt rounds=%d, timing floor=%dms)",
            settings.environment, settings.bcrypt_rounds, settings.auth_timing_floor_ms,
        )

    @app.on_event("shutdown")
    async def on_shutdown():
        await store.close()

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
