import logging
from contextlib import asynccontextmanager

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exception_handlers import http_exception_handler

import sentry_sdk

from src.config import config
from src.db import database, engine, metadata
from src.log_config import configure_logging

from src.entrypoints.routers.post import router as post_router
from src.entrypoints.routers.comment import router as comment_router

if config.SENTRY_DSN:
    sentry_sdk.init(
        dsn=config.SENTRY_DSN,
        send_default_pii=True,
    )

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    metadata.create_all(engine)
    await database.connect()
    yield
    await database.disconnect()

app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.add_middleware(CorrelationIdMiddleware)

app.include_router(post_router)
app.include_router(comment_router)

@app.exception_handler(HTTPException)
async def http_exception_handle_logging(request, exc):
    logger.error("HTTPException: %s %s", exc.status_code, exc.detail)
    return await http_exception_handler(request, exc)

@app.get("/")
async def root():
    return {"message": "Server is running"}
