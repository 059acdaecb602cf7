"""
FastAPI application entry point.
Configures routes, middleware, and lifecycle events.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from todays_horoscope import __version__
from todays_horoscope.config import settings
from todays_horoscope.exceptions import GenerationFailed, InvalidInput
from todays_horoscope.logging_config import configure_logging
from todays_horoscope.redis import close_redis_client, create_redis_client
from todays_horoscope.services.cache_store import CacheStore
from todays_horoscope.services.horoscope_service import build_horoscope_service
from todays_horoscope.services.llm_client import OpenAILanguageModel

from todays_horoscope.api.horoscope import router as horoscope_router
from todays_horoscope.api.cron import router as cron_router
from todays_horoscope.api.admin.debug import router as debug_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifecycle manager."""
    # Startup
    configure_logging()
    logger.info("Starting up Today's Horoscope...")

    redis_client = create_redis_client(settings.redis_url)
    cache = CacheStore(redis_client, namespace=settings.cache_namespace)
    model = OpenAILanguageModel(settings)
    if not model.configured:
        logger.warning("OPENAI_API_KEY not set. Generation requests will fail.")

    app.state.cache_store = cache
    app.state.language_model = model
    app.state.horoscope_service = build_horoscope_service(cache, model, settings)

    yield

    # Shutdown
    await model.close()
    await close_redis_client(redis_client)
    logger.info("Shutting down...")


app = FastAPI(
    title="Today's Horoscope",
    description="Cached, AI-generated daily, weekly and monthly horoscopes",
    version=__version__,
    lifespan=lifespan,
    debug=settings.debug,
)


@app.exception_handler(InvalidInput)
async def invalid_input_handler(request: Request, exc: InvalidInput):
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": exc.message},
    )


@app.exception_handler(GenerationFailed)
async def generation_failed_handler(request: Request, exc: GenerationFailed):
    logger.error(f"Generation failed for {exc.sign or 'unknown sign'}: {exc.message}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": exc.message},
    )


# Global Exception Handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal Server Error"},
    )


# CORS middleware
origins = list(settings.cors_origins)
if settings.is_development:
    origins.append("*")

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "env": settings.app_env,
    }


app.include_router(horoscope_router)
app.include_router(cron_router)
app.include_router(debug_router)
