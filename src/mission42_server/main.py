from __future__ import annotations

import logging
import sys

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api import router
from .config import get_settings

# Configure logging for the entire mission42_server package
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logging.getLogger("mission42_server").setLevel(logging.INFO)

logger = logging.getLogger(__name__)

settings = get_settings()


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = "Method not allowed" if exc.status_code == 405 else str(exc.detail)
    if exc.status_code == 405:
        logger.info("[CHAT] Invalid method: %s %s", request.method, request.url.path)
    return JSONResponse(status_code=exc.status_code, content={"error": message}, headers=exc.headers)


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "Invalid request"})


def create_app() -> FastAPI:
    app = FastAPI(
        title="Mission42 Server",
        description="Chat back-end that turns a confirmed conversation into a satellite constellation",
        version="0.1.0",
        debug=settings.debug,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.include_router(router)
    logger.info(
        "Mission42 Server configured (strategy=%s, model=%s)",
        settings.extraction_strategy,
        settings.gemini_model,
    )
    return app


app = create_app()
