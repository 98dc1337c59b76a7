import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from pollu_tracker.controllers.pollution_controller import PollutionService
from pollu_tracker.core.config import get_settings
from pollu_tracker.core.dependencies import get_pollution_service
from pollu_tracker.core.errors import PollutionError
from pollu_tracker.core.logging_config import configure_logging
from pollu_tracker.core.responses import JSONUTF8Response, message_response
from pollu_tracker.routes.health import router as health_router
from pollu_tracker.routes.pollutions import router as pollutions_router

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,POST,PUT,DELETE,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info(
        "Pollution API ready on http://%s:%s/api/pollutions (storage: %s)",
        settings.api_host,
        settings.api_port,
        settings.storage_path or "memory",
    )
    yield
    logger.info("Pollution API shutting down")


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(PollutionError)
    async def pollution_error_handler(request: Request, exc: PollutionError):
        return message_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if any(error.get("type") == "json_invalid" for error in errors):
            return message_response(400, "Invalid JSON body")
        loc = errors[0].get("loc", ()) if errors else ()
        field = loc[-1] if loc else "body"
        return message_response(400, f"Invalid field: {field}")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            message = "Endpoint not found"
        elif exc.status_code == 405:
            message = f"Method {request.method} not supported"
        else:
            message = str(exc.detail)
        return message_response(exc.status_code, message, headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return message_response(500, "Internal server error", headers=CORS_HEADERS)


def create_app(service: Optional[PollutionService] = None) -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="PolluTracker API",
        version="1.0.0",
        lifespan=lifespan,
        default_response_class=JSONUTF8Response,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.middleware("http")
    async def cors_headers(request: Request, call_next):
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=CORS_HEADERS)
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    _register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(pollutions_router)

    if service is not None:
        app.dependency_overrides[get_pollution_service] = lambda: service

    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    run()
