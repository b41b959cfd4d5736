"""Main FastAPI application for the Michi backend."""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from michi.api.routes.ai_plan import router as ai_plan_router
from michi.api.routes.pathways import router as pathways_router
from michi.api.routes.schedule_blocks import router as schedule_blocks_router
from michi.api.routes.trips import router as trips_router
from michi.api.routes.user_pathways import router as user_pathways_router
from michi.api.routes.user_profile import router as user_profile_router
from michi.core.config import settings
from michi.core.errors import MichiError
from michi.core.logging import configure_logging
from michi.core.middleware import RequestIDMiddleware
from michi.observability.client import init_opik
from michi.observability.tracing import trace

configure_logging(log_level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, version="0.1.0")
app.add_middleware(RequestIDMiddleware)
app.include_router(trips_router)
app.include_router(schedule_blocks_router)
app.include_router(user_pathways_router)
app.include_router(user_profile_router)
app.include_router(ai_plan_router)
app.include_router(pathways_router)


@app.exception_handler(MichiError)
async def handle_michi_error(request: Request, exc: MichiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(HTTPException)
async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"error": "Invalid request body", "details": details})


@app.on_event("startup")
async def startup_observability() -> None:
    """Initialize observability backends after the event loop starts."""
    init_opik()


@app.get("/health", tags=["health"], summary="Readiness probe")
async def health_check(request: Request) -> dict[str, str]:
    """Return a simple status payload so automation can probe the API."""
    with trace("http.health_check", metadata={"route": "/health"}, request_id=request.state.request_id):
        return {"status": "ok"}
