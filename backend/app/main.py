"""FastAPI application for the plan coaching backend."""
from fastapi import FastAPI, Request

from app.api.routes.feedback import router as feedback_router
from app.api.routes.feedback_capture import router as feedback_capture_router
from app.api.routes.plans import router as plans_router
from app.api.routes.sessions import router as sessions_router
from app.core.config import settings
from app.core.logging import configure_logging
from app.core.middleware import RequestIDMiddleware
from app.observability.client import init_opik
from app.observability.tracing import trace

configure_logging(log_level=settings.log_level, debug=settings.debug)

app = FastAPI(title=settings.app_name, version="0.1.0")
app.add_middleware(RequestIDMiddleware)
app.include_router(plans_router)
app.include_router(sessions_router)
app.include_router(feedback_router)
app.include_router(feedback_capture_router)


@app.on_event("startup")
async def startup_observability() -> None:
    init_opik()


@app.get("/health", tags=["health"], summary="Readiness probe")
async def health_check(request: Request) -> dict[str, str]:
    with trace("http.health_check", metadata={"route": "/health"}, request_id=request.state.request_id):
        return {"status": "ok"}
