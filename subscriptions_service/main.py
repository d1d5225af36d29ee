"""
FastAPI application factory
"""
import logging
import random
import time
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from subscriptions_service.config import get_settings
from subscriptions_service.infrastructure.db.session import check_db_connection
from subscriptions_service.api.v1 import subscriptions

logging.basicConfig(
    level=get_settings().LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)

TRACE_HEADER = "X-Trace-ID"


class ErrorLoggingMiddleware(BaseHTTPMiddleware):
    """Catches ALL exceptions including sync routes"""

    async def dispatch(self, request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            tb_str = traceback.format_exc()
            logger.error(f"\n{'='*60}\nERROR on {request.method} {request.url.path}\n{tb_str}{'='*60}")
            return Response(content=f"Internal Server Error: {exc}", status_code=500)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Assigns a trace id, echoes it in X-Trace-ID and logs every request"""

    async def dispatch(self, request, call_next):
        trace_id = request.headers.get(TRACE_HEADER) or str(random.getrandbits(63))
        request.state.trace_id = trace_id

        start = time.perf_counter()
        response = await call_next(request)
        latency_ms = int((time.perf_counter() - start) * 1000)

        response.headers[TRACE_HEADER] = trace_id
        logger.info(
            "HTTP request trace_id=%s method=%s path=%s status=%d latency_ms=%d client_ip=%s",
            trace_id,
            request.method,
            request.url.path,
            response.status_code,
            latency_ms,
            request.client.host if request.client else "-",
        )
        return response


def create_app() -> FastAPI:
    """
    Application factory - создаёт и настраивает FastAPI приложение

    Returns:
        Настроенный FastAPI app
    """
    settings = get_settings()

    app = FastAPI(
        title="Subscriptions Service",
        debug=settings.DEBUG,
    )

    # Middleware: the last added runs first
    app.add_middleware(ErrorLoggingMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    # Body / query binding errors are reported as 400
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info("Validation error on %s %s: %s", request.method, request.url.path, exc.errors())
        return JSONResponse(
            status_code=400,
            content={"detail": [{"loc": e["loc"], "msg": e["msg"]} for e in exc.errors()]},
        )

    # Routers
    app.include_router(subscriptions.router)

    # Health checks
    @app.get("/health", response_class=PlainTextResponse, tags=["system"])
    def health():
        """Health check endpoint"""
        return "ok"

    @app.get("/ready", response_class=PlainTextResponse, tags=["system"])
    def ready():
        """Readiness check endpoint (проверяет доступность БД)"""
        if not check_db_connection():
            return PlainTextResponse("database unavailable", status_code=503)
        return "ok"

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "subscriptions_service.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.DEBUG,
    )
