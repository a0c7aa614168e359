import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from starlette.exceptions import HTTPException as StarletteHTTPException

from chat_proxy.config import settings, warn_if_unconfigured

logger = logging.getLogger(__name__)
from chat_proxy.models.response import ErrorBody
from chat_proxy.providers.openai import OpenAIProvider
from chat_proxy.routes import chat, health
from chat_proxy.utils.cors import CORSHeadersMiddleware
from chat_proxy.utils.exceptions import MethodNotAllowed, ProxyError

# Warn about a missing credential before the app starts
warn_if_unconfigured()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle events"""
    # Startup: build the upstream provider once; requests share its client
    app.state.provider = None
    if settings.is_configured():
        app.state.provider = OpenAIProvider(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            temperature=settings.temperature,
            base_url=settings.openai_base_url,
        )
        logger.info(f"Upstream provider ready: {settings.openai_model} at {settings.openai_base_url}")

    yield

    # Shutdown: Cleanup resources
    if app.state.provider is not None:
        await app.state.provider.cleanup()
        app.state.provider = None


app = FastAPI(
    title="Graxybot Chat Proxy",
    description="Server-side proxy for chat completions with image attachments",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS headers on every response, including errors and OPTIONS
app.add_middleware(CORSHeadersMiddleware, allow_origin=settings.cors_allow_origin)


def error_response(exc: ProxyError, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorBody(error=exc.error, detail=exc.detail).model_dump(exclude_none=True),
        headers=headers,
    )


@app.exception_handler(ProxyError)
async def proxy_error_handler(request: Request, exc: ProxyError):
    return error_response(exc)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render routing errors (404, 405) in the same {error} shape."""
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return error_response(MethodNotAllowed(), headers=exc.headers)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorBody(error=str(exc.detail)).model_dump(exclude_none=True),
        headers=exc.headers,
    )


# Include routers
app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(chat.router, prefix="/api", tags=["chat"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port, log_level="debug" if settings.debug else "info")
