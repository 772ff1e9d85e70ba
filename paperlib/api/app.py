"""FastAPI server for Paper Library"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from paperlib.api.dependencies import get_gateway
from paperlib.api.routes.apps import router as apps_router
from paperlib.api.routes.health import router as health_router
from paperlib.api.routes.knowledge import router as knowledge_router
from paperlib.api.routes.llm import router as llm_router
from paperlib.config import API_HOST, API_PORT, APP_VERSION
from paperlib.observability.logging import get_logger
from paperlib.observability.telemetry import counter

# Load environment variables from .env file
load_dotenv()

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Probe the inference server once so the first request sees a real status."""
    gateway = app.dependency_overrides.get(get_gateway, get_gateway)()
    online = gateway.check_status()
    logger.info("Inference server at %s is %s", gateway.endpoint, "online" if online else "offline")
    yield


app = FastAPI(title="Paper Library API", version=APP_VERSION, lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Report invalid fields without echoing request content.

    Side Effects:
        - Logs the validation errors
        - Increments api.validation_errors
    """
    logger.warning("Validation error on %s: %s", request.url.path, exc.errors())
    counter("api.validation_errors")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": "Invalid request format. Please check your request and try again.",
            "error_count": len(exc.errors()),
            "invalid_fields": [str(err["loc"][-1]) for err in exc.errors()],
        },
    )


app.include_router(health_router)
app.include_router(apps_router)
app.include_router(knowledge_router)
app.include_router(llm_router)


def main() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    uvicorn.run("paperlib.api.app:app", host=API_HOST, port=API_PORT)


if __name__ == "__main__":
    main()
