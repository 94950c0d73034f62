"""
Hai Backend - FastAPI Application Entry Point

Purpose: Wires the entity routers, the error mapping and logging together.

Testing:
    uvicorn hai.main:app --reload --port 8080
    curl http://localhost:8080/health

AWS Deployment Notes:
    - Runs on Lambda behind API Gateway (handler: hai.main.lambda_handler)
    - Structured logging for CloudWatch
"""

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from mangum import Mangum
import json
import logging
import sys
from typing import Dict, Any

from hai.config import settings, validate_settings, print_config_summary
from hai.api.v1 import guests, messages, properties, reservations, staff, tasks
from hai.dependencies import get_db_service
from hai.errors import ConflictError, NotFoundError, StoreError, ValidationError
from hai.utils.dates import format_timestamp, utc_now


class JSONFormatter(logging.Formatter):
    """One JSON object per line for CloudWatch"""

    def format(self, record):
        log_data = {
            "timestamp": format_timestamp(utc_now()),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


def setup_logging():
    """Configure root logging from LOG_LEVEL / LOG_FORMAT"""
    handler = logging.StreamHandler(sys.stdout)
    if settings.LOG_FORMAT == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))

    logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL), handlers=[handler], force=True)

    for noisy in ('botocore', 'boto3', 'urllib3'):
        logging.getLogger(noisy).setLevel(logging.WARNING)


setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Validate settings and check the table before serving"""
    validate_settings()
    if settings.DEBUG:
        print_config_summary()

    db_service = app.dependency_overrides.get(get_db_service, get_db_service)()
    await db_service.verify_table()

    logger.info(f"Hai Backend ready - Environment: {settings.ENVIRONMENT}")
    yield


app = FastAPI(
    title="Hai API",
    description="Property management data service: properties, guests, reservations, messages, staff and tasks",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def server_error_response(exc: Exception, **debug: Any) -> JSONResponse:
    """500 body; the exception is only exposed in debug mode"""
    content: Dict[str, Any] = {"error": "Internal Server Error"}
    if settings.DEBUG:
        content.update(detail=str(exc), type=type(exc).__name__, **debug)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies and query params are client errors (400)"""
    logger.warning(f"Validation error: {exc.errors()}")
    details = [
        f"{'.'.join(str(part) for part in error['loc'] if part != 'body')}: {error['msg']}"
        for error in exc.errors()
    ]
    return error_response(status.HTTP_400_BAD_REQUEST, "; ".join(details) or "Invalid request")


@app.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError):
    logger.warning(f"Validation error: {exc}")
    return error_response(status.HTTP_400_BAD_REQUEST, str(exc))


@app.exception_handler(NotFoundError)
async def not_found_exception_handler(request: Request, exc: NotFoundError):
    return error_response(status.HTTP_404_NOT_FOUND, str(exc))


@app.exception_handler(ConflictError)
async def conflict_exception_handler(request: Request, exc: ConflictError):
    logger.warning(f"Conflict: {exc}")
    return error_response(status.HTTP_409_CONFLICT, str(exc))


@app.exception_handler(StoreError)
async def store_exception_handler(request: Request, exc: StoreError):
    logger.error(f"Store error ({exc.code or type(exc).__name__}): {exc}")
    return server_error_response(exc, retryable=exc.retryable)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return server_error_response(exc)


# =============================================================================
# ROUTES
# =============================================================================

@app.get("/health", tags=["Health"])
async def health_check() -> Dict[str, Any]:
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "version": "1.0.0",
        "database": "dynamodb-local" if settings.USE_DYNAMODB_LOCAL else "dynamodb",
        "table": settings.DYNAMODB_TABLE_NAME,
        "date_format": settings.API_DATE_FORMAT,
    }


for router, tag in (
    (properties.router, "Properties"),
    (guests.router, "Guests"),
    (reservations.router, "Reservations"),
    (messages.router, "Messages"),
    (staff.router, "Staff"),
    (tasks.router, "Tasks"),
):
    app.include_router(router, prefix=settings.API_PREFIX, tags=[tag])


lambda_handler = Mangum(app)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("hai.main:app", host="0.0.0.0", port=8080, reload=settings.DEBUG)
