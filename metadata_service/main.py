"""Entry point for the metadata service."""

import time
import uuid

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from common.logging_config import setup_logging
from metadata_service.config import SERVICE_HOST, SERVICE_PORT
from metadata_service.database import init_database
from metadata_service.exceptions import (
    MetadataServiceError,
    NotFoundError,
    AccessDeniedError,
    InvalidArgumentError,
    InvalidTransitionError,
    ConflictError,
)
from metadata_service.routes.admin_routes import router as admin_router
from metadata_service.routes.file_routes import router as file_router

logger = setup_logging('metadata_service')

app = FastAPI(
    title="File Metadata Service",
    description="Ownership-scoped file metadata records with a processing lifecycle",
    version="1.0.0"
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Middleware to log all HTTP requests and responses.
    """
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()

    logger.info(f"Request started: {request.method} {request.url.path} [request_id={request_id}]")

    response = await call_next(request)

    duration = time.time() - start_time
    user_id = getattr(request.state, 'user_id', None)

    logger.info(
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration:.3f}s "
        f"[request_id={request_id}] [user_id={user_id or 'anonymous'}]"
    )

    response.headers["X-Request-ID"] = request_id

    return response


@app.on_event("startup")
async def startup_event():
    """
    Initialize database on application startup.
    """
    logger.info("Metadata service starting up...")
    init_database()
    logger.info("Database initialized")


def _error_response(request: Request, exc: Exception, status_code: int, code: str) -> JSONResponse:
    request_id = getattr(request.state, 'request_id', 'unknown')
    user_id = getattr(request.state, 'user_id', 'unknown')
    logger.warning(
        f"{type(exc).__name__}: {exc} [request_id={request_id}] [user_id={user_id}] path={request.url.path}"
    )
    return JSONResponse(status_code=status_code, content={"detail": str(exc), "code": code})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return _error_response(request, exc, status.HTTP_404_NOT_FOUND, "NOT_FOUND")


@app.exception_handler(AccessDeniedError)
async def access_denied_handler(request: Request, exc: AccessDeniedError):
    return _error_response(request, exc, status.HTTP_403_FORBIDDEN, "ACCESS_DENIED")


@app.exception_handler(InvalidArgumentError)
async def invalid_argument_handler(request: Request, exc: InvalidArgumentError):
    return _error_response(request, exc, status.HTTP_400_BAD_REQUEST, "INVALID_ARGUMENT")


@app.exception_handler(InvalidTransitionError)
async def invalid_transition_handler(request: Request, exc: InvalidTransitionError):
    return _error_response(request, exc, status.HTTP_409_CONFLICT, "INVALID_TRANSITION")


@app.exception_handler(ConflictError)
async def conflict_handler(request: Request, exc: ConflictError):
    return _error_response(request, exc, status.HTTP_409_CONFLICT, "CONFLICT")


@app.exception_handler(MetadataServiceError)
async def metadata_service_exception_handler(request: Request, exc: MetadataServiceError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(
        f"Unhandled service error: {exc} [request_id={request_id}] path={request.url.path}",
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc), "code": "INTERNAL_ERROR"}
    )


app.include_router(file_router)
app.include_router(admin_router)


@app.get("/")
async def root():
    """
    Root endpoint for health check.
    """
    return {"message": "File Metadata Service API", "status": "running"}


@app.get("/health")
async def health_check():
    """
    Health check endpoint for container probes.
    """
    return {"status": "healthy", "service": "metadata_service"}


@app.get("/ready")
async def ready_check():
    """
    Readiness check endpoint. Verifies database connectivity.
    """
    from metadata_service.database import get_db_connection

    try:
        with get_db_connection() as conn:
            conn.execute("SELECT 1 FROM files LIMIT 1")
        db_status = "ok"
    except Exception as e:
        db_status = f"error: {e}"

    ready = db_status == "ok"
    status_code = status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(
        status_code=status_code,
        content={"ready": ready, "database": db_status}
    )


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run(
        "metadata_service.main:app",
        host=SERVICE_HOST,
        port=SERVICE_PORT,
    )


if __name__ == "__main__":
    main()
