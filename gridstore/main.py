"""Entry point for the grid store HTTP service."""

import time
import uuid

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from common.logging_config import setup_logging
from gridstore.config import GRIDSTORE_HOST, GRIDSTORE_PORT
from gridstore.dependencies import get_grid_store
from gridstore.exceptions import (
    BackingStoreError,
    ChunkNotFoundError,
    ChunkSizeMismatchError,
    GridFileNotFoundError,
    InvalidQueryError,
    UploadAbortedError,
)
from gridstore.routes.file_routes import id_router as file_id_router
from gridstore.routes.file_routes import router as file_router
from gridstore.services.orphan_sweeper import OrphanSweeper

logger = setup_logging('gridstore')

app = FastAPI(
    title="GridStore",
    description="Chunked large-object storage over a document store",
    version="1.0.0"
)

sweeper = None


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

    logger.info(
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration:.3f}s [request_id={request_id}]"
    )

    response.headers["X-Request-ID"] = request_id

    return response


@app.on_event("startup")
async def startup_event():
    """
    Open the store and start the orphan sweep on application startup.
    """
    global sweeper

    logger.info("GridStore service starting up...")

    store = get_grid_store()
    logger.info(f"Store ready [files={store.files.name}] [chunks={store.chunks.name}]")

    sweeper = OrphanSweeper.for_store(store)
    await sweeper.start()


@app.on_event("shutdown")
async def shutdown_event():
    """
    Stop background tasks on application shutdown.
    """
    logger.info("GridStore service shutting down...")

    if sweeper:
        await sweeper.stop()


def _error_response(request: Request, exc: Exception, status_code: int, code: str) -> JSONResponse:
    request_id = getattr(request.state, 'request_id', 'unknown')
    message = f"{type(exc).__name__}: {exc} [request_id={request_id}] path={request.url.path}"
    if status_code >= 500:
        logger.error(message, exc_info=True)
    else:
        logger.warning(message)
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "code": code}
    )


@app.exception_handler(GridFileNotFoundError)
async def file_not_found_handler(request: Request, exc: GridFileNotFoundError):
    return _error_response(request, exc, status.HTTP_404_NOT_FOUND, "FILE_NOT_FOUND")


@app.exception_handler(ChunkNotFoundError)
async def chunk_not_found_handler(request: Request, exc: ChunkNotFoundError):
    return _error_response(request, exc, status.HTTP_500_INTERNAL_SERVER_ERROR, "CHUNK_NOT_FOUND")


@app.exception_handler(ChunkSizeMismatchError)
async def chunk_size_mismatch_handler(request: Request, exc: ChunkSizeMismatchError):
    return _error_response(request, exc, status.HTTP_500_INTERNAL_SERVER_ERROR, "CHUNK_SIZE_MISMATCH")


@app.exception_handler(InvalidQueryError)
async def invalid_query_handler(request: Request, exc: InvalidQueryError):
    return _error_response(request, exc, status.HTTP_400_BAD_REQUEST, "INVALID_QUERY")


@app.exception_handler(UploadAbortedError)
async def upload_aborted_handler(request: Request, exc: UploadAbortedError):
    return _error_response(request, exc, status.HTTP_409_CONFLICT, "UPLOAD_ABORTED")


@app.exception_handler(BackingStoreError)
async def backing_store_handler(request: Request, exc: BackingStoreError):
    return _error_response(request, exc, status.HTTP_503_SERVICE_UNAVAILABLE, "BACKING_STORE_ERROR")


app.include_router(file_router)
app.include_router(file_id_router)


@app.get("/")
async def root():
    """
    Root endpoint for health check.
    """
    return {"message": "GridStore API", "status": "running"}


@app.get("/health")
async def health_check():
    """
    Liveness check. Returns 200 if the service is alive.
    """
    return {"status": "healthy", "service": "gridstore"}


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run(
        "gridstore.main:app",
        host=GRIDSTORE_HOST,
        port=GRIDSTORE_PORT,
    )


if __name__ == "__main__":
    main()
