from dotenv import load_dotenv
load_dotenv()  # Load .env file
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from docstore.config import settings
from docstore.core.db import get_engine, init_db
from docstore.core.schemas import (
    DuplicateFileParams,
    DuplicateProjectParams,
    FileResult,
    MoveFilesParams,
    MoveProjectParams,
    ProjectResult,
)
from docstore.management import ManagementService
from docstore.observability.logging_config import get_logger, setup_logging
from docstore.resilience.errors import (
    AuthorizationError,
    DocstoreError,
    NotFoundError,
    StorageError,
    ValidationError,
)

setup_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Creates missing tables only; existing ones are left alone
    init_db(get_engine())
    logger.info("Database initialized.")
    yield


app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)

# Initialize Limiter
limiter = Limiter(key_func=get_remote_address)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(SlowAPIMiddleware)

service = ManagementService()

# --- Error mapping ---

STATUS_BY_ERROR = {
    AuthorizationError: 403,
    ValidationError: 400,
    NotFoundError: 404,
    StorageError: 500,
}


@app.exception_handler(DocstoreError)
async def docstore_error_handler(request: Request, exc: DocstoreError):
    status = next((code for cls, code in STATUS_BY_ERROR.items() if isinstance(exc, cls)), 500)
    if status >= 500:
        logger.error(f"Internal failure on {request.url.path}: {exc.code}")
    return JSONResponse(status_code=status, content=exc.to_dict())


# --- Endpoints ---

@app.get("/api/health")
def health_check():
    return {"status": "ok", "version": settings.APP_VERSION}


@app.post("/api/rpc/mutation/duplicate-file", response_model=FileResult)
@limiter.limit(settings.RATE_LIMIT_MUTATIONS)
def duplicate_file(request: Request, params: DuplicateFileParams):
    return service.duplicate_file(params.profile_id, params.file_id)


@app.post("/api/rpc/mutation/duplicate-project", response_model=ProjectResult)
@limiter.limit(settings.RATE_LIMIT_MUTATIONS)
def duplicate_project(request: Request, params: DuplicateProjectParams):
    return service.duplicate_project(params.profile_id, params.project_id)


@app.post("/api/rpc/mutation/move-files", status_code=204)
@limiter.limit(settings.RATE_LIMIT_MUTATIONS)
def move_files(request: Request, params: MoveFilesParams):
    service.move_files(params.profile_id, params.ids, params.project_id)


@app.post("/api/rpc/mutation/move-project", status_code=204)
@limiter.limit(settings.RATE_LIMIT_MUTATIONS)
def move_project(request: Request, params: MoveProjectParams):
    service.move_project(params.profile_id, params.project_id, params.team_id)


if __name__ == "__main__":
    uvicorn.run("server:app", host="0.0.0.0", port=settings.PORT, reload=False)
