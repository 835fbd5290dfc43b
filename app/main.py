import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.core.config import get_settings
from app.core.exceptions import ChequeEngineError, LockedError, PersistenceError, ValidationError
from app.core.logging import setup_logging
from app.api import api_router

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Cheque Approval API starting (%s)", settings.ENVIRONMENT)
    yield


app = FastAPI(title="Cheque Approval API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


def _error_response(status_code: int, exc: ChequeEngineError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error_code": exc.error_code, "details": exc.details},
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return _error_response(400, exc)


@app.exception_handler(LockedError)
async def locked_error_handler(request: Request, exc: LockedError):
    return _error_response(409, exc)


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    logger.error("Persistence failure on %s: %s", request.url.path, exc.message)
    return _error_response(503, exc)


@app.get("/health")
async def health():
    return {"status": "ok"}
