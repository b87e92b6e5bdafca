import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from trainsched.api.routes import drafts, establishments, health, schedules, tracks, trainers
from trainsched.core.config import get_settings
from trainsched.core.exceptions import AppError
from trainsched.core.logging import configure_logging
from trainsched.core.middleware import RequestLoggingMiddleware, RequestSizeLimitMiddleware
from trainsched.db.bootstrap import ensure_runtime_schema_compatibility

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging(settings.log_level)
    ensure_runtime_schema_compatibility()
    logger.info("APP STARTED | project=%s", settings.project_name)
    yield


async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "details": exc.details},
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request payload", "details": {"errors": jsonable_encoder(exc.errors())}},
    )


async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning("INTEGRITY ERROR | path=%s | error=%s", request.url.path, exc.orig)
    return JSONResponse(
        status_code=400,
        content={"message": "Scheduling conflict: resource already booked", "details": {}},
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("UNHANDLED ERROR | path=%s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={"message": "Internal server error", "details": {}},
    )


app = FastAPI(title=settings.project_name, lifespan=lifespan)
app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)
app.add_exception_handler(IntegrityError, integrity_error_handler)
app.add_exception_handler(Exception, unhandled_error_handler)

app.add_middleware(RequestSizeLimitMiddleware, max_bytes=settings.max_request_size_bytes)
app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix=settings.api_prefix, tags=["health"])
# Draft paths are registered first so /schedules/drafts never reaches /schedules/{schedule_id}.
app.include_router(drafts.router, prefix=f"{settings.api_prefix}/schedules", tags=["drafts"])
app.include_router(schedules.router, prefix=f"{settings.api_prefix}/schedules", tags=["schedules"])
app.include_router(trainers.router, prefix=f"{settings.api_prefix}/trainers", tags=["trainers"])
app.include_router(establishments.router, prefix=f"{settings.api_prefix}/establishments", tags=["establishments"])
app.include_router(tracks.router, prefix=f"{settings.api_prefix}/tracks", tags=["tracks"])
