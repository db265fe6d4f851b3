"""FastAPI application entrypoint. No business logic; only wiring, middleware and error handlers."""

from dotenv import load_dotenv

load_dotenv()

import logging
from typing import Annotated

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1 import router as v1_router
from app.api.v1.auth import get_optional_user
from app.core.config import settings
from app.core.handlers import register_exception_handlers
from app.schemas.auth import CurrentUser
from app.schemas.common import Envelope
from app.schemas.health import ApiIndex

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)

API_VERSION = "1.0.0"

app = FastAPI(
    title="Entry Management API",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else settings.CORS_ORIGINS,
    allow_credentials=settings.APP_ENV != "dev",
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
)

register_exception_handlers(app)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/", response_model=Envelope[ApiIndex], response_model_exclude_none=True)
def root(
    user: Annotated[CurrentUser | None, Depends(get_optional_user)],
) -> Envelope[ApiIndex]:
    """Root route for discovery; echoes the caller's identity when a valid token is sent."""
    prefix = settings.API_V1_PREFIX
    return Envelope(
        message="Entry Management Server API",
        data=ApiIndex(
            name="Entry Management API",
            version=API_VERSION,
            endpoints={
                "health": f"{prefix}/health",
                "auth": f"{prefix}/auth",
                "entries": f"{prefix}/entries",
            },
            user=user,
        ),
    )
