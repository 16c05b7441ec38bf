# This file loads env variables and must thus be imported before anything else.
from . import env_loader  # noqa: F401
from .env_loader import get_current_environment, get_cors_allowed_origins

import os
import logging

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware

from echoboard.models.role import ROLE_INFO, RoleInfo
from .errors import register_error_handlers
from .models import EnvironmentResponse
from .routers import member_router, project_router, user_router

"""FastAPI application setup for the EchoBoard membership directory.

Exposes routes for registering users, creating and archiving projects, managing
project memberships, and checking member permissions. Domain errors are
translated to HTTP responses by the handlers in ``errors``.
"""

logger = logging.getLogger(__name__)

app = FastAPI(title="EchoBoard API")
app.include_router(user_router)
app.include_router(project_router)
app.include_router(member_router)
app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=get_cors_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_error_handlers(app)


# Configure basic logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s - %(filename)s:%(lineno)d",
    datefmt="%Y-%m-%d %H:%M:%S",
)
# Configure the logging for the API itself if the user specifies it.
if "LOG_LEVEL" in os.environ:
    match os.environ["LOG_LEVEL"].upper():
        case "DEBUG":
            log_level = logging.DEBUG
        case "INFO":
            log_level = logging.INFO
        case "WARNING":
            log_level = logging.WARNING
        case "ERROR":
            log_level = logging.ERROR
        case "CRITICAL":
            log_level = logging.CRITICAL
        case _:
            raise ValueError(f"Invalid log level: {os.environ['LOG_LEVEL']}")
    logging.getLogger("echoboard").setLevel(log_level)


@app.get("/roles", response_model=list[RoleInfo])
def read_roles() -> list[RoleInfo]:
    """List the collaboration roles with their display names and descriptions."""
    return list(ROLE_INFO.values())


@app.get("/health")
@app.options("/health")
def health_check(response: Response) -> dict[str, str]:
    """Health check endpoint that returns 200 status with CORS from anywhere."""
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Methods"] = "GET, OPTIONS"
    response.headers["Access-Control-Allow-Headers"] = "*"
    return {"status": "healthy"}


@app.get("/environment", response_model=EnvironmentResponse)
def get_environment() -> EnvironmentResponse:
    """Get the current environment configuration."""
    environment = get_current_environment()
    return EnvironmentResponse(environment=environment)
