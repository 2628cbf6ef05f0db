"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from casebuddy.auth import auth_backend, fastapi_users
from casebuddy.config import settings
from casebuddy.db import init_db
from casebuddy.routers import admin, cases, feedback, health, usage
from casebuddy.schemas.users import UserCreate, UserRead, UserUpdate
from casebuddy.utils.logging_config import setup_endpoint_logging, setup_logging
from casebuddy.utils.middleware import setup_middleware

logger = logging.getLogger(__name__)

setup_logging()

setup_endpoint_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting application")
    await init_db()
    yield
    logger.info("Shutting down application")


app = FastAPI(
    title="CaseBuddy",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.api.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_middleware(app)

app.include_router(feedback.router)
app.include_router(usage.router)
app.include_router(cases.router)
app.include_router(health.router)
app.include_router(admin.router)

# Include FastAPI Users routers
## /login /logout
app.include_router(fastapi_users.get_auth_router(auth_backend), prefix="/auth/jwt", tags=["auth"])
## /register
app.include_router(
    fastapi_users.get_register_router(UserRead, UserCreate),
    prefix="/auth",
    tags=["auth"],
)
## /forgot-password /reset-password
app.include_router(
    fastapi_users.get_reset_password_router(),
    prefix="/auth",
    tags=["auth"],
)
app.include_router(
    fastapi_users.get_users_router(UserRead, UserUpdate),
    prefix="/users",
    tags=["users"],
)
