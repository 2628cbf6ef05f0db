"""Database connection and initialization."""

import logging

from beanie import init_beanie
from fastapi_users.db import BeanieUserDatabase
from motor.motor_asyncio import AsyncIOMotorClient

from casebuddy.config import settings
from casebuddy.schemas.cases import CaseDocument, CaseEmbedding
from casebuddy.schemas.feedback import FeedbackDocument
from casebuddy.schemas.usage import DailyQuotaDocument
from casebuddy.schemas.users import User

logger = logging.getLogger(__name__)


async def get_user_db():
    yield BeanieUserDatabase(User)  # type: ignore


async def init_db() -> None:
    """Initialize the database connection and document models.

    Creates the unique indexes the feedback and quota stores rely on.
    """
    logger.info(f"Connecting to MongoDB: {settings.database.uri}")

    client = AsyncIOMotorClient(settings.database.uri)

    logger.info(f"Initializing Beanie with database: {settings.database.database_name}")

    document_models = [
        FeedbackDocument,
        DailyQuotaDocument,
        CaseDocument,
        CaseEmbedding,
        User,
    ]

    try:
        await init_beanie(
            database=client[settings.database.database_name],
            document_models=document_models,
        )
        logger.info("Database initialization successful")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise


async def check_connection() -> bool:
    """Check if the database connection is healthy.

    Returns:
        bool: True if connection is healthy, False otherwise
    """
    try:
        client = AsyncIOMotorClient(
            settings.database.uri,
            serverSelectionTimeoutMS=5000,
        )
        await client.admin.command("ping")
        return True
    except Exception as e:
        logger.error(f"Database connection check failed: {e}")
        return False
