from motor.motor_asyncio import AsyncIOMotorClient
from beanie import init_beanie
from typing import Optional

from ..core.config import settings
from ..core.logging_config import get_logger
from ..models.theme import Theme
from ..models.user import AdminUser

logger = get_logger(__name__)

DOCUMENT_MODELS = [
    Theme,
    AdminUser,
]


class Database:
    client: Optional[AsyncIOMotorClient] = None
    database = None


database = Database()


async def connect_to_mongo(client: Optional[AsyncIOMotorClient] = None):
    """Create database connection and initialize Beanie"""
    database.client = client or AsyncIOMotorClient(settings.MONGODB_URL)
    database.database = database.client[settings.MONGODB_DB_NAME]

    await init_beanie(
        database=database.database,
        document_models=DOCUMENT_MODELS
    )

    logger.info("Connected to MongoDB: %s", settings.MONGODB_URL)


async def close_mongo_connection():
    """Close database connection"""
    if database.client:
        database.client.close()
        database.client = None
        database.database = None
        logger.info("Disconnected from MongoDB")


async def get_database():
    """Get database instance"""
    return database.database
