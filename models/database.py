"""Database models and connection setup."""

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING
from typing import Optional
from config.settings import settings
from utils.logger import setup_logger

logger = setup_logger(__name__)


class Database:
    """Database connection manager."""

    client: Optional[AsyncIOMotorClient] = None


db = Database()


async def connect_to_mongo():
    """Create database connection."""
    db.client = AsyncIOMotorClient(settings.mongodb_url)
    logger.info(f"Connected to MongoDB database: {settings.mongodb_db_name}")


async def close_mongo_connection():
    """Close database connection."""
    if db.client:
        db.client.close()
        db.client = None
        logger.info("Disconnected from MongoDB")


async def init_mongo():
    """Initialize MongoDB connection and all collections with indexes."""
    await connect_to_mongo()
    await create_indexes()


async def create_indexes():
    """Create the indexes every collection relies on."""
    database = get_database()

    # Users collection
    await database.users.create_index([("email", ASCENDING)], unique=True)

    # Meals collection
    await database.meals.create_index([("user_id", ASCENDING), ("date", DESCENDING)])
    await database.meals.create_index([("user_id", ASCENDING), ("meal_type", ASCENDING)])

    # Workouts collection
    await database.workouts.create_index([("user_id", ASCENDING), ("date", DESCENDING)])
    await database.workouts.create_index([("user_id", ASCENDING), ("workout_type", ASCENDING)])

    # Challenges collection
    await database.challenges.create_index([("status", ASCENDING), ("is_public", ASCENDING)])
    await database.challenges.create_index([("challenge_type", ASCENDING), ("difficulty", ASCENDING)])
    await database.challenges.create_index(
        [("duration.start_date", ASCENDING), ("duration.end_date", ASCENDING)]
    )
    await database.challenges.create_index([("creator_id", ASCENDING)])

    logger.info("MongoDB initialized: All collections created with indexes")


async def ping_database() -> bool:
    """Whether the MongoDB server answers a ping."""
    if db.client is None:
        return False
    try:
        await db.client.admin.command("ping")
        return True
    except Exception as e:
        logger.warning(f"MongoDB ping failed: {e}")
        return False


def get_database():
    """Get database instance."""
    return db.client[settings.mongodb_db_name]


# Helper functions to get collections
def get_users_collection():
    """Get users collection."""
    return get_database().users


def get_meals_collection():
    """Get meals collection."""
    return get_database().meals


def get_workouts_collection():
    """Get workouts collection."""
    return get_database().workouts


def get_challenges_collection():
    """Get challenges collection."""
    return get_database().challenges
