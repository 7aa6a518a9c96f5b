import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from app.core.config import settings

logger = logging.getLogger(__name__)

class MongoDatabase:
    """MongoDB connection manager."""

    client: AsyncIOMotorClient = None
    db: AsyncIOMotorDatabase = None

mongodb = MongoDatabase()

async def connect_to_mongo():
    """Connect to MongoDB."""
    mongodb.client = AsyncIOMotorClient(settings.MONGODB_URL)
    mongodb.db = mongodb.client[settings.DATABASE_NAME]

    await create_indexes()
    logger.info("Connected to MongoDB: %s", settings.DATABASE_NAME)

async def disconnect_from_mongo():
    """Disconnect from MongoDB."""
    if mongodb.client is not None:
        mongodb.client.close()
    logger.info("Disconnected from MongoDB")

async def create_indexes():
    """Create database indexes."""
    # Debts
    await mongodb.db["debts"].create_index([("counterparty_id", 1), ("status", 1)])
    await mongodb.db["debts"].create_index([("status", 1), ("due_date", 1)])

    # Chart of accounts and financial accounts
    await mongodb.db["chart_of_accounts"].create_index("account_code", unique=True)
    await mongodb.db["financial_accounts"].create_index([("chart_account_id", 1), ("is_active", 1)])
    await mongodb.db["cash_boxes"].create_index([("currency", 1), ("is_default", 1), ("is_active", 1)])

    # Bookkeeping projections
    await mongodb.db["payments"].create_index("debt_ref")
    await mongodb.db["ledger_movements"].create_index([("account_id", 1), ("movement_date", 1)])
    await mongodb.db["cash_movements"].create_index("payment_ref")

    # Exchange rates
    await mongodb.db["exchange_rates"].create_index([("from_currency", 1), ("to_currency", 1), ("rate_date", -1)])

def get_db() -> AsyncIOMotorDatabase:
    """Get database instance."""
    return mongodb.db
