import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from app.core.config import settings
from app.core.exceptions import StorageUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")

MEMBERS = "members"
EXPENSES = "expenses"
DONATIONS = "donations"


class RetryPolicy:
    """Fixed-delay retry; ``max_attempts=None`` retries forever."""

    def __init__(self, delay_seconds: float = 5.0, max_attempts: Optional[int] = None):
        self.delay_seconds = delay_seconds
        self.max_attempts = max_attempts

    async def run(self, operation: Callable[[], Awaitable[T]], description: str) -> T:
        attempt = 0
        while True:
            attempt += 1
            try:
                return await operation()
            except PyMongoError as e:
                if self.max_attempts is not None and attempt >= self.max_attempts:
                    raise
                logger.warning(
                    "%s failed (attempt %d): %s; retrying in %.1fs",
                    description, attempt, e, self.delay_seconds
                )
                await asyncio.sleep(self.delay_seconds)


class MongoDatabase:
    """MongoDB connection handle owned by the application."""

    def __init__(
        self,
        uri: str,
        database_name: str,
        retry_policy: Optional[RetryPolicy] = None,
        timeout_ms: int = 5000,
        health_interval_seconds: float = 30.0,
    ):
        self.uri = uri
        self.database_name = database_name
        self.retry_policy = retry_policy or RetryPolicy()
        self.timeout_ms = timeout_ms
        self.health_interval_seconds = health_interval_seconds
        self.client: Optional[AsyncIOMotorClient] = None
        self.db: Optional[AsyncIOMotorDatabase] = None
        self.connected = False
        self._monitor: Optional[asyncio.Task] = None

    @classmethod
    def from_settings(cls) -> "MongoDatabase":
        return cls(
            settings.MONGODB_URI,
            settings.DATABASE_NAME,
            retry_policy=RetryPolicy(settings.MONGODB_RETRY_DELAY_SECONDS),
            timeout_ms=settings.MONGODB_TIMEOUT_MS,
            health_interval_seconds=settings.MONGODB_HEALTH_INTERVAL_SECONDS,
        )

    @classmethod
    def attach(cls, db: AsyncIOMotorDatabase) -> "MongoDatabase":
        """Wrap an already opened database (used by scripts and tests)."""
        handle = cls(uri="", database_name=getattr(db, "name", ""))
        handle.db = db
        handle.connected = True
        return handle

    @property
    def is_open(self) -> bool:
        return self.db is not None

    async def connect(self) -> None:
        """Open the client and block until the server answers a ping."""
        self.client = AsyncIOMotorClient(
            self.uri,
            serverSelectionTimeoutMS=self.timeout_ms,
            timeoutMS=self.timeout_ms,
        )
        self.db = self.client[self.database_name]

        await self.retry_policy.run(self._ping, "MongoDB connection")
        self.connected = True
        logger.info("Connected to MongoDB: %s", self.database_name)

        await self.retry_policy.run(self.create_indexes, "MongoDB index creation")

    async def _ping(self) -> None:
        await self.db.command("ping")

    async def ping(self) -> bool:
        """Check the connection and update ``connected``."""
        if self.db is None:
            self.connected = False
            return False
        try:
            await self._ping()
        except PyMongoError as e:
            if self.connected:
                logger.error("Lost connection to MongoDB: %s", e)
            self.connected = False
            return False
        if not self.connected:
            logger.info("Reconnected to MongoDB: %s", self.database_name)
        self.connected = True
        return True

    async def create_indexes(self) -> None:
        await self.db[MEMBERS].create_index([("id", ASCENDING)], unique=True)
        await self.db[EXPENSES].create_index("id")
        await self.db[DONATIONS].create_index("id")

    def start_monitor(self) -> None:
        if self._monitor is None or self._monitor.done():
            self._monitor = asyncio.create_task(self._watch())

    async def _watch(self) -> None:
        while True:
            interval = self.health_interval_seconds
            if not self.connected:
                interval = self.retry_policy.delay_seconds
            await asyncio.sleep(interval)
            try:
                await self.ping()
            except Exception:
                logger.exception("MongoDB health check failed")

    async def close(self) -> None:
        if self._monitor is not None:
            self._monitor.cancel()
            try:
                await self._monitor
            except asyncio.CancelledError:
                pass
            self._monitor = None
        if self.client is not None:
            self.client.close()
            logger.info("Disconnected from MongoDB")
        self.connected = False

    def collection(self, name: str) -> AsyncIOMotorCollection:
        if self.db is None:
            raise StorageUnavailableError("Database connection is not initialised")
        return self.db[name]
