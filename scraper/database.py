"""
MongoDB document store for schedule snapshots and forecast records.
Handles connection, indexing, and the read/write operations the pipeline needs.
"""

from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pydantic import BaseModel, ValidationError
from pymongo.errors import PyMongoError
import structlog

from .exceptions import StoreFailure
from .models import ScheduleEntry, ScheduleSnapshot
from scheduler.models import ForecastRecord

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ScheduleStore:
    """
    Async MongoDB store keyed by snapshot date and show id.
    Every driver error and every malformed stored document is surfaced as StoreFailure.
    """

    def __init__(
        self,
        connection_url: str,
        database_name: str,
        snapshot_collection: str = "scrapes",
        forecast_collection: str = "schedules"
    ):
        """
        Initialize the store.

        Args:
            connection_url: MongoDB connection URL
            database_name: Name of the database
            snapshot_collection: Collection holding one document per snapshot date
            forecast_collection: Collection holding one document per show id
        """
        self.connection_url = connection_url
        self.database_name = database_name
        self.snapshot_collection_name = snapshot_collection
        self.forecast_collection_name = forecast_collection
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None
        self.snapshots: Optional[AsyncIOMotorCollection] = None
        self.forecasts: Optional[AsyncIOMotorCollection] = None

    async def connect(self) -> None:
        """Establish connection to MongoDB and ensure indexes."""
        try:
            self.client = AsyncIOMotorClient(self.connection_url)
            self.database = self.client[self.database_name]
            self.snapshots = self.database[self.snapshot_collection_name]
            self.forecasts = self.database[self.forecast_collection_name]

            await self.client.admin.command('ping')
            logger.info("Successfully connected to MongoDB",
                        database=self.database_name,
                        snapshots=self.snapshot_collection_name,
                        forecasts=self.forecast_collection_name)

            await self._create_indexes()

        except PyMongoError as e:
            logger.error("Failed to connect to MongoDB", error=str(e))
            raise StoreFailure("connect", str(e)) from e

    async def disconnect(self) -> None:
        """Close MongoDB connection."""
        if self.client:
            self.client.close()
            logger.info("Disconnected from MongoDB")

    async def _create_indexes(self) -> None:
        await self.snapshots.create_index("snapshot_date", unique=True)
        await self.forecasts.create_index("show_id", unique=True)
        await self.forecasts.create_index("updated_at")
        logger.info("Successfully created MongoDB indexes")

    def _require(self, collection: Optional[AsyncIOMotorCollection], operation: str) -> AsyncIOMotorCollection:
        if collection is None:
            raise StoreFailure(operation, "store is not connected")
        return collection

    def _load(self, model: Type[ModelT], document: Dict[str, Any], operation: str) -> ModelT:
        document.pop('_id', None)
        try:
            return model(**document)
        except ValidationError as e:
            logger.error("Stored document failed validation", operation=operation, error=str(e))
            raise StoreFailure(operation, f"Malformed {model.__name__} document: {e}") from e

    async def get_snapshot(self, snapshot_date: str) -> Optional[ScheduleSnapshot]:
        """
        Retrieve the snapshot stored for a calendar date.

        Args:
            snapshot_date: ISO date key

        Returns:
            ScheduleSnapshot instance or None if not found
        """
        collection = self._require(self.snapshots, "get_snapshot")
        try:
            document = await collection.find_one({"snapshot_date": snapshot_date})
        except PyMongoError as e:
            logger.error("Failed to retrieve snapshot", snapshot_date=snapshot_date, error=str(e))
            raise StoreFailure("get_snapshot", str(e)) from e

        if not document:
            return None

        return self._load(ScheduleSnapshot, document, "get_snapshot")

    async def put_snapshot(
        self,
        snapshot_date: str,
        entries: Sequence[ScheduleEntry],
        degraded: bool = False
    ) -> ScheduleSnapshot:
        """
        Store the snapshot for a calendar date, replacing any earlier one for that date.

        Args:
            snapshot_date: ISO date key
            entries: Schedule entries observed in this cycle
            degraded: Whether the entries came from the fallback dataset

        Returns:
            The stored ScheduleSnapshot
        """
        collection = self._require(self.snapshots, "put_snapshot")
        snapshot = ScheduleSnapshot(
            snapshot_date=snapshot_date,
            entries=tuple(entries),
            degraded=degraded
        )

        document = snapshot.model_dump()
        document['entries'] = [entry.model_dump() for entry in snapshot.entries]

        try:
            await collection.replace_one({"snapshot_date": snapshot_date}, document, upsert=True)
        except PyMongoError as e:
            logger.error("Failed to store snapshot", snapshot_date=snapshot_date, error=str(e))
            raise StoreFailure("put_snapshot", str(e)) from e

        logger.debug("Stored snapshot", snapshot_date=snapshot_date, entries=len(snapshot.entries))
        return snapshot

    async def get_forecasts(self) -> List[ForecastRecord]:
        """Get all forecast records, most recently updated first."""
        collection = self._require(self.forecasts, "get_forecasts")
        try:
            cursor = collection.find({}).sort("updated_at", -1)
            records = []
            async for document in cursor:
                records.append(self._load(ForecastRecord, document, "get_forecasts"))
        except PyMongoError as e:
            logger.error("Failed to retrieve forecasts", error=str(e))
            raise StoreFailure("get_forecasts", str(e)) from e

        return records

    async def get_forecast(self, show_id: str) -> Optional[ForecastRecord]:
        collection = self._require(self.forecasts, "get_forecast")
        try:
            document = await collection.find_one({"show_id": show_id})
        except PyMongoError as e:
            logger.error("Failed to retrieve forecast", show_id=show_id, error=str(e))
            raise StoreFailure("get_forecast", str(e)) from e

        if not document:
            return None

        return self._load(ForecastRecord, document, "get_forecast")

    async def put_forecast(self, record: ForecastRecord) -> None:
        """
        Upsert a forecast record in full, keyed by show id.

        Args:
            record: ForecastRecord to store
        """
        collection = self._require(self.forecasts, "put_forecast")
        document: Dict[str, Any] = record.model_dump()

        try:
            await collection.replace_one({"show_id": record.show_id}, document, upsert=True)
        except PyMongoError as e:
            logger.error("Failed to store forecast", show_id=record.show_id, error=str(e))
            raise StoreFailure("put_forecast", str(e)) from e

        logger.debug("Stored forecast", show_id=record.show_id,
                     projected=len(record.projected_episodes))
