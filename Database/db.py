'''
This file contains the database client for the EasyBooking application.
'''
import logging
from typing import Any, Optional

from bson import ObjectId
from pymongo import MongoClient
from pymongo.database import Database

from errors import StoreUnavailableError
from Hotels.query import Predicate, SortOrder, projection_to_mongo, to_mongo

logger = logging.getLogger(__name__)

HOTELS_COLLECTION = "hotels"
USERS_COLLECTION = "users"
SESSIONS_COLLECTION = "sessions"


class BookingDB:
    """Database Client"""

    def __init__(self, uri: str, db_name: str, client: Optional[MongoClient] = None) -> None:
        self._uri = uri
        self._db_name = db_name
        self._client: Optional[MongoClient] = client
        self._database: Optional[Database] = None

    # lifecycle
    def connect(self) -> Database:
        """
        Open the client, check the server answers and create indexes.

        Returns:
            Database: the application database handle.

        Raises:
            pymongo.errors.PyMongoError: if the server cannot be reached.
        """
        if self._client is None:
            self._client = MongoClient(self._uri, tz_aware=True)
        self._client.admin.command("ping")
        database = self._client[self._db_name]
        database[USERS_COLLECTION].create_index("username", unique=True)
        database[SESSIONS_COLLECTION].create_index("expires_at", expireAfterSeconds=0)
        self._database = database
        logger.info("Connected to MongoDB", extra={"db_name": self._db_name})
        return database

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            logger.info("MongoDB connection closed")
        self._client = None
        self._database = None

    @property
    def database(self) -> Database:
        if self._database is None:
            raise StoreUnavailableError()
        return self._database

    @property
    def hotels(self) -> Any:
        return self.database[HOTELS_COLLECTION]

    # hotels
    def find_listings(
        self,
        predicate: Predicate,
        sort: SortOrder,
        projection: Optional[tuple[str, ...]] = None,
    ) -> list[dict[str, Any]]:
        cursor = self.hotels.find(to_mongo(predicate), projection_to_mongo(projection))
        return list(cursor.sort(list(sort)))

    def find_listing(
        self, listing_id: ObjectId, projection: Optional[tuple[str, ...]] = None
    ) -> Optional[dict[str, Any]]:
        return self.hotels.find_one({"_id": listing_id}, projection_to_mongo(projection))

    def insert_listing(self, document: dict[str, Any]) -> ObjectId:
        return self.hotels.insert_one(document).inserted_id

    def replace_listing_fields(self, listing_id: ObjectId, fields: dict[str, Any]) -> bool:
        """Overwrite every mutable field; False when no document matched."""
        result = self.hotels.update_one({"_id": listing_id}, {"$set": fields})
        return result.matched_count > 0

    def delete_listing(self, listing_id: ObjectId) -> bool:
        return self.hotels.delete_one({"_id": listing_id}).deleted_count > 0

    def distinct_locations(self) -> list[str]:
        return sorted(str(city) for city in self.hotels.distinct("location") if city)

    def count_listings(self) -> int:
        return self.hotels.count_documents({})

    def insert_listings(self, documents: list[dict[str, Any]]) -> int:
        return len(self.hotels.insert_many(documents).inserted_ids)
