import logging
from contextlib import contextmanager
from typing import Any, Generic, Mapping, Optional, TypeVar

from bson.errors import InvalidDocument
from pymongo import ASCENDING
from pymongo.errors import (
    ConnectionFailure,
    DuplicateKeyError,
    ExecutionTimeout,
    PyMongoError,
    WriteError,
    WTimeoutError,
)

from app.core.exceptions import (
    ConflictError,
    StorageUnavailableError,
    UnknownError,
    ValidationError,
)
from app.db.mongo import MongoDatabase
from app.models.base import RecordModel

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=RecordModel)

# Records are listed by id; ties keep insertion order.
LIST_ORDER = [("id", ASCENDING), ("_id", ASCENDING)]
NO_OBJECT_ID = {"_id": 0}


@contextmanager
def storage_errors(action: str, conflict_message: str = "Duplicate record id"):
    """Translate driver exceptions raised inside the block into record errors."""
    try:
        yield
    except DuplicateKeyError as e:
        logger.warning("%s rejected as duplicate: %s", action, e)
        raise ConflictError(conflict_message) from e
    except (ConnectionFailure, ExecutionTimeout, WTimeoutError) as e:
        logger.error("%s failed, storage unavailable: %s", action, e)
        raise StorageUnavailableError() from e
    except (WriteError, InvalidDocument, OverflowError) as e:
        raise ValidationError(f"{action} rejected by storage: {e}") from e
    except PyMongoError as e:
        if getattr(e, "timeout", False):
            logger.error("%s timed out: %s", action, e)
            raise StorageUnavailableError() from e
        logger.exception("%s failed", action)
        raise UnknownError() from e


class RecordRepository(Generic[RecordT]):
    """Collection operations shared by every record kind."""

    collection_name: str
    model: type[RecordT]

    def __init__(self, mongo: MongoDatabase):
        self.mongo = mongo

    @property
    def collection(self):
        return self.mongo.collection(self.collection_name)

    def _load(self, doc: Optional[Mapping[str, Any]]) -> Optional[RecordT]:
        if doc is None:
            return None
        return self.model.from_document(doc)

    async def list_all(self) -> list[RecordT]:
        """Every record of this kind, ordered by id."""
        with storage_errors(f"Listing {self.collection_name}"):
            cursor = self.collection.find({}, NO_OBJECT_ID).sort(LIST_ORDER)
            docs = await cursor.to_list(None)
        return [self.model.from_document(doc) for doc in docs]

    async def insert(self, record: RecordT, conflict_message: str = "Duplicate record id") -> RecordT:
        with storage_errors(f"Saving {self.collection_name}", conflict_message):
            await self.collection.insert_one(record.to_document())
        return record
