"""
MongoDB task store.

Documents keep the field names of the public REST payload (camelCase) and
store ``status`` as its REST value:

    {
        "_id": ObjectId,
        "title": str,
        "description": str,
        "status": "открыта",
        "dueDate": datetime,
        "createdAt": datetime,
        "updatedAt": datetime,
        "version": int,
    }

All writes are single-document atomic operations. ``version`` is bumped by
the same ``find_one_and_update`` that applies the merge. Malformed ids are
a miss (None), never an error. Driver errors (PyMongoError) propagate.
"""
import logging
from datetime import datetime, timezone as dt_timezone
from typing import Any, Dict, List, Mapping, Optional

from bson import ObjectId
from pymongo import DESCENDING, MongoClient, ReturnDocument
from pymongo.errors import PyMongoError

from .dtos import TaskDTO
from .status import TaskStatus, to_rest, from_rest

logger = logging.getLogger(__name__)

# Service field name -> document key
FIELD_KEYS = {
    "title": "title",
    "description": "description",
    "status": "status",
    "due_date": "dueDate",
}


def _now() -> datetime:
    # BSON dates have millisecond precision
    now = datetime.now(dt_timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=dt_timezone.utc)
    return value.astimezone(dt_timezone.utc)


def _to_document(fields: Mapping[str, Any]) -> Dict[str, Any]:
    document = {}
    for name, value in fields.items():
        key = FIELD_KEYS.get(name)
        if key is None:
            raise ValueError(f"Unknown task field: {name}")
        if isinstance(value, TaskStatus):
            value = to_rest(value)
        document[key] = value
    return document


def _to_dto(document: Mapping[str, Any]) -> TaskDTO:
    return TaskDTO(
        id=str(document["_id"]),
        title=document["title"],
        description=document.get("description", ""),
        status=from_rest(document["status"]),
        due_date=_as_utc(document["dueDate"]),
        created_at=_as_utc(document["createdAt"]),
        updated_at=_as_utc(document["updatedAt"]),
        version=document.get("version", 1),
    )


def _object_id(task_id: str) -> Optional[ObjectId]:
    if not ObjectId.is_valid(task_id):
        return None
    return ObjectId(task_id)


class MongoTaskStore:
    """Durable keyed storage for task documents."""

    def __init__(self, client: MongoClient, db_name: str, collection_name: str = "tasks"):
        self._client = client
        self._collection = client[db_name][collection_name]

    @classmethod
    def from_config(cls, config) -> "MongoTaskStore":
        """Build a store without connecting; pymongo connects on first use."""
        client = MongoClient(
            config.mongodb_uri,
            tz_aware=True,
            connect=False,
            **config.mongodb_options,
        )
        return cls(client, config.mongodb_db_name, config.mongodb_collection)

    def create_task(self, fields: Mapping[str, Any]) -> TaskDTO:
        now = _now()
        document = _to_document(fields)
        document.update(createdAt=now, updatedAt=now, version=1)

        result = self._collection.insert_one(document)
        document["_id"] = result.inserted_id

        logger.debug(f"Inserted task {result.inserted_id}")
        return _to_dto(document)

    def get_task(self, task_id: str) -> Optional[TaskDTO]:
        object_id = _object_id(task_id)
        if object_id is None:
            return None

        document = self._collection.find_one({"_id": object_id})
        return _to_dto(document) if document else None

    def list_tasks(self, status: Optional[TaskStatus] = None) -> List[TaskDTO]:
        """Newest first, optionally filtered by status."""
        query = {"status": to_rest(status)} if status else {}
        cursor = self._collection.find(query).sort([("createdAt", DESCENDING), ("_id", DESCENDING)])
        return [_to_dto(document) for document in cursor]

    def update_task(self, task_id: str, fields: Mapping[str, Any]) -> Optional[TaskDTO]:
        object_id = _object_id(task_id)
        if object_id is None:
            return None

        changes = _to_document(fields)
        changes["updatedAt"] = _now()

        document = self._collection.find_one_and_update(
            {"_id": object_id},
            {"$set": changes, "$inc": {"version": 1}},
            return_document=ReturnDocument.AFTER,
        )
        return _to_dto(document) if document else None

    def ping(self) -> bool:
        try:
            self._client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False

    def close(self) -> None:
        self._client.close()
