"""
MongoDB access for the storefront.

``Store`` is constructed once at startup (see main.lifespan), kept on
``app.state`` and handed to the routes through the ``get_store`` dependency.
It takes and returns whole records from schemas.py; documents never leave
this module.
"""
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, TypeVar

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Request
from pymongo import ASCENDING, DESCENDING, TEXT, MongoClient
from pymongo.collection import Collection

from config import settings
from logger import get_logger
from schemas import Cart, Order, Product, Record

logger = get_logger("database")

R = TypeVar("R", bound=Record)


def to_obj_id(id_str: str) -> Optional[ObjectId]:
    try:
        return ObjectId(id_str)
    except (InvalidId, TypeError):
        return None


def serialize(doc: dict):
    if not doc:
        return doc
    doc["id"] = str(doc.pop("_id"))
    return doc


def to_document(record: Record) -> dict:
    return record.model_dump(by_alias=True, exclude={"id"})


class Store:
    def __init__(self, uri: Optional[str] = None, name: Optional[str] = None, client: Optional[MongoClient] = None):
        self.uri = uri or settings.MONGODB_URI
        self.name = name or settings.DATABASE_NAME
        self.client = client
        self.db = client[self.name] if client is not None else None

    def open(self) -> "Store":
        if self.client is None:
            self.client = MongoClient(self.uri, tz_aware=True)
        self.db = self.client[self.name]
        self.client.admin.command("ping")
        self.ensure_indexes()
        logger.info(f"Connected to MongoDB database '{self.name}'")
        return self

    def close(self):
        if self.client is not None:
            self.client.close()
            logger.info("MongoDB connection closed")
        self.client = None
        self.db = None

    def ensure_indexes(self):
        products = self.collection(Product)
        products.create_index([("name", TEXT), ("description", TEXT)])
        products.create_index([("createdAt", DESCENDING)])
        self.collection(Cart).create_index("userId", unique=True)
        orders = self.collection(Order)
        orders.create_index("orderId", unique=True)
        orders.create_index([("userId", ASCENDING), ("createdAt", DESCENDING)])

    def collection(self, model) -> Collection:
        name = model if isinstance(model, str) else model.__name__.lower()
        return self.db[name]

    # Record operations

    def insert(self, record: R) -> R:
        inserted_id = self.collection(type(record)).insert_one(to_document(record)).inserted_id
        return record.model_copy(update={"id": str(inserted_id)})

    def insert_many(self, records: Sequence[R]) -> List[R]:
        if not records:
            return []
        model = type(records[0])
        result = self.collection(model).insert_many([to_document(r) for r in records])
        return [r.model_copy(update={"id": str(oid)}) for r, oid in zip(records, result.inserted_ids)]

    def replace(self, record: R) -> R:
        self.collection(type(record)).replace_one({"_id": ObjectId(record.id)}, to_document(record))
        return record

    def delete(self, model: Type[R], record_id: str) -> Optional[R]:
        oid = to_obj_id(record_id)
        if oid is None:
            return None
        doc = self.collection(model).find_one_and_delete({"_id": oid})
        return model.model_validate(serialize(doc)) if doc else None

    def delete_all(self, model: Type[R]) -> int:
        return self.collection(model).delete_many({}).deleted_count

    def get(self, model: Type[R], record_id: str) -> Optional[R]:
        oid = to_obj_id(record_id)
        if oid is None:
            return None
        return self.find_one(model, {"_id": oid})

    def get_many(self, model: Type[R], record_ids: Sequence[str]) -> Dict[str, R]:
        oids = [oid for oid in (to_obj_id(i) for i in record_ids) if oid is not None]
        if not oids:
            return {}
        return {r.id: r for r in self.find(model, {"_id": {"$in": oids}})}

    def find_one(self, model: Type[R], query: Dict[str, Any]) -> Optional[R]:
        doc = self.collection(model).find_one(query)
        return model.model_validate(serialize(doc)) if doc else None

    def find(self, model: Type[R], query: Optional[Dict[str, Any]] = None,
             sort: Optional[List[Tuple[str, int]]] = None, skip: int = 0, limit: int = 0) -> List[R]:
        cursor = self.collection(model).find(query or {})
        if sort:
            cursor = cursor.sort(sort)
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        return [model.model_validate(serialize(doc)) for doc in cursor]

    def count(self, model: Type[R], query: Optional[Dict[str, Any]] = None) -> int:
        return self.collection(model).count_documents(query or {})

    def distinct(self, model: Type[R], field: str) -> list:
        return self.collection(model).distinct(field)

    def average(self, model: Type[R], field: str) -> float:
        """Mean of a numeric field over the collection, 0 when it is empty."""
        result = list(self.collection(model).aggregate([
            {"$group": {"_id": None, "avg": {"$avg": f"${field}"}}},
        ]))
        if not result or result[0]["avg"] is None:
            return 0
        return result[0]["avg"]


def get_store(request: Request) -> Store:
    return request.app.state.store
