import math
import re
from typing import Any, Dict, Optional

from database import Store, to_obj_id
from errors import NotFound, ValidationFailed
from logger import get_logger
from schemas import Product, ProductIn, ProductUpdate, utcnow

logger = get_logger("products")

DEFAULT_LIMIT = 12
MAX_LIMIT = 100

NEWEST_FIRST = [("createdAt", -1), ("_id", -1)]


def _contains(value: str) -> Dict[str, Any]:
    return {"$regex": re.escape(value), "$options": "i"}


def _positive_int(raw: Optional[str], default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value >= 1 else default


def build_query(category: Optional[str] = None, search: Optional[str] = None) -> Dict[str, Any]:
    query: Dict[str, Any] = {}
    if category:
        query["category"] = _contains(category)
    if search:
        query["$or"] = [{"name": _contains(search)}, {"description": _contains(search)}]
    return query


def list_products(store: Store, category: Optional[str] = None, search: Optional[str] = None,
                  page: Optional[str] = None, limit: Optional[str] = None) -> dict:
    page = _positive_int(page, 1)
    limit = min(_positive_int(limit, DEFAULT_LIMIT), MAX_LIMIT)
    query = build_query(category, search)

    products = store.find(Product, query, sort=NEWEST_FIRST, skip=(page - 1) * limit, limit=limit)
    total = store.count(Product, query)
    return {
        "products": products,
        "total": total,
        "page": page,
        "totalPages": math.ceil(total / limit),
        "limit": limit,
    }


def get_product(store: Store, product_id: str) -> Product:
    product = store.get(Product, product_id)
    if not product:
        raise NotFound("Product not found")
    return product


def _ensure_unique_name(store: Store, name: str, exclude_id: Optional[str] = None):
    query: Dict[str, Any] = {"name": name}
    if exclude_id:
        query["_id"] = {"$ne": to_obj_id(exclude_id)}
        message = "Another product with this name already exists"
    else:
        message = "Product with this name already exists"
    if store.find_one(Product, query):
        raise ValidationFailed(message)


def create_product(store: Store, payload: ProductIn) -> Product:
    _ensure_unique_name(store, payload.name)
    product = store.insert(Product(**payload.model_dump()))
    logger.info(f"Created product {product.id} ({product.name})")
    return product


def update_product(store: Store, product_id: str, payload: ProductUpdate) -> Product:
    product = get_product(store, product_id)
    changes = payload.model_dump(exclude_unset=True)

    # name/category/description/price sent as null are ignored; image null clears it
    update = {k: v for k, v in changes.items() if v is not None or k == "image"}
    if "name" in update and update["name"] != product.name:
        _ensure_unique_name(store, update["name"], exclude_id=product.id)

    update["updated_at"] = utcnow()
    return store.replace(product.model_copy(update=update))


def delete_product(store: Store, product_id: str) -> Product:
    product = store.delete(Product, product_id)
    if not product:
        raise NotFound("Product not found")
    logger.info(f"Deleted product {product.id} ({product.name})")
    return product


def list_categories(store: Store) -> list:
    return sorted(store.distinct(Product, "category"))
