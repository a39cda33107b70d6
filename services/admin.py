import math
from numbers import Number
from typing import Any, List

from database import Store
from errors import ValidationFailed
from logger import get_logger
from schemas import Product

logger = get_logger("admin")

SAMPLE_PRODUCTS = [
    {
        "name": "Wireless Headphones",
        "category": "Electronics",
        "price": 99.99,
        "description": "High-quality wireless headphones with noise cancellation",
        "image": "https://images.unsplash.com/photo-1505740420928-5e560c06d30e?w=300&h=300&fit=crop",
    },
    {
        "name": "Cotton T-Shirt",
        "category": "Clothing",
        "price": 19.99,
        "description": "Comfortable 100% cotton t-shirt available in multiple colors",
        "image": "https://images.unsplash.com/photo-1521572163474-6864f9cf17ab?w=300&h=300&fit=crop",
    },
    {
        "name": "Coffee Maker",
        "category": "Home",
        "price": 149.99,
        "description": "Programmable coffee maker with 12-cup capacity",
        "image": "https://images.unsplash.com/photo-1495474472287-4d71bcdd2085?w=300&h=300&fit=crop",
    },
    {
        "name": "Running Shoes",
        "category": "Sports",
        "price": 89.99,
        "description": "Lightweight running shoes with excellent cushioning",
        "image": "https://images.unsplash.com/photo-1542291026-7eec264c27ff?w=300&h=300&fit=crop",
    },
    {
        "name": "Smartphone",
        "category": "Electronics",
        "price": 699.99,
        "description": "Latest smartphone with advanced camera and long battery life",
        "image": "https://images.unsplash.com/photo-1511707171634-5f897ff02aa9?w=300&h=300&fit=crop",
    },
    {
        "name": "Yoga Mat",
        "category": "Sports",
        "price": 29.99,
        "description": "Non-slip yoga mat perfect for all types of yoga practice",
        "image": "https://images.unsplash.com/photo-1544367567-0f2fcb009e0b?w=300&h=300&fit=crop",
    },
    {
        "name": "Desk Lamp",
        "category": "Home",
        "price": 39.99,
        "description": "Adjustable LED desk lamp with multiple brightness settings",
        "image": "https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d?w=300&h=300&fit=crop",
    },
    {
        "name": "Jeans",
        "category": "Clothing",
        "price": 59.99,
        "description": "Classic fit jeans made from premium denim",
        "image": "https://images.unsplash.com/photo-1542272604-787c3835535d?w=300&h=300&fit=crop",
    },
    {
        "name": "Bluetooth Speaker",
        "category": "Electronics",
        "price": 79.99,
        "description": "Portable Bluetooth speaker with 360-degree sound",
        "image": "https://images.unsplash.com/photo-1608043152269-423dbba4e7e1?w=300&h=300&fit=crop",
    },
    {
        "name": "Cooking Pan Set",
        "category": "Home",
        "price": 129.99,
        "description": "Non-stick cooking pan set with 3 different sizes",
        "image": "https://images.unsplash.com/photo-1556909114-f6e7ad7d3136?w=300&h=300&fit=crop",
    },
]

REQUIRED_TEXT_FIELDS = ("name", "category", "description")


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _to_product(data: dict) -> Product:
    image = data.get("image")
    return Product(
        name=_text(data["name"]),
        category=_text(data["category"]),
        price=float(data["price"]),
        description=_text(data["description"]),
        image=_text(image) or None,
    )


def validate_entry(index: int, entry: Any) -> str:
    """Return the error message for one bulk entry, or '' when it is valid."""
    if not isinstance(entry, dict):
        return f"Product at index {index}: Must be an object"
    price = entry.get("price")
    is_number = isinstance(price, Number) and not isinstance(price, bool)
    if not all(_text(entry.get(field)) for field in REQUIRED_TEXT_FIELDS) or not is_number:
        return f"Product at index {index}: Missing required fields (name, category, price, description)"
    if price < 0 or not math.isfinite(price):
        return f"Product at index {index}: Price must be a positive number"
    return ""


def _insert_missing(store: Store, products: List[Product]):
    """Insert products whose names are not stored yet; returns (existing names, skipped names, created)."""
    names = [p.name for p in products]
    existing = {p.name for p in store.find(Product, {"name": {"$in": names}})}

    skipped, to_create, seen = [], [], set(existing)
    for product in products:
        if product.name in seen:
            skipped.append(product.name)
            continue
        seen.add(product.name)
        to_create.append(product)
    return existing, skipped, store.insert_many(to_create)


def seed_sample_products(store: Store) -> dict:
    existing, _, created = _insert_missing(store, [_to_product(p) for p in SAMPLE_PRODUCTS])
    logger.info(f"Sample products: {len(existing)} existing, {len(created)} created")
    if not created:
        return {
            "message": "All sample products already exist",
            "existingCount": len(existing),
            "createdCount": 0,
        }
    return {
        "message": "Sample products created successfully",
        "existingCount": len(existing),
        "createdCount": len(created),
        "createdProducts": created,
    }


def bulk_insert(store: Store, entries: Any) -> dict:
    if not isinstance(entries, list):
        raise ValidationFailed("Request body must be an array of products")
    if not entries:
        raise ValidationFailed("Array cannot be empty")

    errors = [msg for msg in (validate_entry(i, e) for i, e in enumerate(entries)) if msg]
    if errors:
        raise ValidationFailed("Validation errors", errors)

    existing, skipped, created = _insert_missing(store, [_to_product(e) for e in entries])
    logger.info(f"Bulk insert: {len(entries)} requested, {len(created)} created, {len(skipped)} skipped")
    return {
        "message": "Products created successfully" if created else "All products already exist",
        "totalRequested": len(entries),
        "existingCount": len(existing),
        "createdCount": len(created),
        "skippedCount": len(skipped),
        "skippedProducts": skipped,
        "createdProducts": created,
    }


def clear_all(store: Store) -> dict:
    deleted = store.delete_all(Product)
    logger.warning(f"Cleared product catalog ({deleted} deleted)")
    return {"message": "All products cleared successfully", "deletedCount": deleted}


def stats(store: Store) -> dict:
    categories = sorted(store.distinct(Product, "category"))
    return {
        "totalProducts": store.count(Product),
        "totalCategories": len(categories),
        "categories": categories,
        "productsWithImages": store.count(Product, {"image": {"$ne": None}}),
        "averagePrice": round(store.average(Product, "price"), 2),
    }
