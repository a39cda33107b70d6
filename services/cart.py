"""
Cart operations.

Every mutation is a read-modify-write of the whole cart record with no
version check, so two concurrent writes for one user can lose an update.
"""
from typing import Optional

from database import Store, to_obj_id
from errors import NotFound, ValidationFailed
from schemas import Cart, CartItem, Product, utcnow

PRODUCT_FIELDS = ("name", "price", "category", "description", "image")


def _expand_product(product: Optional[Product]) -> Optional[dict]:
    if product is None:
        return None
    expanded = {"id": product.id}
    expanded.update({field: getattr(product, field) for field in PRODUCT_FIELDS})
    return expanded


def expand(store: Store, cart: Cart) -> dict:
    """Cart with each productId replaced by the current product fields."""
    products = store.get_many(Product, [item.product_id for item in cart.items])
    return {
        "id": cart.id,
        "userId": cart.user_id,
        "items": [
            {"productId": _expand_product(products.get(item.product_id)), "quantity": item.quantity}
            for item in cart.items
        ],
        "createdAt": cart.created_at,
        "updatedAt": cart.updated_at,
    }


def find_cart(store: Store, user_id: str) -> Optional[Cart]:
    return store.find_one(Cart, {"userId": user_id})


def _canonical_id(product_id: str) -> str:
    """Hex ObjectIds are case-insensitive; cart items store the lowercase form."""
    oid = to_obj_id(product_id)
    return str(oid) if oid else product_id


def _require_cart(store: Store, user_id: str) -> Cart:
    cart = find_cart(store, user_id)
    if not cart:
        raise NotFound("Cart not found")
    return cart


def _save(store: Store, cart: Cart, items) -> Cart:
    return store.replace(cart.model_copy(update={"items": list(items), "updated_at": utcnow()}))


def get_cart(store: Store, user_id: str) -> dict:
    cart = find_cart(store, user_id)
    if not cart:
        return {"items": []}
    return expand(store, cart)


def add_item(store: Store, user_id: str, product_id: str, quantity: int = 1) -> dict:
    product = store.get(Product, product_id)
    if not product:
        raise NotFound("Product not found")
    product_id = product.id

    cart = find_cart(store, user_id)
    if not cart:
        cart = store.insert(Cart(user_id=user_id, items=[CartItem(product_id=product_id, quantity=quantity)]))
        return expand(store, cart)

    items = list(cart.items)
    for i, item in enumerate(items):
        if item.product_id == product_id:
            items[i] = item.model_copy(update={"quantity": item.quantity + quantity})
            break
    else:
        items.append(CartItem(product_id=product_id, quantity=quantity))
    return expand(store, _save(store, cart, items))


def update_item(store: Store, user_id: str, product_id: str, quantity: int) -> dict:
    if quantity < 1:
        raise ValidationFailed("Quantity must be at least 1")

    cart = _require_cart(store, user_id)
    product_id = _canonical_id(product_id)
    items = list(cart.items)
    for i, item in enumerate(items):
        if item.product_id == product_id:
            items[i] = item.model_copy(update={"quantity": quantity})
            break
    else:
        raise NotFound("Product not found in cart")
    return expand(store, _save(store, cart, items))


def remove_item(store: Store, user_id: str, product_id: str) -> dict:
    cart = _require_cart(store, user_id)
    product_id = _canonical_id(product_id)
    items = [item for item in cart.items if item.product_id != product_id]
    return expand(store, _save(store, cart, items))


def clear(store: Store, cart: Cart) -> Cart:
    return _save(store, cart, [])
