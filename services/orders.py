import secrets
import string
import time

from database import Store
from errors import NotFound, ValidationFailed
from logger import get_logger
from schemas import Order, OrderItem, Product
from services import cart as cart_service

logger = get_logger("orders")

BASE36 = string.digits + string.ascii_lowercase


def generate_order_id() -> str:
    timestamp = int(time.time() * 1000)
    suffix = "".join(secrets.choice(BASE36) for _ in range(6))
    return f"ORD-{timestamp}-{suffix}".upper()


def place_order(store: Store, user: dict) -> Order:
    cart = cart_service.find_cart(store, user["id"])
    if not cart or not cart.items:
        raise ValidationFailed("Cart is empty")

    # Snapshot current prices; items whose product was deleted are dropped
    products = store.get_many(Product, [item.product_id for item in cart.items])
    items = []
    total = 0.0
    for it in cart.items:
        prod = products.get(it.product_id)
        if not prod:
            continue
        total += prod.price * it.quantity
        items.append(OrderItem(
            product_id=prod.id,
            product_name=prod.name,
            price=prod.price,
            quantity=it.quantity,
        ))
    if not items:
        raise ValidationFailed("Cart is empty")

    order = store.insert(Order(
        order_id=generate_order_id(),
        user_id=user["id"],
        user_name=user.get("name"),
        items=items,
        total_amount=round(total, 2),
    ))
    logger.info(f"Order {order.order_id} placed by {order.user_id} ({order.total_amount})")

    # Not atomic with the insert above: a failure here leaves the cart full
    cart_service.clear(store, cart)
    return order


def list_orders(store: Store, user_id: str) -> list:
    return store.find(Order, {"userId": user_id}, sort=[("createdAt", -1), ("_id", -1)])


def get_order(store: Store, user_id: str, order_id: str) -> Order:
    order = store.find_one(Order, {"orderId": order_id, "userId": user_id})
    if not order:
        raise NotFound("Order not found")
    return order
