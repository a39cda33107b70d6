from fastapi import APIRouter, Depends

from auth import get_current_user
from database import Store, get_store
from schemas import CartItemIn, CartQuantityIn
from services import cart as service

router = APIRouter()


@router.get("")
def get_cart(user: dict = Depends(get_current_user), store: Store = Depends(get_store)):
    return service.get_cart(store, user["id"])


@router.post("")
def add_to_cart(item: CartItemIn, user: dict = Depends(get_current_user), store: Store = Depends(get_store)):
    return service.add_item(store, user["id"], item.product_id, item.quantity)


@router.put("/{product_id}")
def update_cart_item(product_id: str, payload: CartQuantityIn, user: dict = Depends(get_current_user),
                     store: Store = Depends(get_store)):
    return service.update_item(store, user["id"], product_id, payload.quantity)


@router.delete("/{product_id}")
def remove_cart_item(product_id: str, user: dict = Depends(get_current_user), store: Store = Depends(get_store)):
    return service.remove_item(store, user["id"], product_id)
