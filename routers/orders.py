from fastapi import APIRouter, Depends

from auth import get_current_user
from database import Store, get_store
from services import orders as service

router = APIRouter()


@router.post("", status_code=201)
def place_order(user: dict = Depends(get_current_user), store: Store = Depends(get_store)):
    order = service.place_order(store, user)
    return {"message": "Order placed successfully", "order": order}


@router.get("")
def list_orders(user: dict = Depends(get_current_user), store: Store = Depends(get_store)):
    return service.list_orders(store, user["id"])


@router.get("/{order_id}")
def get_order(order_id: str, user: dict = Depends(get_current_user), store: Store = Depends(get_store)):
    return service.get_order(store, user["id"], order_id)
