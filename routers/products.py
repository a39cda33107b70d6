from typing import Optional

from fastapi import APIRouter, Depends

from database import Store, get_store
from schemas import ProductIn, ProductUpdate
from services import products as service

router = APIRouter()


@router.get("")
def list_products(category: Optional[str] = None, search: Optional[str] = None,
                  page: Optional[str] = None, limit: Optional[str] = None,
                  store: Store = Depends(get_store)):
    return service.list_products(store, category=category, search=search, page=page, limit=limit)


@router.get("/meta/categories")
def list_categories(store: Store = Depends(get_store)):
    return {"categories": service.list_categories(store)}


@router.get("/{product_id}")
def get_product(product_id: str, store: Store = Depends(get_store)):
    return service.get_product(store, product_id)


@router.post("", status_code=201)
def create_product(payload: ProductIn, store: Store = Depends(get_store)):
    product = service.create_product(store, payload)
    return {"message": "Product created successfully", "product": product}


@router.put("/{product_id}")
def update_product(product_id: str, payload: ProductUpdate, store: Store = Depends(get_store)):
    product = service.update_product(store, product_id, payload)
    return {"message": "Product updated successfully", "product": product}


@router.delete("/{product_id}")
def delete_product(product_id: str, store: Store = Depends(get_store)):
    product = service.delete_product(store, product_id)
    return {"message": "Product deleted successfully", "product": product}
