from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder

from database import Store, get_store
from services import admin as service

router = APIRouter()


def _created_or_ok(result: dict) -> JSONResponse:
    status = 201 if result["createdCount"] else 200
    return JSONResponse(status_code=status, content=jsonable_encoder(result))


@router.post("/sample-products")
def seed_sample_products(store: Store = Depends(get_store)):
    return _created_or_ok(service.seed_sample_products(store))


@router.post("/bulk-products")
def bulk_products(payload: Any = Body(...), store: Store = Depends(get_store)):
    return _created_or_ok(service.bulk_insert(store, payload))


@router.delete("/clear-all")
def clear_all(store: Store = Depends(get_store)):
    return service.clear_all(store)


@router.get("/stats")
def stats(store: Store = Depends(get_store)):
    return service.stats(store)
