"""
Database Schemas for the Storefront API

Each record model corresponds to a MongoDB collection. The collection name is
the lowercase of the class name.

Example: class Product -> collection "product"

Records are frozen: changes go through ``model_copy(update=...)`` and an
explicit store call (see database.Store).
"""
from datetime import datetime, timezone
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


Text = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Record(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: Optional[str] = None


# Core domain records

class Product(Record):
    name: str
    category: str
    price: float = Field(..., ge=0)
    description: str
    image: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class CartItem(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    product_id: str
    quantity: int = Field(1, ge=1)


class Cart(Record):
    user_id: str
    items: List[CartItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class OrderItem(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    product_id: str
    product_name: str
    price: float = Field(..., ge=0)
    quantity: int = Field(..., ge=1)


class Order(Record):
    order_id: str
    user_id: str
    user_name: Optional[str] = None
    items: List[OrderItem]
    total_amount: float = Field(..., ge=0)
    created_at: datetime = Field(default_factory=utcnow)


# Request bodies

class ProductIn(CamelModel):
    name: Text
    category: Text
    price: float = Field(..., ge=0)
    description: Text
    image: Optional[str] = None

    @field_validator("image")
    @classmethod
    def blank_image_is_null(cls, v):
        if v is None:
            return None
        return v.strip() or None


class ProductUpdate(CamelModel):
    name: Optional[Text] = None
    category: Optional[Text] = None
    price: Optional[float] = Field(None, ge=0)
    description: Optional[Text] = None
    image: Optional[str] = None

    @field_validator("image")
    @classmethod
    def blank_image_is_null(cls, v):
        if v is None:
            return None
        return v.strip() or None


class CartItemIn(CamelModel):
    product_id: str
    quantity: int = Field(1, ge=1)


class CartQuantityIn(CamelModel):
    quantity: int
