"""
Ordering Service — Pydantic schemas for the menu catalog
"""
from decimal import Decimal

from pydantic import BaseModel, Field


class MenuItemCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, examples=["Phở Tái"])
    description: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0, decimal_places=2)
    category: str = Field(..., min_length=1, max_length=100, examples=["Pho"])
    image: str = Field(..., min_length=1, max_length=255)
    rating: float = Field(4.5, ge=0, le=5)
    prep_time: str = Field(..., min_length=1, max_length=64, examples=["15-20 min"])


class MenuItemResponse(MenuItemCreateRequest):
    id: str

    model_config = {"from_attributes": True}
