from __future__ import annotations

from typing import Any, Dict, List, Literal
from pydantic import BaseModel, Field


class CategoryRow(BaseModel):
    id: str = ""
    category: str = ""
    photo_url: str = ""
    description: str = ""
    price_18mm: str = ""
    price_12mm: str = ""
    price_8mm: str = ""
    price_6mm: str = ""
    stock: str = ""
    visible: str = Field(default="true")


class CatalogItem(BaseModel):
    record: Dict[str, str]
    description_html: str = ""


class CatalogResponse(BaseModel):
    items: List[CatalogItem] = Field(default_factory=list)
    total_rows: int = 0
    visible_rows: int = 0


class AdminCommand(BaseModel):
    action: Literal["upsert", "delete"]
    payload: Dict[str, Any] = Field(default_factory=dict)


class AdminResult(BaseModel):
    ok: bool
    message: str
    payload: Dict[str, Any] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    ok: bool = True
