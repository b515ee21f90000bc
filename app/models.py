# app/models.py
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProductStatus(str, Enum):
    ACTIVE = "ACTIVE"
    DRAFT = "DRAFT"
    ARCHIVED = "ARCHIVED"


class ProductImage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str
    alt_text: Optional[str] = Field(default=None, alias="altText")


class ProductVariant(BaseModel):
    id: str
    price: Optional[Decimal] = None
    barcode: Optional[str] = None


class Product(BaseModel):
    id: str
    title: str = ""
    handle: Optional[str] = None
    # kept as a plain string: the upstream may add statuses we don't know about
    status: str = ProductStatus.DRAFT.value
    image: Optional[ProductImage] = None
    variant: Optional[ProductVariant] = None


class PageInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    has_next_page: bool = Field(default=False, alias="hasNextPage")
    end_cursor: Optional[str] = Field(default=None, alias="endCursor")


class OutcomeKind(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"


class ListOutcome(BaseModel):
    """Result of one listing call: data, no data, or failure with its cause."""

    kind: OutcomeKind
    products: List[Product] = Field(default_factory=list)
    page_info: Optional[PageInfo] = None
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.kind is OutcomeKind.FAILED
