"""
Pydantic models for the sales-rep stock-detail feed.

The inventory query service returns one block per item with one row per
sales rep holding that item. Field names differ between exports
(`_id` vs `id`, `itemCode` vs `code`, `qtyOnHandPrimary` vs `primary`),
so every field accepts its known aliases.

Validation is permissive: a stock count must never be blocked by a bad
feed value, so malformed numbers become 0, missing text becomes "" and
non-object values become empty models.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from .units import to_number


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _optional_text(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _optional_number(value: Any) -> int | float | None:
    # Absent stays absent so a row-level factor can fall back to the item's
    if value is None:
        return None
    return to_number(value)


class FeedModel(BaseModel):
    """Base for feed models: ignore unknown keys, tolerate non-objects."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def coerce_mapping(cls, data: Any) -> Any:
        if isinstance(data, (dict, BaseModel)):
            return data
        return {}


class BrandRef(FeedModel):
    id: str = Field(default="", validation_alias=AliasChoices("id", "_id"))
    name: str = ""
    code: str = Field(default="", validation_alias=AliasChoices("code", "brandCode", "brand_code"))

    @field_validator("id", "name", "code", mode="before")
    @classmethod
    def clean_text(cls, value: Any) -> str:
        return _text(value)


class SalesRepRef(FeedModel):
    id: str = Field(default="", validation_alias=AliasChoices("id", "_id"))
    name: str = ""
    code: str = Field(default="", validation_alias=AliasChoices("code", "repCode", "rep_code"))
    status: str = "active"

    @field_validator("id", "name", "code", mode="before")
    @classmethod
    def clean_text(cls, value: Any) -> str:
        return _text(value)

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, value: Any) -> str:
        return _text(value) or "active"


class ItemInfo(FeedModel):
    """Item master data carried on each stock-detail block."""

    id: str = Field(default="", validation_alias=AliasChoices("id", "_id"))
    name: str = ""
    code: str = Field(default="", validation_alias=AliasChoices("code", "itemCode", "item_code"))
    brand: BrandRef = Field(default_factory=BrandRef)
    primary_uom: str = Field(default="", validation_alias=AliasChoices("primary_uom", "primaryUom"))
    base_uom: str | None = Field(default=None, validation_alias=AliasChoices("base_uom", "baseUom"))
    factor_to_base: int | float | None = Field(
        default=None, validation_alias=AliasChoices("factor_to_base", "factorToBase")
    )

    @field_validator("id", "name", "code", "primary_uom", mode="before")
    @classmethod
    def clean_text(cls, value: Any) -> str:
        return _text(value)

    @field_validator("base_uom", mode="before")
    @classmethod
    def clean_base_uom(cls, value: Any) -> str | None:
        return _optional_text(value)

    @field_validator("factor_to_base", mode="before")
    @classmethod
    def coerce_factor(cls, value: Any) -> int | float | None:
        return _optional_number(value)


class QtyOnHand(FeedModel):
    primary: int | float = Field(default=0, validation_alias=AliasChoices("primary", "qtyOnHandPrimary"))
    base: int | float = Field(default=0, validation_alias=AliasChoices("base", "qtyOnHandBase"))

    @field_validator("primary", "base", mode="before")
    @classmethod
    def coerce_qty(cls, value: Any) -> int | float:
        return to_number(value)


class UomOverride(FeedModel):
    primary_uom: str | None = Field(default=None, validation_alias=AliasChoices("primary_uom", "primaryUom"))
    base_uom: str | None = Field(default=None, validation_alias=AliasChoices("base_uom", "baseUom"))

    @field_validator("primary_uom", "base_uom", mode="before")
    @classmethod
    def clean_labels(cls, value: Any) -> str | None:
        return _optional_text(value)


class StockRow(FeedModel):
    """One sales rep's holding of an item."""

    id: str = Field(default="", validation_alias=AliasChoices("id", "_id"))
    sales_rep: SalesRepRef = Field(
        default_factory=SalesRepRef, validation_alias=AliasChoices("sales_rep", "salesRep")
    )
    qty_on_hand: QtyOnHand = Field(
        default_factory=QtyOnHand, validation_alias=AliasChoices("qty_on_hand", "qtyOnHand")
    )
    uom: UomOverride = Field(default_factory=UomOverride)
    factor_to_base: int | float | None = Field(
        default=None, validation_alias=AliasChoices("factor_to_base", "factorToBase")
    )
    updated_at: str | None = Field(default=None, validation_alias=AliasChoices("updated_at", "updatedAt"))

    @field_validator("id", mode="before")
    @classmethod
    def clean_id(cls, value: Any) -> str:
        return _text(value)

    @field_validator("updated_at", mode="before")
    @classmethod
    def clean_updated_at(cls, value: Any) -> str | None:
        return _optional_text(value)

    @field_validator("factor_to_base", mode="before")
    @classmethod
    def coerce_factor(cls, value: Any) -> int | float | None:
        return _optional_number(value)


class StockDetailBlock(FeedModel):
    """Feed block: an item and every sales-rep row holding it."""

    item: ItemInfo = Field(default_factory=ItemInfo)
    rows: list[StockRow] = Field(default_factory=list)

    @field_validator("rows", mode="before")
    @classmethod
    def coerce_rows(cls, value: Any) -> list:
        return value if isinstance(value, list) else []


def parse_stock_details(payload: Any) -> list[StockDetailBlock]:
    """Validate a raw feed payload (a list, or a {"data": [...]} envelope)."""
    if isinstance(payload, dict):
        payload = payload.get("data")
    if not isinstance(payload, list):
        return []
    return [StockDetailBlock.model_validate(block) for block in payload]


def parse_sales_reps(payload: Any) -> list[SalesRepRef]:
    """Validate a sales-rep master list, keeping active reps only."""
    if isinstance(payload, dict):
        payload = payload.get("data")
    if not isinstance(payload, list):
        return []
    reps = [SalesRepRef.model_validate(rep) for rep in payload]
    return [rep for rep in reps if rep.status == "active"]
