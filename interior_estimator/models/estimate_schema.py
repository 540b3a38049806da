"""
Estimate Schema
Pydantic models for interior estimates, their line items and the records
the documents are built from (clients, catalog sections, payments).

The persisted shape uses camelCase keys (`categoryName`, `totalAmount`, ...).
Models accept either the alias or the field name.

Numeric fields never reject input: incomplete or malformed values coming
from an editing form are coerced to zero. Unknown item types are rejected.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
)

from ..measurement.units import safe_float, safe_int


# =============================================================================
# ENUMS
# =============================================================================

class ItemType(str, Enum):
    """How a line item is measured and priced."""
    AREA = "area"        # sq ft from length x breadth patches
    PIECES = "pieces"    # countable pieces
    RUNNING = "running"  # running feet from linear segments


# Catalog sections created by older versions carry this value
LEGACY_TYPE_ALIASES = {
    "running_sq_feet": ItemType.RUNNING.value,
}


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class EstimateStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class PaymentMethod(str, Enum):
    CASH = "cash"
    BANK = "bank"


def normalize_item_type(value: Any) -> Any:
    """Lower-case a raw type tag and map legacy names."""
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, str):
        tag = value.strip().lower()
        return LEGACY_TYPE_ALIASES.get(tag, tag)
    return value


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _optional_dimension(value: Any) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return safe_float(value)


# =============================================================================
# BASE
# =============================================================================

class _Record(BaseModel):
    """Immutable record that round-trips through the persisted camelCase shape."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# MEASUREMENTS
# =============================================================================

class Measurement(_Record):
    """One rectangular patch (cm) contributing to an area item."""
    id: str = Field(default_factory=_new_id)
    length: float = 0.0
    breadth: float = 0.0

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v):
        return _new_id() if v in (None, "") else str(v)

    @field_validator("length", "breadth", mode="before")
    @classmethod
    def _coerce_dimension(cls, v):
        return safe_float(v)


class RunningMeasurement(_Record):
    """One linear segment (cm) contributing to a running item."""
    id: str = Field(default_factory=_new_id)
    length: float = 0.0

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v):
        return _new_id() if v in (None, "") else str(v)

    @field_validator("length", mode="before")
    @classmethod
    def _coerce_length(cls, v):
        return safe_float(v)


# =============================================================================
# LINE ITEMS
# =============================================================================

class LineItemBase(_Record):
    """
    Fields shared by every line item.

    `total_amount` is a cached value derived by the pricer; it is written
    only through `pricing.pricer.reprice`.
    """
    id: str = Field(default_factory=_new_id)
    section_id: str = Field(default="custom", alias="sectionId")
    section_name: str = Field(default="", alias="sectionName")
    category_name: str = Field(default="", alias="categoryName")
    subcategory_name: str = Field(default="", alias="subCategoryName")
    material_name: str = Field(default="", alias="materialName")
    description: str = ""
    amount_per_unit: float = Field(
        default=0.0,
        validation_alias=AliasChoices("amountPerUnit", "amountPerSqFt", "amount_per_unit"),
        serialization_alias="amountPerUnit",
    )
    total_amount: float = Field(default=0.0, alias="totalAmount")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v):
        return _new_id() if v in (None, "") else str(v)

    @field_validator(
        "section_id", "section_name", "category_name", "subcategory_name",
        "material_name", "description",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, v):
        return _text(v)

    @field_validator("amount_per_unit", "total_amount", mode="before")
    @classmethod
    def _coerce_money(cls, v):
        return safe_float(v)


class AreaItem(LineItemBase):
    """Priced per square foot of (optional) primary patch plus extra patches."""
    type: Literal["area"] = "area"
    length: Optional[float] = None
    breadth: Optional[float] = None
    measurements: List[Measurement] = Field(default_factory=list)

    @field_validator("length", "breadth", mode="before")
    @classmethod
    def _coerce_dimension(cls, v):
        return _optional_dimension(v)

    @field_validator("measurements", mode="before")
    @classmethod
    def _coerce_measurements(cls, v):
        return [] if v is None else v


class PiecesItem(LineItemBase):
    """Priced per piece."""
    type: Literal["pieces"] = "pieces"
    pieces: int = 0

    @field_validator("pieces", mode="before")
    @classmethod
    def _coerce_pieces(cls, v):
        return safe_int(v)


class RunningItem(LineItemBase):
    """Priced per running foot of (optional) primary length plus extra segments."""
    type: Literal["running"] = "running"
    running_length: Optional[float] = Field(default=None, alias="runningLength")
    running_measurements: List[RunningMeasurement] = Field(
        default_factory=list, alias="runningMeasurements"
    )

    @field_validator("running_length", mode="before")
    @classmethod
    def _coerce_length(cls, v):
        return _optional_dimension(v)

    @field_validator("running_measurements", mode="before")
    @classmethod
    def _coerce_measurements(cls, v):
        return [] if v is None else v


LineItem = Annotated[Union[AreaItem, PiecesItem, RunningItem], Field(discriminator="type")]

_LINE_ITEM_ADAPTER = TypeAdapter(LineItem)


def _normalize_item_payload(data: Any) -> Any:
    if isinstance(data, dict) and "type" in data:
        data = dict(data)
        data["type"] = normalize_item_type(data["type"])
    return data


def parse_line_item(data: Any) -> LineItemBase:
    """Validate one persisted item dict into its tagged model."""
    if isinstance(data, LineItemBase):
        return data
    return _LINE_ITEM_ADAPTER.validate_python(_normalize_item_payload(data))


# =============================================================================
# ESTIMATE
# =============================================================================

class Estimate(_Record):
    """
    Persisted estimate.

    `total_amount` caches the grand total; it is refreshed by
    `pricing.totals.apply_totals` before every save.
    """
    id: str = Field(
        default_factory=_new_id,
        validation_alias=AliasChoices("_id", "id"),
        serialization_alias="_id",
    )
    user_id: str = Field(default="", alias="userId")
    client_id: str = Field(default="", alias="clientId")
    estimate_name: str = Field(default="", alias="estimateName")
    items: List[LineItem] = Field(default_factory=list)
    total_amount: float = Field(default=0.0, alias="totalAmount")
    discount: float = 0.0
    discount_type: DiscountType = Field(default=DiscountType.PERCENTAGE, alias="discountType")
    status: EstimateStatus = EstimateStatus.PENDING
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v):
        return _new_id() if v in (None, "") else str(v)

    @field_validator("user_id", "client_id", "estimate_name", mode="before")
    @classmethod
    def _coerce_text(cls, v):
        return _text(v)

    @field_validator("items", mode="before")
    @classmethod
    def _normalize_items(cls, v):
        if v is None:
            return []
        return [_normalize_item_payload(item) for item in v]

    @field_validator("total_amount", "discount", mode="before")
    @classmethod
    def _coerce_money(cls, v):
        return safe_float(v)

    @field_validator("discount_type", mode="before")
    @classmethod
    def _default_discount_type(cls, v):
        return DiscountType.PERCENTAGE if v in (None, "") else v

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, v):
        return EstimateStatus.PENDING if v in (None, "") else v

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Estimate":
        return cls.model_validate(record)


# =============================================================================
# SUPPORTING RECORDS
# =============================================================================

class Client(_Record):
    id: str = Field(default="", validation_alias=AliasChoices("_id", "id"), serialization_alias="id")
    name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""

    @field_validator("id", "name", "email", "phone", "location", mode="before")
    @classmethod
    def _coerce_text(cls, v):
        return _text(v)


class CatalogSection(_Record):
    """A priced catalog entry used to seed new line items."""
    id: str = Field(default_factory=_new_id, validation_alias=AliasChoices("_id", "id"))
    category_id: str = Field(default="", alias="categoryId")
    category_name: str = Field(default="", alias="categoryName")
    subcategory_id: str = Field(default="", alias="subCategoryId")
    subcategory_name: str = Field(default="", alias="subCategoryName")
    material: str = ""
    description: str = ""
    amount: float = 0.0
    type: ItemType

    @field_validator(
        "id", "category_id", "category_name", "subcategory_id",
        "subcategory_name", "material", "description",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, v):
        return _text(v)

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce_amount(cls, v):
        return safe_float(v)

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, v):
        return normalize_item_type(v)


class PaymentPhase(_Record):
    """One scheduled client payment against an approved estimate."""
    id: str = Field(default_factory=_new_id, validation_alias=AliasChoices("_id", "id"))
    amount: float = 0.0
    status: PaymentStatus = PaymentStatus.PENDING
    method: Optional[PaymentMethod] = None
    date: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v):
        return _new_id() if v in (None, "") else str(v)

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce_amount(cls, v):
        return safe_float(v)

    @field_validator("method", mode="before")
    @classmethod
    def _empty_method(cls, v):
        return None if v in (None, "") else v


class BankAccount(_Record):
    bank_name: str = Field(default="", alias="bankName")
    account_name: str = Field(default="", alias="accountName")
    account_number: str = Field(default="", alias="accountNumber")
    account_type: str = Field(default="", alias="accountType")
    ifsc_code: str = Field(default="", alias="ifscCode")
    upi_id: str = Field(default="", alias="upiId")

    @field_validator(
        "bank_name", "account_name", "account_number", "account_type",
        "ifsc_code", "upi_id",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, v):
        return _text(v)
