"""Estimate data models."""

from .estimate_schema import (
    AreaItem,
    BankAccount,
    CatalogSection,
    Client,
    DiscountType,
    Estimate,
    EstimateStatus,
    ItemType,
    LineItem,
    LineItemBase,
    Measurement,
    PaymentMethod,
    PaymentPhase,
    PaymentStatus,
    PiecesItem,
    RunningItem,
    RunningMeasurement,
    normalize_item_type,
    parse_line_item,
)

__all__ = [
    "AreaItem",
    "BankAccount",
    "CatalogSection",
    "Client",
    "DiscountType",
    "Estimate",
    "EstimateStatus",
    "ItemType",
    "LineItem",
    "LineItemBase",
    "Measurement",
    "PaymentMethod",
    "PaymentPhase",
    "PaymentStatus",
    "PiecesItem",
    "RunningItem",
    "RunningMeasurement",
    "normalize_item_type",
    "parse_line_item",
]
