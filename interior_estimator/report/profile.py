"""
Document Profile - Company identity, terms, page geometry and money
formatting for generated documents.

Loaded from rules/document_profile.yaml. A missing or malformed file falls
back to the built-in defaults below.
"""

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .. import RULES_DIR
from ..measurement.units import RoundingMode

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_PATH = RULES_DIR / "document_profile.yaml"


@dataclass(frozen=True)
class PageGeometry:
    """
    Page layout constants in millimetres, measured from the top of an A4 page.
    """
    frame: Tuple[float, float, float, float] = (5.0, 5.0, 200.0, 287.0)  # x, y, w, h
    first_page_start_y: float = 150.0
    page_start_y: float = 20.0
    page_end_y: float = 280.0

    # Height estimate of a subcategory block
    row_height: float = 12.0
    subcategory_spacing: float = 15.0
    block_allowance: float = 20.0

    min_space_needed: float = 50.0
    category_spacing: float = 20.0
    subcategory_header_advance: float = 10.0
    table_gap: float = 8.0
    totals_threshold: float = 40.0
    footer_y: float = 290.0

    # Left/right table margin
    table_margin: float = 15.0

    @property
    def usable_height(self) -> float:
        return self.page_end_y - self.page_start_y

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PageGeometry":
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in (data or {}).items() if k in known}
        if "frame" in values:
            values["frame"] = tuple(float(v) for v in values["frame"])
        for key, value in values.items():
            if key != "frame":
                values[key] = float(value)
        return cls(**values)


DEFAULT_TERMS = [
    "Price includes materials, transport, labor and service",
    "50% payment needed upfront with order",
    "25% payment after basic structure work",
    "Final 25% payment after finishing work",
    "Extra work costs extra",
]


@dataclass(frozen=True)
class DocumentProfile:
    """Everything a rendered document needs besides the estimate itself."""
    company_name: str = "Takshaga Spatial Solutions"
    address_lines: List[str] = field(default_factory=lambda: [
        "2nd Floor, Opp. Panchayat Building",
        "Upputhara P.O, Idukki District",
        "Kerala - 685505, India",
    ])
    website: str = "www.takshaga.com"
    email: str = "info@takshaga.com"
    phone_line: str = "+91 98466 60624 | +91 95443 44332"
    terms: List[str] = field(default_factory=lambda: list(DEFAULT_TERMS))
    customer_signature_label: str = "Customer Signature"
    company_signature_label: str = "For Takshaga"

    # Money formatting
    currency_prefix: str = "Rs "
    receipt_currency_prefix: str = "Rs. "
    table_decimals: int = 1
    totals_decimals: int = 2
    receipt_decimals: int = 0

    area_display_rounding: RoundingMode = RoundingMode.WHOLE
    geometry: PageGeometry = field(default_factory=PageGeometry)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DocumentProfile":
        """Build from a parsed YAML mapping; missing keys keep their defaults."""
        company = data.get("company", {}) or {}
        money = data.get("money", {}) or {}
        signatures = data.get("signatures", {}) or {}
        defaults = cls()

        return cls(
            company_name=company.get("name", defaults.company_name),
            address_lines=list(company.get("address_lines", defaults.address_lines)),
            website=company.get("website", defaults.website),
            email=company.get("email", defaults.email),
            phone_line=company.get("phone_line", defaults.phone_line),
            terms=list(data.get("terms", defaults.terms)),
            customer_signature_label=signatures.get("customer", defaults.customer_signature_label),
            company_signature_label=signatures.get("company", defaults.company_signature_label),
            currency_prefix=money.get("currency_prefix", defaults.currency_prefix),
            receipt_currency_prefix=money.get("receipt_currency_prefix", defaults.receipt_currency_prefix),
            table_decimals=int(money.get("table_decimals", defaults.table_decimals)),
            totals_decimals=int(money.get("totals_decimals", defaults.totals_decimals)),
            receipt_decimals=int(money.get("receipt_decimals", defaults.receipt_decimals)),
            area_display_rounding=RoundingMode(
                data.get("area_display_rounding", defaults.area_display_rounding)
            ),
            geometry=PageGeometry.from_dict(data.get("geometry", {}) or {}),
        )


def load_document_profile(path: Optional[Path] = None) -> DocumentProfile:
    """
    Load the document profile from YAML.

    Args:
        path: Profile file (defaults to rules/document_profile.yaml)

    Returns:
        DocumentProfile; built-in defaults if the file cannot be used
    """
    profile_path = Path(path) if path else DEFAULT_PROFILE_PATH
    try:
        with open(profile_path, "r") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"expected a mapping, got {type(data).__name__}")
        return DocumentProfile.from_dict(data)

    except (OSError, yaml.YAMLError, ValueError, TypeError) as e:
        logger.warning(f"Could not load document profile {profile_path}: {e}")
        return DocumentProfile()
