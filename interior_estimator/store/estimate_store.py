"""
Estimate Store - Persistence collaborator interface.

The calculation core reads and writes estimates only through this interface.
`JsonDirectoryStore` keeps one JSON document per estimate in the persisted
camelCase shape.
"""

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from ..models.estimate_schema import CatalogSection, Estimate
from ..pricing.totals import apply_totals

logger = logging.getLogger(__name__)


class EstimateStore(ABC):
    """Fetch and persist estimates by id."""

    @abstractmethod
    def get(self, estimate_id: str) -> Estimate:
        """Raises KeyError if the estimate does not exist."""

    @abstractmethod
    def save(self, estimate: Estimate) -> Estimate:
        """Persist an estimate after refreshing its totals; returns what was stored."""

    @abstractmethod
    def list_ids(self) -> List[str]:
        ...


class JsonDirectoryStore(EstimateStore):
    """One `<id>.json` file per estimate under `root`."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, estimate_id: str) -> Path:
        return self.root / f"{estimate_id}.json"

    def get(self, estimate_id: str) -> Estimate:
        path = self._path(estimate_id)
        if not path.exists():
            raise KeyError(f"No estimate with id {estimate_id!r}")
        return load_estimate(path)

    def save(self, estimate: Estimate) -> Estimate:
        now = datetime.now()
        stored = apply_totals(estimate).model_copy(update={
            "created_at": estimate.created_at or now,
            "updated_at": now,
        })
        path = self._path(stored.id)
        with open(path, "w") as f:
            json.dump(stored.to_record(), f, indent=2)
        logger.info(f"Saved estimate {stored.id} ({len(stored.items)} items) to {path}")
        return stored

    def list_ids(self) -> List[str]:
        return sorted(p.stem for p in self.root.glob("*.json"))


def load_json(path: Union[str, Path]) -> Any:
    with open(path) as f:
        return json.load(f)


def load_estimate(path: Union[str, Path]) -> Estimate:
    """Load one persisted estimate record."""
    return Estimate.from_record(load_json(path))


def load_catalog(path: Union[str, Path]) -> List[CatalogSection]:
    """
    Load catalog sections from YAML or JSON.

    Accepts a list of sections or a mapping with a `sections` list.
    """
    path = Path(path)
    with open(path) as f:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)

    if isinstance(data, dict):
        data = data.get("sections", [])
    sections = [CatalogSection.model_validate(entry) for entry in data or []]
    logger.debug(f"Loaded {len(sections)} catalog sections from {path}")
    return sections


def catalog_by_id(sections: List[CatalogSection]) -> Dict[str, CatalogSection]:
    return {section.id: section for section in sections}
