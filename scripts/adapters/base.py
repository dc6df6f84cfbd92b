"""Base adapter class for vendor driver pack records."""

from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional

from pydantic import ValidationError

from models import DriverPack, ModelInfo


class BaseAdapter(ABC):
    """Turn one vendor's raw records into canonical ``DriverPack`` records.

    Adapters are pure: they never fetch anything and never print. Raw records
    that cannot produce a valid pack (no absolute download URL, bad field
    values) are dropped and counted in ``rejected``.
    """

    manufacturer: str = "unknown"
    catalog_url: str = ""

    def __init__(self):
        self.rejected = 0

    @abstractmethod
    def adapt(self, raw: Any) -> list[DriverPack]:
        """Convert raw vendor records into canonical records.

        Args:
            raw: The vendor's parsed record set.

        Returns:
            List of DriverPack objects in source order.
        """
        pass

    def build(self, **fields) -> Optional[DriverPack]:
        """Construct a DriverPack, or count a rejection if it is invalid."""
        if not fields.get("download_url"):
            self.rejected += 1
            return None
        try:
            return DriverPack(manufacturer=self.manufacturer, **fields)
        except ValidationError:
            self.rejected += 1
            return None


def unique_models(models: Iterable[ModelInfo]) -> list[ModelInfo]:
    """Drop repeated models, keeping first-seen order."""
    seen = set()
    result = []
    for model in models:
        key = (model.name, model.system_id)
        if key in seen:
            continue
        seen.add(key)
        result.append(model)
    return result
