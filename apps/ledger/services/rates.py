"""Material rate table used to price deposits."""

from decimal import Decimal
from typing import Dict, List, Mapping

from django.conf import settings

from apps.ledger.exceptions import UnknownMaterialError


class RateTable:
    """
    Points per kilogram for each accepted material.

    Built from ``settings.MATERIAL_RATES`` by default; tests and callers
    may pass their own mapping.
    """

    def __init__(self, rates: Mapping[str, int]):
        self._rates = {
            self.normalize(name): Decimal(str(rate))
            for name, rate in rates.items()
        }

    @classmethod
    def from_settings(cls) -> 'RateTable':
        return cls(settings.MATERIAL_RATES)

    @staticmethod
    def normalize(material: str) -> str:
        return (material or '').strip().lower()

    @property
    def materials(self) -> List[str]:
        return list(self._rates)

    def __contains__(self, material) -> bool:
        return self.normalize(material) in self._rates

    def rate_per_kg(self, material: str) -> Decimal:
        """
        Return the points-per-kg rate for a material.

        Raises:
            UnknownMaterialError: If the material is not in the table
        """
        try:
            return self._rates[self.normalize(material)]
        except KeyError:
            raise UnknownMaterialError(f"Unknown material: {material!r}")

    def points_for(self, material: str, weight_kg) -> int:
        """
        Points for a weight of material, truncated toward zero.

        The weight goes through its decimal string form so that
        0.33 kg at 10/kg yields 3 rather than a float rounding artefact.
        """
        rate = self.rate_per_kg(material)
        return int(Decimal(str(weight_kg)) * rate)

    def as_dict(self) -> Dict[str, int]:
        return {name: int(rate) for name, rate in self._rates.items()}
