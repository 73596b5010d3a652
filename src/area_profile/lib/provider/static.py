"""Static metric provider serving bundles from a JSON document.

Document shape::

    {"<unit or parent code>": {"<family>": {<fields>}, ...}, ...}
"""

import json
from pathlib import Path

from area_profile.lib.provider.base import BaseMetricProvider, MetricProviderError


class StaticMetricProvider(BaseMetricProvider):
    """Metric provider over an in-memory mapping."""

    def __init__(self, data: dict[str, dict[str, dict]]) -> None:
        self._data = data

    @property
    def provider_name(self) -> str:
        return "static"

    @classmethod
    def from_file(cls, path: Path) -> "StaticMetricProvider":
        """Load a provider from a JSON file.

        Raises:
            ValueError: If the file is not a JSON object.
        """
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            msg = f"Metrics file must contain a JSON object keyed by area code: {path}"
            raise ValueError(msg)
        return cls(data)

    async def fetch_family(self, family: str, unit_code: str, parent_code: str | None = None) -> dict | None:
        unit = self._data.get(unit_code)
        if unit is None:
            return None
        value = unit.get(family)
        if value is not None and not isinstance(value, dict):
            raise MetricProviderError(self.provider_name, f"Family {family} for {unit_code} is not an object")
        return value
