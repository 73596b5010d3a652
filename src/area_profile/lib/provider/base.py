"""Abstract metric provider interface for pluggable statistics sources."""

import asyncio
from abc import ABC, abstractmethod

from loguru import logger
from pydantic import ValidationError

from area_profile.lib.metrics.bundle import MetricBundle
from area_profile.lib.metrics.families import FAMILY_MODELS, FAMILY_NAMES, MetricFamily


class MetricProviderError(Exception):
    """Raised when a metric provider experiences a transport or service error.

    Distinguishes provider failures from a successful response with no
    data (which returns None).

    Args:
        provider_name: Name of the failing provider.
        message: Human-readable error description.
        status_code: Optional HTTP status code from the provider.
    """

    def __init__(self, provider_name: str, message: str, status_code: int | None = None) -> None:
        self.provider_name = provider_name
        self.message = message
        self.status_code = status_code
        super().__init__(f"{provider_name}: {message}")


class BaseMetricProvider(ABC):
    """Abstract metric provider. All providers must implement ``fetch_family``."""

    families: tuple[str, ...] = tuple(FAMILY_NAMES)

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Unique name identifying this provider."""

    @abstractmethod
    async def fetch_family(self, family: str, unit_code: str, parent_code: str | None = None) -> dict | None:
        """Fetch one metric family for one area.

        Args:
            family: Family name (a key of FAMILY_MODELS).
            unit_code: Base unit or parent area code.
            parent_code: Parent code of the unit, when known.

        Returns:
            Raw family fields, or None if the provider has no data.

        Raises:
            MetricProviderError: On transport or service errors.
        """

    async def fetch(self, unit_code: str, parent_code: str | None = None) -> MetricBundle:
        """Fetch every family for one area concurrently.

        A failing family is recorded in ``failed_families`` and left as
        None; the other families are unaffected.

        Args:
            unit_code: Base unit or parent area code.
            parent_code: Parent code of the unit, when known.

        Returns:
            MetricBundle with one optional value per family.
        """
        results: dict[str, MetricFamily | None] = {}
        failures: dict[str, str] = {}

        async def _one(family: str) -> None:
            try:
                raw = await self.fetch_family(family, unit_code, parent_code)
                results[family] = None if raw is None else FAMILY_MODELS[family].model_validate(raw)
            except (MetricProviderError, ValidationError) as e:
                logger.warning(f"{self.provider_name}: family {family} unavailable for {unit_code}: {e}")
                results[family] = None
                failures[family] = str(e)
            except Exception as e:
                logger.exception(f"{self.provider_name}: family {family} failed for {unit_code}")
                results[family] = None
                failures[family] = f"{type(e).__name__}: {e}"

        async with asyncio.TaskGroup() as tg:
            for family in self.families:
                tg.create_task(_one(family))

        return MetricBundle(unit_code=unit_code, parent_code=parent_code, failed_families=failures, **results)

    async def fetch_parent(self, parent_code: str) -> MetricBundle:
        """Fetch the comparison bundle for a parent area."""
        return await self.fetch(parent_code)
