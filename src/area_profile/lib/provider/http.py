"""HTTP metric provider.

Reads metric families from a statistics service exposing one JSON
document per unit and family at ``{base_url}/units/{code}/{family}``.
"""

import httpx
from loguru import logger

from area_profile.lib.provider.base import BaseMetricProvider, MetricProviderError

DEFAULT_TIMEOUT = 45.0


class HttpMetricProvider(BaseMetricProvider):
    """Metric provider backed by a JSON-over-HTTP statistics service."""

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT, api_key: str | None = None) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._api_key = api_key

    @property
    def provider_name(self) -> str:
        return "http"

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    async def fetch_family(self, family: str, unit_code: str, parent_code: str | None = None) -> dict | None:
        """Fetch one family from the statistics service.

        Returns:
            Family fields, or None on HTTP 404 or an empty body.

        Raises:
            MetricProviderError: On transport or service errors.
        """
        url = f"{self._base_url}/units/{unit_code}/{family}"
        params = {"parent": parent_code} if parent_code else None

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(url, params=params, headers=self._headers())
                if response.status_code == 404:
                    return None
                response.raise_for_status()

            data = response.json()
        except httpx.TimeoutException as e:
            logger.warning(f"Metric provider timeout for {unit_code}/{family}")
            raise MetricProviderError(self.provider_name, "Metric request timed out") from e
        except httpx.HTTPStatusError as e:
            logger.warning(f"Metric provider HTTP error {e.response.status_code} for {unit_code}/{family}")
            raise MetricProviderError(
                self.provider_name,
                f"Provider returned HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.ConnectError as e:
            logger.warning("Metric provider connection error")
            raise MetricProviderError(self.provider_name, "Connection to metric provider failed") from e
        except httpx.HTTPError as e:
            logger.warning(f"Metric provider transport error for {unit_code}/{family}: {e}")
            raise MetricProviderError(self.provider_name, f"Metric request failed: {e}") from e
        except ValueError as e:
            raise MetricProviderError(self.provider_name, f"Failed to parse response: {e}") from e

        if not data:
            return None
        if not isinstance(data, dict):
            msg = f"Expected JSON object for {family}, got {type(data).__name__}"
            raise MetricProviderError(self.provider_name, msg)
        return data
