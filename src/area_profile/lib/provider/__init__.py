"""Metric provider library — per-unit statistics sources.

Public API:
    - BaseMetricProvider: Abstract provider; fetch() builds a MetricBundle
    - HttpMetricProvider: JSON-over-HTTP statistics service
    - StaticMetricProvider: Bundles from a JSON document
    - MetricProviderError: Provider failure
    - get_metric_provider: Build the provider selected by settings
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from area_profile.lib.provider.base import BaseMetricProvider, MetricProviderError
from area_profile.lib.provider.http import HttpMetricProvider
from area_profile.lib.provider.static import StaticMetricProvider

if TYPE_CHECKING:
    from area_profile.core.config import Settings


def get_metric_provider(settings: Settings, metrics_file: Path | None = None) -> BaseMetricProvider:
    """Build a metric provider.

    A metrics file takes precedence over the configured HTTP provider.

    Args:
        settings: Application settings.
        metrics_file: Optional JSON metrics document.

    Returns:
        A configured BaseMetricProvider.

    Raises:
        ValueError: If neither a metrics file nor a provider URL is configured.
    """
    if metrics_file is not None:
        return StaticMetricProvider.from_file(metrics_file)
    if settings.metric_provider_base_url:
        return HttpMetricProvider(
            settings.metric_provider_base_url,
            timeout=settings.metric_provider_timeout,
            api_key=settings.metric_provider_api_key,
        )
    msg = "No metric provider configured: pass a metrics file or set METRIC_PROVIDER_BASE_URL"
    raise ValueError(msg)


__all__ = [
    "BaseMetricProvider",
    "HttpMetricProvider",
    "MetricProviderError",
    "StaticMetricProvider",
    "get_metric_provider",
]
