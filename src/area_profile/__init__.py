"""Area profile — polygon-to-statistical-unit resolution and metric aggregation."""

__version__ = "0.1.0"
