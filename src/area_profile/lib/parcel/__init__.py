"""Parcel lookup library — property designation to a query polygon.

Public API:
    - parse_designation / ParcelDesignation: Designation parsing
    - ParcelRegistryClient / ParcelReference: Registry search
    - ParcelLookupError: Registry failure
    - point_to_polygon / meters_to_degrees: Point buffering
    - validate_service_area_coordinates: Sweden bounding box check
"""

from area_profile.lib.parcel.client import ParcelLookupError, ParcelReference, ParcelRegistryClient, sweref_to_wgs84
from area_profile.lib.parcel.designation import ParcelDesignation, parse_designation
from area_profile.lib.parcel.point import meters_to_degrees, point_to_polygon, validate_service_area_coordinates

__all__ = [
    "ParcelDesignation",
    "ParcelLookupError",
    "ParcelReference",
    "ParcelRegistryClient",
    "meters_to_degrees",
    "parse_designation",
    "point_to_polygon",
    "sweref_to_wgs84",
    "validate_service_area_coordinates",
]
