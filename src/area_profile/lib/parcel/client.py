"""Parcel registry client.

Looks up a property designation in the Lantmäteriet register
designation service (OAuth2 client credentials) and returns the
parcel's centre point in WGS84.
"""

import time
from dataclasses import dataclass

import httpx
from loguru import logger
from pyproj import Transformer

from area_profile.lib.parcel.designation import ParcelDesignation

DEFAULT_TIMEOUT = 10.0
DEFAULT_SCOPE = "registerbeteckning_direkt_v5_read"
# Refresh the token this many seconds before it expires
TOKEN_EXPIRY_MARGIN = 60
SOURCE_SRID = 3006

_to_wgs84 = Transformer.from_crs(f"EPSG:{SOURCE_SRID}", "EPSG:4326", always_xy=True)


class ParcelLookupError(Exception):
    """Raised when the parcel registry fails or rejects credentials.

    Args:
        message: Human-readable error description.
        status_code: Optional HTTP status code from the registry.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(f"parcel registry: {message}")


@dataclass(frozen=True)
class ParcelReference:
    """A parcel found in the registry."""

    designation: str
    object_id: str | None
    municipality: str | None
    status: str | None
    longitude: float | None = None
    latitude: float | None = None

    @property
    def has_location(self) -> bool:
        return self.longitude is not None and self.latitude is not None


def sweref_to_wgs84(easting: float, northing: float) -> tuple[float, float]:
    """Transform a SWEREF99 TM coordinate to WGS84 (lon, lat)."""
    lon, lat = _to_wgs84.transform(easting, northing)
    return lon, lat


class ParcelRegistryClient:
    """Async client for the parcel registry designation search."""

    def __init__(
        self,
        token_url: str,
        search_url: str,
        client_id: str,
        client_secret: str,
        timeout: float = DEFAULT_TIMEOUT,
        scope: str = DEFAULT_SCOPE,
    ) -> None:
        self._token_url = token_url
        self._search_url = search_url.rstrip("/")
        self._client_id = client_id
        self._client_secret = client_secret
        self._timeout = timeout
        self._scope = scope
        self._token: str | None = None
        self._token_expires: float = 0.0

    async def _access_token(self) -> str:
        if self._token is not None and time.monotonic() < self._token_expires:
            return self._token

        logger.debug("Requesting parcel registry access token")
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(
                    self._token_url,
                    data={"grant_type": "client_credentials", "scope": self._scope},
                    auth=(self._client_id, self._client_secret),
                )
                response.raise_for_status()
            data = response.json()
            token = data["access_token"]
            expires_in = float(data.get("expires_in", 3600))
        except httpx.HTTPStatusError as e:
            raise ParcelLookupError(
                f"Authentication failed with HTTP {e.response.status_code}", status_code=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            raise ParcelLookupError(f"Token request failed: {e}") from e
        except (KeyError, ValueError, TypeError) as e:
            raise ParcelLookupError(f"Malformed token response: {e}") from e

        self._token = token
        self._token_expires = time.monotonic() + max(0.0, expires_in - TOKEN_EXPIRY_MARGIN)
        logger.info(f"Parcel registry token obtained, expires in {expires_in:.0f}s")
        return token

    async def search(self, designation: ParcelDesignation | str) -> ParcelReference | None:
        """Search the registry for a property designation.

        Args:
            designation: Parsed designation or raw designation text.

        Returns:
            The first matching parcel, or None if the registry has no match.

        Raises:
            ParcelLookupError: On authentication failure or transport errors.
        """
        name = str(designation)
        token = await self._access_token()

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(
                    f"{self._search_url}/namn",
                    params={"namn": name, "srid": SOURCE_SRID},
                    headers={"Authorization": f"Bearer {token}", "Accept": "application/json"},
                )
                if response.status_code == 404:
                    logger.info(f"Parcel not found: {name}")
                    return None
                response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 401:
                self._token = None
                raise ParcelLookupError("Authentication failed", status_code=401) from e
            raise ParcelLookupError(
                f"Registry returned HTTP {e.response.status_code}", status_code=e.response.status_code
            ) from e
        except httpx.TimeoutException as e:
            raise ParcelLookupError("Parcel search timed out") from e
        except httpx.HTTPError as e:
            raise ParcelLookupError(f"Parcel search failed: {e}") from e
        except ValueError as e:
            raise ParcelLookupError(f"Failed to parse response: {e}") from e

        return self._parse_response(data, name)

    def _parse_response(self, data: dict, name: str) -> ParcelReference | None:
        """Parse a FeatureCollection search response into a ParcelReference."""
        features = (data or {}).get("features") or []
        if not features:
            return None

        props = features[0].get("properties") or {}
        designations = props.get("registerbeteckning") or []
        if not designations:
            return None
        record = designations[0]

        reference = props.get("registerenhetsreferens") or {}
        areas = reference.get("registerenhetsomrade") or []
        centre = (areas[0].get("centralpunktskoordinat") if areas else None) or {}
        coords = centre.get("coordinates") or []

        longitude = latitude = None
        if len(coords) == 2:
            longitude, latitude = sweref_to_wgs84(float(coords[0]), float(coords[1]))

        parts = [record.get("registeromrade"), record.get("trakt")]
        block = record.get("block")
        unit = record.get("enhet")
        if block is not None:
            parts.append(f"{block}:{unit}" if unit is not None else str(block))
        label = " ".join(str(p) for p in parts if p) or name

        return ParcelReference(
            designation=label,
            object_id=reference.get("objektidentitet"),
            municipality=record.get("registeromrade"),
            status=record.get("beteckningsstatus"),
            longitude=longitude,
            latitude=latitude,
        )
