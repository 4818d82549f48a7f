"""
Elevation providers.

Interchangeable suppliers of raw elevation values behind one interface.
Each lookup() call is one upstream request (or one sweep over cached
tiles) and returns exactly one value per input point.

Sources:
- OpenElevationProvider: open-elevation compatible lookup API
- TerrainRGBProvider: Mapbox terrain-rgb raster tiles
  elevation (m) = (R * 256 * 256 + G * 256 + B) / 10 - 10000
"""

import io
import logging
import math
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Sequence

import httpx
from PIL import Image, UnidentifiedImageError

from trailstats.config import settings
from trailstats.shared import Point, ElevationSource

logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================

class ElevationError(Exception):
    """Base elevation error."""
    pass


class ElevationProviderError(ElevationError):
    """Upstream supplier failed or returned unusable data."""
    pass


# =============================================================================
# Base provider
# =============================================================================

class ElevationProvider(ABC):
    """
    Base class for elevation suppliers.

    An httpx.AsyncClient may be injected (shared connection pool, tests);
    otherwise a short-lived client is opened per lookup.
    """

    source: ElevationSource

    def __init__(
        self,
        timeout: float = settings.elevation_request_timeout_seconds,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.timeout = timeout
        self._client = client

    @asynccontextmanager
    async def _client_scope(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                yield client

    @abstractmethod
    async def lookup(self, points: Sequence[Point]) -> list[float]:
        """
        Elevation in meters for each point, same order.

        Raises:
            ElevationProviderError: On any network or payload failure
        """


# =============================================================================
# Lookup API
# =============================================================================

class OpenElevationProvider(ElevationProvider):
    """Open-elevation lookup API (POST, up to 100 locations per request)."""

    source = ElevationSource.API

    def __init__(
        self,
        api_url: str = settings.elevation_api_url,
        timeout: float = settings.elevation_request_timeout_seconds,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(timeout=timeout, client=client)
        self.api_url = api_url

    async def lookup(self, points: Sequence[Point]) -> list[float]:
        payload = {
            "locations": [
                {"latitude": p.lat, "longitude": p.lng} for p in points
            ]
        }

        try:
            async with self._client_scope() as client:
                response = await client.post(
                    self.api_url,
                    json=payload,
                    headers={"Accept": "application/json"},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            raise ElevationProviderError(f"Elevation API request failed: {e}") from e
        except ValueError as e:
            raise ElevationProviderError(f"Elevation API returned invalid JSON: {e}") from e

        results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(results, list):
            raise ElevationProviderError("Invalid API response format")

        try:
            return [
                float((result or {}).get("elevation") or 0)
                for result in results
            ]
        except (TypeError, ValueError, AttributeError) as e:
            raise ElevationProviderError(f"Elevation API returned a malformed result: {e}") from e


# =============================================================================
# Terrain-RGB tiles
# =============================================================================

TILE_SIZE = 256


def lat_lng_to_tile(lat: float, lng: float, zoom: int) -> tuple[int, int]:
    """XYZ tile containing a coordinate (Web Mercator)."""
    scale = 2 ** zoom
    x = math.floor((lng + 180) / 360 * scale)
    lat_rad = math.radians(lat)
    y = math.floor(
        (1 - math.log(math.tan(lat_rad) + 1 / math.cos(lat_rad)) / math.pi) / 2 * scale
    )
    return x, y


def lat_lng_to_pixel_in_tile(lat: float, lng: float, zoom: int) -> tuple[float, float]:
    """Pixel offset of a coordinate inside its tile."""
    scale = 2 ** zoom * TILE_SIZE
    world_x = (lng + 180) / 360 * scale
    sin_lat = math.sin(math.radians(lat))
    world_y = (0.5 - math.log((1 + sin_lat) / (1 - sin_lat)) / (4 * math.pi)) * scale
    return world_x % TILE_SIZE, world_y % TILE_SIZE


def decode_elevation(r: int, g: int, b: int) -> float:
    """Decode a terrain-rgb pixel to meters."""
    return (r * 256 * 256 + g * 256 + b) / 10 - 10000


class TerrainRGBProvider(ElevationProvider):
    """
    Samples elevation from terrain-rgb PNG tiles.

    Tiles are cached on the instance for its lifetime, so one provider
    should be reused across the batches of a track.
    """

    source = ElevationSource.TERRAIN_RGB

    def __init__(
        self,
        token: Optional[str] = settings.mapbox_token,
        zoom: int = settings.terrain_zoom,
        tile_url: str = settings.terrain_tile_url,
        timeout: float = settings.elevation_request_timeout_seconds,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(timeout=timeout, client=client)
        self.token = token
        self.zoom = zoom
        self.tile_url = tile_url
        self._tiles: dict[tuple[int, int, int], Image.Image] = {}

    async def _get_tile(self, client: httpx.AsyncClient, x: int, y: int) -> Image.Image:
        key = (self.zoom, x, y)
        if key in self._tiles:
            return self._tiles[key]

        url = self.tile_url.format(z=self.zoom, x=x, y=y)
        try:
            response = await client.get(url, params={"access_token": self.token})
            response.raise_for_status()
            tile = Image.open(io.BytesIO(response.content)).convert("RGB")
        except (httpx.HTTPError, UnidentifiedImageError, OSError) as e:
            raise ElevationProviderError(f"Failed to fetch terrain tile {key}: {e}") from e

        self._tiles[key] = tile
        return tile

    async def lookup(self, points: Sequence[Point]) -> list[float]:
        if not self.token:
            raise ElevationProviderError("Terrain-RGB source requires MAPBOX_TOKEN")

        elevations = []
        async with self._client_scope() as client:
            for p in points:
                try:
                    x, y = lat_lng_to_tile(p.lat, p.lng, self.zoom)
                    px, py = lat_lng_to_pixel_in_tile(p.lat, p.lng, self.zoom)
                except (ValueError, ZeroDivisionError) as e:
                    raise ElevationProviderError(
                        f"Coordinate outside tile grid ({p.lat}, {p.lng}): {e}"
                    ) from e
                tile = await self._get_tile(client, x, y)
                ix = min(tile.width - 1, max(0, round(px)))
                iy = min(tile.height - 1, max(0, round(py)))
                r, g, b = tile.getpixel((ix, iy))
                elevations.append(decode_elevation(r, g, b))

        return elevations

    def clear_cache(self) -> None:
        """Drop cached tiles."""
        self._tiles.clear()


# =============================================================================
# Source selection
# =============================================================================

def resolve_source(source: ElevationSource | str | None = None) -> ElevationSource:
    """
    Resolve a requested source to a concrete supplier.

    None falls back to the configured source; 'auto' maps to the
    configured default supplier.
    """
    resolved = ElevationSource(source or settings.elevation_source)
    if resolved == ElevationSource.AUTO:
        return settings.elevation_default_source
    return resolved


def get_elevation_provider(
    source: ElevationSource | str | None = None,
    client: Optional[httpx.AsyncClient] = None,
) -> ElevationProvider:
    """Build the provider for a (possibly 'auto') source."""
    resolved = resolve_source(source)
    if resolved == ElevationSource.TERRAIN_RGB:
        return TerrainRGBProvider(client=client)
    return OpenElevationProvider(client=client)
