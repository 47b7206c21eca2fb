from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, Field

from src.tools.builtins.elevation import LatLng
from src.tools.builtins.maps_tool import MapsTool

_EARTH_RADIUS_KM = 6371.0
MAX_RADIUS_M = 50_000


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in kilometres."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    return _EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


class SearchPlacesArgs(BaseModel):
    query: str = Field(min_length=1)
    location: LatLng | None = None
    radius: float | None = Field(default=None, gt=0, le=MAX_RADIUS_M)


class SearchPlacesTool(MapsTool):
    """Text search for places, optionally biased to and filtered by a radius."""

    args_model = SearchPlacesArgs

    @property
    def name(self) -> str:
        return "maps_search_places"

    @property
    def description(self) -> str:
        return (
            "Search for places of a certain type, optionally within a radius "
            "from a given location."
        )

    @property
    def parameters(self) -> dict:
        return {
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Search query"},
                "location": {
                    "type": "object",
                    "properties": {
                        "latitude": {"type": "number"},
                        "longitude": {"type": "number"},
                    },
                    "description": "Optional center point for the search",
                },
                "radius": {
                    "type": "number",
                    "description": "Search radius in meters (max 50000)",
                },
            },
            "required": ["query"],
        }

    async def call(self, args: SearchPlacesArgs, api_key: str | None) -> dict[str, Any]:
        location = args.location
        data = await self._client.get_json(
            "place/textsearch",
            {
                "query": args.query,
                "location": f"{location.latitude},{location.longitude}" if location else None,
                "radius": f"{args.radius:g}" if args.radius else None,
            },
            api_key=api_key,
            operation="Search places",
        )

        places: list[dict[str, Any]] = []
        for result in data.get("results", []):
            loc = result["geometry"]["location"]
            distance = (
                haversine_km(location.latitude, location.longitude, loc["lat"], loc["lng"])
                if location
                else 0.0
            )
            # The upstream radius only biases ranking; enforce it here.
            if location and args.radius and distance > args.radius / 1000:
                continue
            places.append({
                "name": result.get("name"),
                "formatted_address": result.get("formatted_address"),
                "location": {"latitude": loc["lat"], "longitude": loc["lng"]},
                "place_id": result.get("place_id"),
                "rating": result.get("rating"),
                "types": result.get("types"),
                "distance": distance,
            })
        places.sort(key=lambda p: p["distance"])
        return {"places": places}
