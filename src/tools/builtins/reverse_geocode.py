from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from src.tools.builtins.maps_tool import MapsTool


class ReverseGeocodeArgs(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class ReverseGeocodeTool(MapsTool):
    """Converts coordinates into an address."""

    args_model = ReverseGeocodeArgs

    @property
    def name(self) -> str:
        return "maps_reverse_geocode"

    @property
    def description(self) -> str:
        return "Convert coordinates into an address."

    @property
    def parameters(self) -> dict:
        return {
            "type": "object",
            "properties": {
                "latitude": {"type": "number", "description": "Latitude coordinate"},
                "longitude": {"type": "number", "description": "Longitude coordinate"},
            },
            "required": ["latitude", "longitude"],
        }

    async def call(self, args: ReverseGeocodeArgs, api_key: str | None) -> dict[str, Any]:
        data = await self._client.get_json(
            "geocode",
            {"latlng": f"{args.latitude},{args.longitude}"},
            api_key=api_key,
            operation="Reverse geocoding",
        )
        top = data["results"][0]
        return {"formatted_address": top["formatted_address"], "place_id": top["place_id"]}
