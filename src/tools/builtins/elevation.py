from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from src.tools.builtins.maps_tool import MapsTool


class LatLng(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class ElevationArgs(BaseModel):
    locations: list[LatLng] = Field(min_length=1)


class ElevationTool(MapsTool):
    args_model = ElevationArgs

    @property
    def name(self) -> str:
        return "maps_elevation"

    @property
    def description(self) -> str:
        return "Get elevation data for locations on the earth."

    @property
    def parameters(self) -> dict:
        return {
            "type": "object",
            "properties": {
                "locations": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "latitude": {"type": "number"},
                            "longitude": {"type": "number"},
                        },
                        "required": ["latitude", "longitude"],
                    },
                    "description": "Array of locations to get elevation for",
                },
            },
            "required": ["locations"],
        }

    async def call(self, args: ElevationArgs, api_key: str | None) -> dict[str, Any]:
        data = await self._client.get_json(
            "elevation",
            {"locations": "|".join(f"{loc.latitude},{loc.longitude}" for loc in args.locations)},
            api_key=api_key,
            operation="Elevation request",
        )
        return {
            "results": [
                {
                    "elevation": r.get("elevation"),
                    "location": r.get("location"),
                    "resolution": r.get("resolution"),
                }
                for r in data.get("results", [])
            ]
        }
