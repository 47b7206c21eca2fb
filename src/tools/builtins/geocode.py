from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from src.tools.builtins.maps_tool import MapsTool


class GeocodeArgs(BaseModel):
    address: str = Field(min_length=1)


class GeocodeTool(MapsTool):
    """Converts an address into geographic coordinates."""

    args_model = GeocodeArgs

    @property
    def name(self) -> str:
        return "maps_geocode"

    @property
    def description(self) -> str:
        return "Convert an address into geographic coordinates."

    @property
    def parameters(self) -> dict:
        return {
            "type": "object",
            "properties": {
                "address": {
                    "type": "string",
                    "description": "The address to geocode",
                },
            },
            "required": ["address"],
        }

    async def call(self, args: GeocodeArgs, api_key: str | None) -> dict[str, Any]:
        data = await self._client.get_json(
            "geocode",
            {"address": args.address},
            api_key=api_key,
            operation="Geocoding",
        )
        top = data["results"][0]
        return {
            "location": {
                "latitude": top["geometry"]["location"]["lat"],
                "longitude": top["geometry"]["location"]["lng"],
            },
            "formatted_address": top["formatted_address"],
            "place_id": top["place_id"],
        }
