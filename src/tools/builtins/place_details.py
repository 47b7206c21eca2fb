from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from src.tools.builtins.maps_tool import MapsTool


class PlaceDetailsArgs(BaseModel):
    place_id: str = Field(min_length=1)


class PlaceDetailsTool(MapsTool):
    args_model = PlaceDetailsArgs

    @property
    def name(self) -> str:
        return "maps_place_details"

    @property
    def description(self) -> str:
        return "Get detailed information about a specific place."

    @property
    def parameters(self) -> dict:
        return {
            "type": "object",
            "properties": {
                "place_id": {
                    "type": "string",
                    "description": "The place ID to get details for",
                },
            },
            "required": ["place_id"],
        }

    async def call(self, args: PlaceDetailsArgs, api_key: str | None) -> dict[str, Any]:
        data = await self._client.get_json(
            "place/details",
            {"place_id": args.place_id},
            api_key=api_key,
            operation="Place details request",
        )
        result = data["result"]
        location = result.get("geometry", {}).get("location", {})
        return {
            "name": result.get("name"),
            "formatted_address": result.get("formatted_address"),
            "location": {
                "latitude": location.get("lat"),
                "longitude": location.get("lng"),
            },
            "formatted_phone_number": result.get("formatted_phone_number"),
            "website": result.get("website"),
            "rating": result.get("rating"),
            "reviews": result.get("reviews"),
            "opening_hours": result.get("opening_hours"),
        }
