from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from src.tools.builtins.maps_tool import MapsTool

TravelMode = Literal["driving", "walking", "bicycling", "transit"]


class DistanceMatrixArgs(BaseModel):
    origins: list[str] = Field(min_length=1)
    destinations: list[str] = Field(min_length=1)
    mode: TravelMode


class DistanceMatrixTool(MapsTool):
    """Travel distance and time for every origin/destination pair."""

    args_model = DistanceMatrixArgs

    @property
    def name(self) -> str:
        return "maps_distance_matrix"

    @property
    def description(self) -> str:
        return "Calculate travel distance and time for multiple origins and destinations."

    @property
    def parameters(self) -> dict:
        return {
            "type": "object",
            "properties": {
                "origins": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Array of origin addresses or coordinates",
                },
                "destinations": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Array of destination addresses or coordinates",
                },
                "mode": {
                    "type": "string",
                    "description": "Travel mode (driving, walking, bicycling, transit)",
                    "enum": ["driving", "walking", "bicycling", "transit"],
                },
            },
            "required": ["origins", "destinations", "mode"],
        }

    async def call(self, args: DistanceMatrixArgs, api_key: str | None) -> dict[str, Any]:
        data = await self._client.get_json(
            "distancematrix",
            {
                "origins": "|".join(args.origins),
                "destinations": "|".join(args.destinations),
                "mode": args.mode,
            },
            api_key=api_key,
            operation="Distance matrix request",
        )
        return {
            "origin_addresses": data.get("origin_addresses", []),
            "destination_addresses": data.get("destination_addresses", []),
            "results": [
                {
                    "elements": [
                        {
                            "status": element.get("status"),
                            "duration": element.get("duration"),
                            "distance": element.get("distance"),
                        }
                        for element in row.get("elements", [])
                    ]
                }
                for row in data.get("rows", [])
            ],
        }
