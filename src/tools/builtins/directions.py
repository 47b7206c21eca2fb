from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from src.tools.builtins.distance_matrix import TravelMode
from src.tools.builtins.maps_tool import MapsTool


class DirectionsArgs(BaseModel):
    origin: str = Field(min_length=1)
    destination: str = Field(min_length=1)
    mode: TravelMode | None = None


class DirectionsTool(MapsTool):
    args_model = DirectionsArgs

    @property
    def name(self) -> str:
        return "maps_directions"

    @property
    def description(self) -> str:
        return "Get directions between two points."

    @property
    def parameters(self) -> dict:
        return {
            "type": "object",
            "properties": {
                "origin": {
                    "type": "string",
                    "description": "Origin address or coordinates",
                },
                "destination": {
                    "type": "string",
                    "description": "Destination address or coordinates",
                },
                "mode": {
                    "type": "string",
                    "description": "Travel mode (driving, walking, bicycling, transit)",
                    "enum": ["driving", "walking", "bicycling", "transit"],
                },
            },
            "required": ["origin", "destination"],
        }

    async def call(self, args: DirectionsArgs, api_key: str | None) -> dict[str, Any]:
        # mode is omitted upstream when not given (Google defaults to driving)
        data = await self._client.get_json(
            "directions",
            {"origin": args.origin, "destination": args.destination, "mode": args.mode},
            api_key=api_key,
            operation="Directions request",
        )
        routes = []
        for route in data.get("routes", []):
            leg = route["legs"][0]
            routes.append({
                "summary": route.get("summary"),
                "distance": leg.get("distance"),
                "duration": leg.get("duration"),
                "steps": [
                    {
                        "instructions": step.get("html_instructions"),
                        "distance": step.get("distance"),
                        "duration": step.get("duration"),
                        "travel_mode": step.get("travel_mode"),
                    }
                    for step in leg.get("steps", [])
                ],
            })
        return {"routes": routes}
