from __future__ import annotations

from src.tools.base import BaseTool
from src.tools.builtins.directions import DirectionsTool
from src.tools.builtins.distance_matrix import DistanceMatrixTool
from src.tools.builtins.elevation import ElevationTool
from src.tools.builtins.geocode import GeocodeTool
from src.tools.builtins.maps_client import GoogleMapsClient
from src.tools.builtins.place_details import PlaceDetailsTool
from src.tools.builtins.reverse_geocode import ReverseGeocodeTool
from src.tools.builtins.search_places import SearchPlacesTool
from src.tools.catalog import ToolCatalog


def builtin_tools(client: GoogleMapsClient) -> list[BaseTool]:
    """All built-in Google Maps tools, in discovery display order."""
    return [
        GeocodeTool(client),
        ReverseGeocodeTool(client),
        SearchPlacesTool(client),
        PlaceDetailsTool(client),
        DistanceMatrixTool(client),
        ElevationTool(client),
        DirectionsTool(client),
    ]


def build_catalog(client: GoogleMapsClient) -> ToolCatalog:
    """Assemble the process-wide catalog. Raises ConfigurationError on duplicate names."""
    return ToolCatalog(builtin_tools(client))
