#Purpose: Static route map for the public tracking page.
#Builds a Google Static Maps image URL showing:
#A (green) origin, B (red) destination, C (blue) current position
#delivered -> one solid path origin -> destination
#in transit -> path origin -> current, then a geodesic leg current -> destination
#Only builds the URL, never fetches the image.

from dotenv import load_dotenv
import os
from typing import List, Optional, Tuple

import requests

from .geo import GeoPoint
from .progress import RouteSnapshot

# Example in .env:
# GOOGLE_MAPS_API_KEY=AIza...
load_dotenv()
GOOGLE_MAPS_API_KEY = os.getenv("GOOGLE_MAPS_API_KEY")

STATIC_MAP_URL = "https://maps.googleapis.com/maps/api/staticmap"
PATH_STYLE = "color:0x0000ff|weight:5"


def _coords(point: GeoPoint) -> str:
    return f"{point.latitude},{point.longitude}"


def build_static_map_url(
        route: RouteSnapshot,
        api_key: Optional[str] = None,
        *,
        size: str = "800x400",
        zoom: int = 5,
) -> str:
    """
    Returns the static map URL for a route snapshot.

    Raises:
        ValueError if no API key is passed and none is set in the environment.
    """
    api_key = api_key or GOOGLE_MAPS_API_KEY
    if not api_key:
        raise ValueError("Google Maps API key not set. Please set GOOGLE_MAPS_API_KEY in the .env file.")

    params: List[Tuple[str, str]] = [
        ("size", size),
        ("zoom", str(zoom)),
        ("markers", f"color:green|label:A|{_coords(route.origin)}"),
        ("markers", f"color:red|label:B|{_coords(route.destination)}"),
        ("markers", f"color:blue|label:C|{_coords(route.current)}"),
    ]

    if route.delivered:
        params.append(("path", f"{PATH_STYLE}|{_coords(route.origin)}|{_coords(route.destination)}"))
    else:
        params.append(("path", f"{PATH_STYLE}|{_coords(route.origin)}|{_coords(route.current)}"))
        params.append(("path", f"{PATH_STYLE}|geodesic:true|{_coords(route.current)}|{_coords(route.destination)}"))

    params.append(("key", api_key))

    #let requests do the query-string encoding (| and : get escaped)
    return requests.Request("GET", STATIC_MAP_URL, params=params).prepare().url
