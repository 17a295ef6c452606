"""
Surroundings analysis from caller-supplied coordinates.

Directions are computed from the true initial bearing between the property
and each place, split into eight 45 degree sectors centered on the compass
points. No geocoding service is called.
"""

import math
from typing import Dict, Iterable, List

from core.models import DIRECTIONS

EARTH_RADIUS_KM = 6371.0

# Clockwise from north, one entry per 45 degree sector.
COMPASS_SECTORS = (
    "north",
    "northeast",
    "east",
    "southeast",
    "south",
    "southwest",
    "west",
    "northwest",
)

PLACE_EFFECTS = {
    "water": (10, "Water bodies nearby - good for prosperity"),
    "park": (8, "Green spaces nearby - good for health"),
    "school": (5, "Educational institutions nearby - good for learning"),
    "hospital": (7, "Healthcare facilities nearby - good for health"),
    "cemetery": (-15, "Cemetery nearby - may affect energy"),
    "airport": (-10, "Airport nearby - noise and disturbance"),
}


def bearing(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Initial great-circle bearing from point 1 to point 2, in [0, 360)."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    delta_lon = math.radians(lon2 - lon1)
    x = math.sin(delta_lon) * math.cos(phi2)
    y = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(
        delta_lon
    )
    return (math.degrees(math.atan2(x, y)) + 360.0) % 360.0


def compass_direction(degrees: float) -> str:
    index = int(((degrees % 360.0) + 22.5) // 45.0) % 8
    return COMPASS_SECTORS[index]


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def analyze_surroundings(latitude: float, longitude: float, places: Iterable[dict]) -> dict:
    """
    Score the places around a property.

    Each place is ``{name, type, latitude, longitude}``. A place type counts
    once towards the overall score; per-direction scores add every place.
    """
    places = list(places)
    positive: List[str] = []
    negative: List[str] = []
    score = 0
    seen_types = set()
    directional: Dict[str, dict] = {d: {"score": 0, "elements": []} for d in DIRECTIONS}
    located = []

    for place in places:
        kind = place.get("type")
        direction = compass_direction(
            bearing(latitude, longitude, place["latitude"], place["longitude"])
        )
        distance = haversine_km(latitude, longitude, place["latitude"], place["longitude"])
        located.append(
            {
                "name": place.get("name"),
                "type": kind,
                "direction": direction,
                "distance_km": round(distance, 3),
            }
        )
        effect = PLACE_EFFECTS.get(kind)
        directional[direction]["elements"].append(place.get("name"))
        if effect is None:
            continue
        points, message = effect
        directional[direction]["score"] += points
        if kind not in seen_types:
            seen_types.add(kind)
            score += points
            (positive if points > 0 else negative).append(message)

    recommendations = []
    if negative:
        recommendations.append("Consider planting trees to block negative energy")
        recommendations.append("Use Vastu remedies to neutralize negative influences")
    if positive:
        recommendations.append("Enhance positive energy flow from beneficial directions")
        recommendations.append(
            "Use specific colors and elements to amplify positive influences"
        )

    return {
        "positive_elements": positive,
        "negative_elements": negative,
        "recommendations": recommendations,
        "vastu_score": score,
        "directional_analysis": directional,
        "places": located,
        "orientation": property_orientation(seen_types),
    }


def property_orientation(place_types) -> dict:
    """Entrance and layout suggestions derived from the kinds of places nearby."""
    recommendations = []
    if "water" in place_types:
        recommendations.append("Main entrance should face north for prosperity")
    if "park" in place_types:
        recommendations.append("Kitchen in southeast for health")
    return {
        "primary_direction": "north",
        "secondary_direction": "east",
        "recommendations": recommendations,
    }
