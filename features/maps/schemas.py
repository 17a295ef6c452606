from typing import Dict, List, Literal, Optional

from ninja import Schema
from pydantic import Field


class PlaceSchema(Schema):
    name: str = Field(..., min_length=1, max_length=200)
    type: Literal["water", "park", "school", "hospital", "cemetery", "airport", "other"]
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class SurroundingsRequest(Schema):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    places: List[PlaceSchema] = Field(default_factory=list, max_length=100)


class DirectionSurroundingsSchema(Schema):
    score: int
    elements: List[Optional[str]]


class LocatedPlaceSchema(Schema):
    name: Optional[str] = None
    type: str
    direction: str
    distance_km: float


class OrientationSchema(Schema):
    primary_direction: str
    secondary_direction: str
    recommendations: List[str]


class SurroundingsSchema(Schema):
    positive_elements: List[str]
    negative_elements: List[str]
    recommendations: List[str]
    vastu_score: int
    directional_analysis: Dict[str, DirectionSurroundingsSchema]
    places: List[LocatedPlaceSchema]
    orientation: OrientationSchema


class SurroundingsResponse(Schema):
    success: bool
    message: str
    data: SurroundingsSchema
