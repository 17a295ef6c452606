"""Surroundings analysis endpoint."""

from ninja import Router

from core.utils.responses import success_response
from features.auth.api import AuthBearer
from .schemas import SurroundingsRequest, SurroundingsResponse
from .surroundings import analyze_surroundings

router = Router(auth=AuthBearer())


@router.post("/surroundings", response=SurroundingsResponse)
def surroundings(request, payload: SurroundingsRequest):
    """Score nearby places by kind and by their true compass direction."""
    data = analyze_surroundings(
        payload.latitude,
        payload.longitude,
        [place.dict() for place in payload.places],
    )
    return success_response(data, "Surroundings analyzed successfully")
