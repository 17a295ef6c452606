"""Analysis endpoints: create, read, list, start processing, engagement."""

import logging

from asgiref.sync import sync_to_async
from ninja import Query, Router

from core.utils.responses import paginated_response, success_response
from features.auth.api import AuthBearer, get_principal, optional_auth, require_principal
from . import service
from .schemas import (
    AnalysisCreateSchema,
    AnalysisListQuery,
    AnalysisListResponse,
    AnalysisPageResponse,
    AnalysisResponse,
    AnalysisUpdateSchema,
    CounterResponse,
    FloorPlanSchema,
    ScoreResponse,
)

logger = logging.getLogger(__name__)
router = Router(auth=AuthBearer())


@router.post("/", response={201: AnalysisResponse})
async def create_analysis(request, payload: AnalysisCreateSchema):
    """Create a pending analysis from a floor-plan descriptor."""
    principal = require_principal(request)
    floor_plan = payload.floor_plan
    dimensions = floor_plan.dimensions
    data = await sync_to_async(service.create_analysis)(
        principal.id,
        title=payload.title,
        description=payload.description,
        orientation=floor_plan.orientation,
        length=dimensions.length if dimensions else None,
        width=dimensions.width if dimensions else None,
        unit=dimensions.unit if dimensions else "sqft",
        rooms=[room.dict(exclude_none=True) for room in floor_plan.rooms],
        is_public=payload.is_public,
        tags=payload.tags,
    )
    return 201, success_response(data, "Analysis created successfully")


@router.post("/score", response=ScoreResponse)
async def score_floor_plan(request, payload: FloorPlanSchema):
    """Score a floor plan immediately without storing an analysis."""
    result = await sync_to_async(service.score_floor_plan)(
        require_principal(request), payload.dict(exclude_none=True)
    )
    return success_response(result, "Floor plan scored successfully")


@router.get("/", response=AnalysisPageResponse, auth=optional_auth)
async def list_analyses(request, filters: AnalysisListQuery = Query(...)):
    """Public feed, or the caller's own analyses with ``mine=true``."""
    items, total = await sync_to_async(service.list_analyses)(
        get_principal(request),
        page=filters.page,
        limit=filters.limit,
        sort=filters.sort,
        min_score=filters.min_score,
        tags=filters.tag_list,
        mine=filters.mine,
        status=filters.status,
    )
    return paginated_response(items, filters.page, filters.limit, total)


@router.get("/popular", response=AnalysisListResponse, auth=optional_auth)
async def popular_analyses(request, limit: int = Query(10, ge=1, le=100)):
    items = await sync_to_async(service.popular_analyses)(limit)
    return success_response(items)


@router.get("/recent", response=AnalysisListResponse, auth=optional_auth)
async def recent_analyses(request, limit: int = Query(10, ge=1, le=100)):
    items = await sync_to_async(service.recent_analyses)(limit)
    return success_response(items)


@router.get("/{analysis_id}", response=AnalysisResponse, auth=optional_auth)
async def get_analysis(request, analysis_id: int):
    """Get one analysis. Private analyses are visible to their owner only."""
    data = await sync_to_async(service.get_analysis)(
        analysis_id, get_principal(request)
    )
    return success_response(data)


@router.post("/{analysis_id}/start", response=AnalysisResponse)
async def start_analysis(request, analysis_id: int):
    """Begin scoring. Returns immediately with the analysis in ``processing``."""
    data = await sync_to_async(service.start_analysis)(
        analysis_id, require_principal(request)
    )
    return success_response(data, "Analysis processing started")


@router.put("/{analysis_id}", response=AnalysisResponse)
async def update_analysis(request, analysis_id: int, payload: AnalysisUpdateSchema):
    data = await sync_to_async(service.update_analysis)(
        analysis_id, require_principal(request), payload.dict(exclude_unset=True)
    )
    return success_response(data, "Analysis updated successfully")


@router.delete("/{analysis_id}", response=AnalysisResponse)
async def delete_analysis(request, analysis_id: int):
    await sync_to_async(service.delete_analysis)(
        analysis_id, require_principal(request)
    )
    return success_response(None, "Analysis deleted successfully")


@router.post("/{analysis_id}/like", response=CounterResponse)
async def like_analysis(request, analysis_id: int):
    likes = await sync_to_async(service.like_analysis)(
        analysis_id, require_principal(request)
    )
    return success_response({"likes": likes}, "Analysis liked successfully")


@router.post("/{analysis_id}/share", response=CounterResponse)
async def share_analysis(request, analysis_id: int):
    shares = await sync_to_async(service.share_analysis)(
        analysis_id, require_principal(request)
    )
    return success_response({"shares": shares}, "Analysis shared successfully")
