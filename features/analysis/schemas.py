from typing import Annotated, Any, Dict, List, Literal, Optional
from datetime import datetime

from ninja import Schema
from pydantic import Field, field_validator, model_validator

from core.models import DIRECTIONS, ELEMENTS


Direction = Literal[
    "north", "south", "east", "west", "northeast", "northwest", "southeast", "southwest"
]
RoomDirection = Literal[
    "north",
    "south",
    "east",
    "west",
    "northeast",
    "northwest",
    "southeast",
    "southwest",
    "center",
]
RoomType = Literal[
    "bedroom",
    "living-room",
    "kitchen",
    "bathroom",
    "dining-room",
    "study",
    "puja-room",
    "balcony",
    "other",
]
SortField = Literal[
    "createdAt", "-createdAt", "updatedAt", "-updatedAt", "title", "-title"
]


# =============================================================================
# Input schemas
# =============================================================================


def clean_tag_list(tags):
    return list(dict.fromkeys(t.strip() for t in tags if t and t.strip()))


class PositionSchema(Schema):
    x: float
    y: float


class RoomDimensionsSchema(Schema):
    length: Optional[float] = Field(default=None, gt=0)
    width: Optional[float] = Field(default=None, gt=0)


class RoomSchema(Schema):
    name: str = Field(..., min_length=1, max_length=100)
    type: RoomType
    position: Optional[PositionSchema] = None
    dimensions: Optional[RoomDimensionsSchema] = None
    direction: Optional[RoomDirection] = None


class DimensionsSchema(Schema):
    length: Optional[float] = Field(default=None, ge=1)
    width: Optional[float] = Field(default=None, ge=1)
    unit: Literal["sqft", "sqm"] = "sqft"


class FloorPlanSchema(Schema):
    orientation: Direction
    dimensions: Optional[DimensionsSchema] = None
    rooms: List[RoomSchema] = Field(default_factory=list)


class AnalysisCreateSchema(Schema):
    title: str = Field(..., min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    floor_plan: FloorPlanSchema
    is_public: bool = False
    tags: List[str] = Field(default_factory=list)

    @field_validator("title", "description", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v):
        return clean_tag_list(v)


class AnalysisUpdateSchema(Schema):
    title: Optional[str] = Field(default=None, min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    is_public: Optional[bool] = None
    tags: Optional[List[str]] = None

    @model_validator(mode="before")
    @classmethod
    def at_least_one_field(cls, values):
        if not values:
            raise ValueError("At least one field must be provided for update.")
        return values

    @field_validator("title", "description", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v):
        return clean_tag_list(v) if v is not None else v


class AnalysisListQuery(Schema):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
    sort: SortField = "-createdAt"
    min_score: Optional[int] = Field(default=None, ge=0, le=100)
    tags: Optional[str] = None
    mine: bool = False
    status: Optional[Literal["pending", "processing", "completed", "failed"]] = None

    @property
    def tag_list(self) -> List[str]:
        if not self.tags:
            return []
        return [t.strip() for t in self.tags.split(",") if t.strip()]


# =============================================================================
# Result payload (scoring contract)
# =============================================================================

ScoreInt = Annotated[int, Field(ge=0, le=100)]


class EnergyFlowSchema(Schema):
    score: ScoreInt
    issues: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)


class DirectionalScoreSchema(Schema):
    score: ScoreInt
    issues: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)


class ElementScoreSchema(Schema):
    score: ScoreInt
    balance: Literal["Excellent", "Good", "Moderate", "Poor"]
    recommendations: List[str] = Field(default_factory=list)


class RoomScoreSchema(Schema):
    room_name: str
    room_type: str
    vastu_score: ScoreInt
    issues: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    remedies: List[str] = Field(default_factory=list)


class RemedySchema(Schema):
    type: Literal["color", "placement", "decoration", "construction", "other"]
    description: str
    priority: Literal["high", "medium", "low"]
    cost: Literal["low", "medium", "high"]
    difficulty: Literal["easy", "medium", "hard"]


class VastuAnalysisSchema(Schema):
    overall_score: ScoreInt
    energy_flow: EnergyFlowSchema
    directional_analysis: Dict[str, DirectionalScoreSchema]
    five_elements: Dict[str, ElementScoreSchema]
    room_analysis: List[RoomScoreSchema] = Field(default_factory=list)
    remedies: List[RemedySchema] = Field(default_factory=list)
    positive_aspects: List[str] = Field(default_factory=list)
    negative_aspects: List[str] = Field(default_factory=list)
    summary: str
    expert_notes: Optional[str] = None

    @field_validator("directional_analysis")
    @classmethod
    def all_directions(cls, v):
        if set(v) != set(DIRECTIONS):
            raise ValueError(f"directional_analysis must cover exactly {list(DIRECTIONS)}")
        return v

    @field_validator("five_elements")
    @classmethod
    def all_elements(cls, v):
        if set(v) != set(ELEMENTS):
            raise ValueError(f"five_elements must cover exactly {list(ELEMENTS)}")
        return v


# =============================================================================
# Output schemas
# =============================================================================


class AnalysisFileOutSchema(Schema):
    storage_id: str
    original_name: str
    url: str
    size: int
    mime_type: str
    width: Optional[int] = None
    height: Optional[int] = None
    uploaded_at: datetime


class AnalysisSummarySchema(Schema):
    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    status: str
    overall_score: Optional[int] = None
    tags: List[str]
    is_public: bool
    views: int
    likes: int
    shares: int
    created_at: datetime
    updated_at: datetime


class AnalysisOutSchema(AnalysisSummarySchema):
    floor_plan: Dict[str, Any]
    files: List[AnalysisFileOutSchema]
    file_count: int
    room_count: int
    processing_started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    processing_time: Optional[int] = None
    vastu_analysis: Optional[Dict[str, Any]] = None


class PaginationSchema(Schema):
    current: int
    pages: int
    total: int
    limit: int


class AnalysisPageSchema(Schema):
    items: List[AnalysisSummarySchema]
    pagination: PaginationSchema


class AnalysisResponse(Schema):
    success: bool
    message: str
    data: Optional[AnalysisOutSchema] = None


class AnalysisListResponse(Schema):
    success: bool
    message: str
    data: List[AnalysisSummarySchema]


class AnalysisPageResponse(Schema):
    success: bool
    message: str
    data: AnalysisPageSchema


class CounterResponse(Schema):
    success: bool
    message: str
    data: Dict[str, int]


class ScoreResponse(Schema):
    success: bool
    message: str
    data: VastuAnalysisSchema
