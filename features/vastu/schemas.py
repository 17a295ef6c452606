from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from ninja import Schema
from pydantic import Field, field_validator

Category = Literal[
    "direction",
    "room-placement",
    "five-elements",
    "energy-flow",
    "color-scheme",
    "furniture-placement",
    "entrance",
    "kitchen",
    "bedroom",
    "bathroom",
    "puja-room",
    "general",
]
RuleDirection = Literal[
    "north",
    "south",
    "east",
    "west",
    "northeast",
    "northwest",
    "southeast",
    "southwest",
    "center",
    "any",
]
RuleRoomType = Literal[
    "bedroom",
    "living-room",
    "kitchen",
    "bathroom",
    "dining-room",
    "study",
    "puja-room",
    "balcony",
    "entrance",
    "any",
]
RuleElement = Literal["earth", "water", "fire", "air", "space", "any"]
Importance = Literal["critical", "high", "medium", "low"]
Impact = Literal["positive", "negative", "neutral"]
Tier = Literal["low", "medium", "high"]


class RuleRemedySchema(Schema):
    type: Literal["color", "placement", "decoration", "construction", "other"]
    description: str
    cost: Tier = "medium"
    difficulty: Literal["easy", "medium", "hard"] = "medium"
    time_required: Optional[str] = None


class RuleCreateSchema(Schema):
    name: str = Field(..., min_length=3, max_length=100)
    category: Category
    subcategory: Optional[str] = None
    description: str = Field(..., min_length=10, max_length=1000)
    detailed_explanation: Optional[str] = Field(default=None, max_length=5000)
    direction: Optional[RuleDirection] = None
    room_type: Optional[RuleRoomType] = None
    element: Optional[RuleElement] = None
    importance: Importance = "medium"
    impact: Impact
    remedies: List[RuleRemedySchema] = Field(default_factory=list)
    benefits: List[str] = Field(default_factory=list)
    consequences: List[str] = Field(default_factory=list)
    exceptions: List[str] = Field(default_factory=list)
    modern_adaptations: List[str] = Field(default_factory=list)
    scientific_basis: Optional[str] = None
    references: List[Dict[str, Any]] = Field(default_factory=list)
    priority: int = Field(default=5, ge=1, le=10)
    tags: List[str] = Field(default_factory=list)

    @field_validator("name", "description", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class RuleUpdateSchema(Schema):
    name: Optional[str] = Field(default=None, min_length=3, max_length=100)
    category: Optional[Category] = None
    subcategory: Optional[str] = None
    description: Optional[str] = Field(default=None, min_length=10, max_length=1000)
    detailed_explanation: Optional[str] = Field(default=None, max_length=5000)
    direction: Optional[RuleDirection] = None
    room_type: Optional[RuleRoomType] = None
    element: Optional[RuleElement] = None
    importance: Optional[Importance] = None
    impact: Optional[Impact] = None
    remedies: Optional[List[RuleRemedySchema]] = None
    benefits: Optional[List[str]] = None
    consequences: Optional[List[str]] = None
    exceptions: Optional[List[str]] = None
    modern_adaptations: Optional[List[str]] = None
    scientific_basis: Optional[str] = None
    references: Optional[List[Dict[str, Any]]] = None
    priority: Optional[int] = Field(default=None, ge=1, le=10)
    tags: Optional[List[str]] = None
    is_active: Optional[bool] = None


class RuleFilterQuery(Schema):
    category: Optional[Category] = None
    direction: Optional[RuleDirection] = None
    room_type: Optional[RuleRoomType] = None
    element: Optional[RuleElement] = None
    importance: Optional[Importance] = None
    impact: Optional[Impact] = None


class RuleListQuery(RuleFilterQuery):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)


class RemedyQuery(Schema):
    budget: Literal["low", "medium", "high", "any"] = "medium"
    difficulty: Literal["easy", "medium", "hard", "any"] = "medium"


class RuleOutSchema(Schema):
    id: int
    name: str
    category: str
    subcategory: Optional[str] = None
    description: str
    detailed_explanation: Optional[str] = None
    direction: Optional[str] = None
    room_type: Optional[str] = None
    element: Optional[str] = None
    importance: str
    impact: str
    remedies: List[Dict[str, Any]]
    benefits: List[str]
    consequences: List[str]
    exceptions: List[str]
    modern_adaptations: List[str]
    scientific_basis: Optional[str] = None
    references: List[Dict[str, Any]]
    priority: int
    tags: List[str]
    is_active: bool
    version: int
    created_at: datetime
    updated_at: datetime


class RuleResponse(Schema):
    success: bool
    message: str
    data: Optional[RuleOutSchema] = None


class RuleListResponse(Schema):
    success: bool
    message: str
    data: List[RuleOutSchema]


class RulePageSchema(Schema):
    items: List[RuleOutSchema]
    pagination: Dict[str, int]


class RulePageResponse(Schema):
    success: bool
    message: str
    data: RulePageSchema


class ReferenceResponse(Schema):
    success: bool
    message: str
    data: Any
