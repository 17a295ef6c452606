"""Vastu rule catalog and reference data endpoints."""

import logging

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction
from ninja import Query, Router

from core.models import VastuRule
from core.utils.exceptions import ConflictError, NotFoundError
from core.utils.responses import paginated_response, success_response
from features.auth.api import AuthBearer, require_staff
from . import catalog
from .reference import DIRECTIONS_INFO, FIVE_ELEMENTS, ROOM_GUIDELINES
from .schemas import (
    Category,
    ReferenceResponse,
    RemedyQuery,
    RuleCreateSchema,
    RuleFilterQuery,
    RuleListQuery,
    RuleListResponse,
    RulePageResponse,
    RuleResponse,
    RuleUpdateSchema,
)

logger = logging.getLogger(__name__)
router = Router()


RULE_FIELDS = (
    "id",
    "name",
    "category",
    "subcategory",
    "description",
    "detailed_explanation",
    "direction",
    "room_type",
    "element",
    "importance",
    "impact",
    "remedies",
    "benefits",
    "consequences",
    "exceptions",
    "modern_adaptations",
    "scientific_basis",
    "references",
    "priority",
    "tags",
    "is_active",
    "version",
    "created_at",
    "updated_at",
)


def _format_rule(rule: dict) -> dict:
    """Format rule dict for JSON response."""
    data = {field: rule.get(field) for field in RULE_FIELDS}
    for field in (
        "remedies",
        "benefits",
        "consequences",
        "exceptions",
        "modern_adaptations",
        "references",
        "tags",
    ):
        data[field] = data[field] or []
    return data


def _rules(queryset) -> list:
    return [_format_rule(r) for r in queryset.values(*RULE_FIELDS)]


def _active_rule(rule_id: int) -> dict:
    rule = VastuRule.objects.filter(id=rule_id, is_active=True).values(*RULE_FIELDS).first()
    if rule is None:
        raise NotFoundError("Vastu rule not found")
    return _format_rule(rule)


# =============================================================================
# Catalog reads
# =============================================================================


@router.get("/rules", response=RulePageResponse)
async def list_rules(request, filters: RuleListQuery = Query(...)):
    """Paginated active rules, most important first."""

    def _page():
        queryset = catalog.find_rules(
            **filters.dict(exclude={"page", "limit"}, exclude_none=True)
        )
        total = queryset.count()
        offset = (filters.page - 1) * filters.limit
        return _rules(queryset[offset : offset + filters.limit]), total

    items, total = await sync_to_async(_page)()
    return paginated_response(items, filters.page, filters.limit, total)


@router.get("/rules/search", response=RuleListResponse)
async def search_rules(request, q: str = Query(..., min_length=1), filters: RuleFilterQuery = Query(...)):
    rules = await sync_to_async(
        lambda: _rules(catalog.search_rules(q, **filters.dict(exclude_none=True)))
    )()
    return success_response(rules)


@router.get("/rules/critical", response=RuleListResponse)
async def critical_rules(request):
    rules = await sync_to_async(lambda: _rules(catalog.critical_rules()))()
    return success_response(rules)


@router.get("/rules/category/{category}", response=RuleListResponse)
async def rules_by_category(
    request, category: Category, filters: RuleFilterQuery = Query(...)
):
    options = filters.dict(exclude={"category"}, exclude_none=True)
    rules = await sync_to_async(
        lambda: _rules(catalog.find_rules(category=category, **options))
    )()
    return success_response(rules)


@router.get("/rules/{rule_id}", response=RuleResponse)
async def get_rule(request, rule_id: int):
    rule = await sync_to_async(_active_rule)(rule_id)
    return success_response(rule)


@router.get("/rules/{rule_id}/remedies", response=ReferenceResponse)
async def rule_remedies(request, rule_id: int, query: RemedyQuery = Query(...)):
    """Remedies of a rule filtered by budget and difficulty."""
    rule = await sync_to_async(_active_rule)(rule_id)
    remedies = catalog.applicable_remedies(
        rule["remedies"], budget=query.budget, difficulty=query.difficulty
    )
    return success_response(remedies)


# =============================================================================
# Reference data
# =============================================================================


@router.get("/elements", response=ReferenceResponse)
def five_elements(request):
    return success_response(FIVE_ELEMENTS)


@router.get("/directions", response=ReferenceResponse)
def directions(request):
    return success_response(DIRECTIONS_INFO)


@router.get("/rooms/{room_type}", response=ReferenceResponse)
def room_guidelines(request, room_type: str):
    guidelines = ROOM_GUIDELINES.get(room_type)
    if guidelines is None:
        raise NotFoundError("Room type not found")
    return success_response(guidelines)


# =============================================================================
# Administration (staff only)
# =============================================================================


def _create_rule(payload: RuleCreateSchema, user_id: int) -> dict:
    try:
        with transaction.atomic():
            rule = VastuRule.objects.create(
                **payload.dict(),
                created_by_id=user_id,
                last_modified_by_id=user_id,
            )
    except IntegrityError:
        raise ConflictError(f"A rule named '{payload.name}' already exists")
    logger.info("Rule %s created by user %s", rule.id, user_id)
    return _format_rule(VastuRule.objects.filter(id=rule.id).values(*RULE_FIELDS).get())


def _update_rule(rule_id: int, updates: dict, user_id: int) -> dict:
    try:
        with transaction.atomic():
            rule = VastuRule.objects.select_for_update().filter(id=rule_id).first()
            if rule is None:
                raise NotFoundError("Vastu rule not found")
            for key, value in updates.items():
                setattr(rule, key, value)
            rule.last_modified_by_id = user_id
            rule.save()
    except IntegrityError:
        raise ConflictError("A rule with this name already exists")
    logger.info("Rule %s updated to version %s", rule_id, rule.version)
    return _format_rule(VastuRule.objects.filter(id=rule_id).values(*RULE_FIELDS).get())


@router.post("/rules", response={201: RuleResponse}, auth=AuthBearer())
async def create_rule(request, payload: RuleCreateSchema):
    principal = require_staff(request)
    rule = await sync_to_async(_create_rule)(payload, principal.id)
    return 201, success_response(rule, "Vastu rule created successfully")


@router.put("/rules/{rule_id}", response=RuleResponse, auth=AuthBearer())
async def update_rule(request, rule_id: int, payload: RuleUpdateSchema):
    principal = require_staff(request)
    rule = await sync_to_async(_update_rule)(
        rule_id, payload.dict(exclude_unset=True), principal.id
    )
    return success_response(rule, "Vastu rule updated successfully")


@router.delete("/rules/{rule_id}", response=RuleResponse, auth=AuthBearer())
async def deactivate_rule(request, rule_id: int):
    principal = require_staff(request)
    await sync_to_async(_update_rule)(rule_id, {"is_active": False}, principal.id)
    return success_response(None, "Vastu rule deactivated successfully")
