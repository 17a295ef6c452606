"""Django Ninja API configuration."""

import logging

from django.conf import settings
from ninja import NinjaAPI
from ninja.errors import AuthenticationError
from ninja.errors import ValidationError as NinjaValidationError

from core.utils.exceptions import VastuError
from core.utils.responses import error_response
from features.analysis.endpoints import router as analysis_router
from features.auth.endpoints import router as auth_router
from features.maps.endpoints import router as maps_router
from features.notifications.endpoints import router as notifications_router
from features.uploads.endpoints import router as uploads_router
from features.users.endpoints import router as users_router
from features.vastu.endpoints import router as vastu_router

logger = logging.getLogger(__name__)

# Create the main API instance
api = NinjaAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description="Vastu analysis of floor plans: accounts, uploads, rules and scoring",
)

# Register routers
api.add_router("/auth", auth_router, tags=["Authentication"])
api.add_router("/users", users_router, tags=["Users"])
api.add_router("/analysis", analysis_router, tags=["Analysis"])
api.add_router("/upload", uploads_router, tags=["Uploads"])
api.add_router("/vastu", vastu_router, tags=["Vastu Rules"])
api.add_router("/maps", maps_router, tags=["Maps"])
api.add_router("/notifications", notifications_router, tags=["Notifications"])


@api.exception_handler(VastuError)
def handle_vastu_error(request, exc: VastuError):
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", exc.kind, request.path, exc.message)
    return api.create_response(
        request,
        error_response(exc.message, exc.kind, exc.details),
        status=exc.status_code,
    )


@api.exception_handler(NinjaValidationError)
def handle_validation_error(request, exc: NinjaValidationError):
    details = [
        {"loc": list(err.get("loc", [])), "msg": err.get("msg", "")}
        for err in exc.errors
    ]
    return api.create_response(
        request,
        error_response("Validation failed", "ValidationError", details),
        status=400,
    )


@api.exception_handler(AuthenticationError)
def handle_authentication_error(request, exc: AuthenticationError):
    return api.create_response(
        request,
        error_response("Access denied. Please login first.", "UnauthorizedError"),
        status=401,
    )


@api.get("/health", tags=["Health"])
def health(request):
    return {"success": True, "message": "Vastu Vision API is running", "data": None}
