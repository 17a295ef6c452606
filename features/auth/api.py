from dataclasses import dataclass
from typing import Optional, Any

from django.http import HttpRequest
from ninja.security import HttpBearer
from ninja_jwt.authentication import JWTAuth

from core.models import Profile, PREMIUM_TIERS
from core.utils.exceptions import ForbiddenError, UnauthorizedError


@dataclass(frozen=True)
class Principal:
    """The acting user as resolved from a bearer token."""

    id: int
    email: str
    is_active: bool
    entitlement_tier: str = Profile.SubscriptionTier.FREE
    subscription_active: bool = True
    is_staff: bool = False

    @property
    def is_premium(self) -> bool:
        return self.subscription_active and self.entitlement_tier in PREMIUM_TIERS


ANONYMOUS = "anonymous"


def principal_for_user(user) -> Principal:
    profile = (
        Profile.objects.filter(user_id=user.id)
        .values("subscription_tier", "subscription_active")
        .first()
    )
    return Principal(
        id=user.id,
        email=user.email,
        is_active=user.is_active,
        entitlement_tier=(
            profile["subscription_tier"] if profile else Profile.SubscriptionTier.FREE
        ),
        subscription_active=profile["subscription_active"] if profile else False,
        is_staff=user.is_staff,
    )


class AuthBearer(HttpBearer):
    def authenticate(self, request: HttpRequest, token: str) -> Optional[Any]:
        auth = JWTAuth()
        try:
            # ninja-jwt's JWTAuth.authenticate returns (user, token) or None
            # We are manually verifying the token string passed by Ninja's HttpBearer.
            validated_token = auth.get_validated_token(token)
            user = auth.get_user(validated_token)

            if user and user.is_active:
                request.user = user  # Set the user on the request
                return principal_for_user(user)
        except Exception:
            return None
        return None


def allow_anonymous(request: HttpRequest) -> str:
    """Fallback auth callback for routes readable without a token."""
    return ANONYMOUS


optional_auth = [AuthBearer(), allow_anonymous]


def get_principal(request: HttpRequest) -> Optional[Principal]:
    """Return the authenticated principal, or None for anonymous callers."""
    auth = getattr(request, "auth", None)
    return auth if isinstance(auth, Principal) else None


def require_principal(request: HttpRequest) -> Principal:
    principal = get_principal(request)
    if principal is None:
        raise UnauthorizedError("Access denied. Please login first.")
    return principal


def require_staff(request: HttpRequest) -> Principal:
    principal = require_principal(request)
    if not principal.is_staff:
        raise ForbiddenError("User role is not authorized to access this route")
    return principal
