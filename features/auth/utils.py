import hashlib
import secrets
from datetime import timedelta
from typing import Dict, Tuple

from django.contrib.auth.models import User
from django.utils import timezone
from ninja_jwt.tokens import RefreshToken

EMAIL_VERIFICATION_TTL = timedelta(hours=24)
PASSWORD_RESET_TTL = timedelta(minutes=10)


def create_token_pair(user: User) -> Dict[str, str]:
    """Generate access and refresh tokens for a user."""
    refresh = RefreshToken.for_user(user)
    return {
        "access": str(refresh.access_token),
        "refresh": str(refresh),
        "user_id": user.id,
        "email": user.email,
    }


def hash_token(raw: str) -> str:
    return hashlib.sha256(raw.encode()).hexdigest()


def issue_token(ttl: timedelta) -> Tuple[str, str, object]:
    """Return ``(raw_token, hashed_token, expires_at)``; only the hash is stored."""
    raw = secrets.token_hex(20)
    return raw, hash_token(raw), timezone.now() + ttl
