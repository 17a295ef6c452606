"""Account lifecycle: registration, login, email verification, password reset."""

import logging
from typing import Optional

from django.contrib.auth import authenticate
from django.contrib.auth.models import User
from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone
from ninja_jwt.exceptions import InvalidToken, TokenError
from ninja_jwt.tokens import RefreshToken

from core.models import Profile
from core.utils.config import get_setting
from core.utils.exceptions import (
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from features.notifications.email import send_best_effort, send_templated_email
from features.users.service import require_user
from .utils import (
    EMAIL_VERIFICATION_TTL,
    PASSWORD_RESET_TTL,
    create_token_pair,
    hash_token,
    issue_token,
)

logger = logging.getLogger(__name__)


def _frontend_url(path: str) -> str:
    return f"{get_setting().FRONTEND_URL.rstrip('/')}/{path.lstrip('/')}"


def register_user(
    *,
    first_name: str,
    last_name: str,
    email: str,
    password: str,
    phone: Optional[str] = None,
    gender: Optional[str] = None,
) -> dict:
    """
    Create User + Profile and return tokens.

    The verification email is best-effort: registration succeeds even when
    it cannot be delivered.
    """
    if User.objects.filter(email__iexact=email).exists():
        raise ValidationError("User already exists with this email")
    if phone and Profile.objects.filter(phone=phone).exists():
        raise ValidationError("User already exists with this phone number")

    raw_token, hashed, expires = issue_token(EMAIL_VERIFICATION_TTL)
    try:
        with transaction.atomic():
            user = User.objects.create_user(
                username=email,
                email=email,
                password=password,
                first_name=first_name,
                last_name=last_name,
            )
            Profile.objects.create(
                user=user,
                phone=phone,
                gender=gender,
                email_verification_token=hashed,
                email_verification_expire=expires,
            )
    except IntegrityError:
        logger.exception("Database integrity error during registration")
        raise ValidationError("Registration failed: duplicate entry")

    logger.info("Registered user %s", user.id)
    send_best_effort(
        email,
        "email_verification",
        {
            "first_name": first_name,
            "verification_url": _frontend_url(f"verify-email/{raw_token}"),
        },
    )
    return {"user": require_user(user.id), "tokens": create_token_pair(user)}


def login_user(email: str, password: str) -> dict:
    user_obj = User.objects.filter(email__iexact=email).first()
    if user_obj is None:
        raise UnauthorizedError("Invalid credentials")
    if not user_obj.is_active:
        raise UnauthorizedError("Account is deactivated. Please contact support.")

    user = authenticate(username=user_obj.username, password=password)
    if user is None:
        raise UnauthorizedError("Invalid credentials")

    User.objects.filter(id=user.id).update(last_login=timezone.now())
    Profile.objects.filter(user_id=user.id).update(login_count=F("login_count") + 1)
    logger.info("User %s logged in", user.id)
    return {"user": require_user(user.id), "tokens": create_token_pair(user)}


def refresh_tokens(refresh: str) -> dict:
    try:
        token = RefreshToken(refresh)
    except (TokenError, InvalidToken) as exc:
        raise UnauthorizedError(f"Invalid refresh token: {exc}")

    user = User.objects.filter(id=token.payload.get("user_id")).first()
    if user is None:
        raise UnauthorizedError("User not found")
    if not user.is_active:
        raise UnauthorizedError("User account is disabled")
    return {
        "access": str(token.access_token),
        "refresh": str(token),
        "user_id": user.id,
        "email": user.email,
    }


def verify_email(raw_token: str) -> dict:
    profile = (
        Profile.objects.select_related("user")
        .filter(
            email_verification_token=hash_token(raw_token),
            email_verification_expire__gt=timezone.now(),
        )
        .first()
    )
    if profile is None:
        raise ValidationError("Invalid or expired verification token")

    profile.is_email_verified = True
    profile.email_verification_token = None
    profile.email_verification_expire = None
    profile.updated_at = timezone.now()
    profile.save(
        update_fields=[
            "is_email_verified",
            "email_verification_token",
            "email_verification_expire",
            "updated_at",
        ]
    )
    logger.info("Verified email of user %s", profile.user_id)
    send_best_effort(
        profile.user.email,
        "welcome",
        {"first_name": profile.user.first_name, "dashboard_url": _frontend_url("dashboard")},
    )
    return require_user(profile.user_id)


def resend_verification(user_id: int) -> None:
    """Issue a fresh verification token and email it. Raises DependencyError."""
    user = User.objects.filter(id=user_id).first()
    profile = Profile.objects.filter(user_id=user_id).first()
    if user is None or profile is None:
        raise NotFoundError("User not found")
    if profile.is_email_verified:
        raise ValidationError("Email is already verified")

    raw_token, hashed, expires = issue_token(EMAIL_VERIFICATION_TTL)
    Profile.objects.filter(user_id=user_id).update(
        email_verification_token=hashed, email_verification_expire=expires
    )
    send_templated_email(
        user.email,
        "email_verification",
        {
            "first_name": user.first_name,
            "verification_url": _frontend_url(f"verify-email/{raw_token}"),
        },
    )


def forgot_password(email: str) -> bool:
    """
    Store a reset token and email the reset link.

    Returns whether the email went out. When it did not, the token is
    cleared so no unreachable link stays valid.
    """
    user = User.objects.filter(email__iexact=email, is_active=True).first()
    if user is None:
        raise NotFoundError("No user found with that email")

    raw_token, hashed, expires = issue_token(PASSWORD_RESET_TTL)
    Profile.objects.filter(user_id=user.id).update(
        reset_password_token=hashed, reset_password_expire=expires
    )
    sent = send_best_effort(
        user.email,
        "password_reset",
        {
            "first_name": user.first_name,
            "reset_url": _frontend_url(f"reset-password/{raw_token}"),
        },
    )
    if not sent:
        Profile.objects.filter(user_id=user.id).update(
            reset_password_token=None, reset_password_expire=None
        )
    return sent


def reset_password(raw_token: str, password: str) -> dict:
    with transaction.atomic():
        profile = (
            Profile.objects.select_for_update()
            .select_related("user")
            .filter(
                reset_password_token=hash_token(raw_token),
                reset_password_expire__gt=timezone.now(),
            )
            .first()
        )
        if profile is None:
            raise ValidationError("Invalid or expired reset token")

        user = profile.user
        user.set_password(password)
        user.save(update_fields=["password"])
        profile.reset_password_token = None
        profile.reset_password_expire = None
        profile.updated_at = timezone.now()
        profile.save(
            update_fields=["reset_password_token", "reset_password_expire", "updated_at"]
        )

    logger.info("Password reset for user %s", user.id)
    return {"user": require_user(user.id), "tokens": create_token_pair(user)}
