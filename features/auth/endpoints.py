from asgiref.sync import sync_to_async
from ninja import Router

from core.utils.responses import success_response
from features.users.service import require_user
from . import service
from .api import AuthBearer, require_principal
from .schemas import (
    AuthResponse,
    EmailSchema,
    LoginSchema,
    MessageResponse,
    RefreshSchema,
    RegisterSchema,
    ResetPasswordSchema,
    TokenSchema,
    UserResponse,
)

router = Router()


@router.post("/register", response={201: AuthResponse})
async def register(request, payload: RegisterSchema):
    """Create an account and send the verification email."""
    data = await sync_to_async(service.register_user)(**payload.dict())
    return 201, success_response(
        data, "User registered successfully. Please check your email for verification."
    )


@router.post("/login", response=AuthResponse)
async def login(request, payload: LoginSchema):
    """
    Authenticate user with email and password, return access/refresh tokens.
    """
    data = await sync_to_async(service.login_user)(payload.email, payload.password)
    return success_response(data, "Login successful")


@router.post("/refresh", response=TokenSchema)
async def refresh_token(request, payload: RefreshSchema):
    """
    Refresh access token using a valid refresh token.
    """
    return await sync_to_async(service.refresh_tokens)(payload.refresh)


@router.get("/me", response=UserResponse, auth=AuthBearer())
async def me(request):
    user = await sync_to_async(require_user)(require_principal(request).id)
    return success_response(user)


@router.get("/verify-email/{token}", response=UserResponse)
async def verify_email(request, token: str):
    user = await sync_to_async(service.verify_email)(token)
    return success_response(user, "Email verified successfully")


@router.post("/resend-verification", response=MessageResponse, auth=AuthBearer())
async def resend_verification(request):
    await sync_to_async(service.resend_verification)(require_principal(request).id)
    return success_response(None, "Verification email sent successfully")


@router.post("/forgot-password", response=MessageResponse)
async def forgot_password(request, payload: EmailSchema):
    sent = await sync_to_async(service.forgot_password)(payload.email)
    message = (
        "Password reset email sent"
        if sent
        else "Password reset email could not be sent. Please try again later."
    )
    return success_response({"email_sent": sent}, message)


@router.post("/reset-password/{token}", response=AuthResponse)
async def reset_password(request, token: str, payload: ResetPasswordSchema):
    data = await sync_to_async(service.reset_password)(token, payload.password)
    return success_response(data, "Password reset successful")
