# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# E-mail/password accounts through Supabase Auth:
# - POST /auth/login, /auth/signup, /auth/logout
# - GET /auth/me, /auth/verify for an existing token
#
# Each call builds its own anon-key client so one user's auth state never
# leaks into another request.
# =============================================================================

import logging

from fastapi import APIRouter, Depends

from app.auth.dependencies import get_current_user
from app.auth.models import LoginRequest, SignupRequest, TokenResponse, UserResponse
from app.exceptions import AuthenticationError
from core.models.session import UserSession
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter()


def _token_response(result) -> TokenResponse:
    """Map a supabase AuthResponse to our response body."""
    session = getattr(result, "session", None)
    user = getattr(result, "user", None)
    return TokenResponse(
        access_token=session.access_token if session else None,
        refresh_token=session.refresh_token if session else None,
        expires_in=session.expires_in if session else None,
        user=UserResponse(id=str(user.id), email=user.email) if user else None,
    )


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest) -> TokenResponse:
    """
    Sign in with e-mail and password.

    Raises:
        401: If Supabase rejects the credentials
    """
    client = SupabaseClient.create_auth_client()
    try:
        result = client.auth.sign_in_with_password(
            {"email": request.email, "password": request.password}
        )
    except Exception as e:
        logger.warning(f"Login failed for {request.email}: {e}")
        raise AuthenticationError(str(e))

    logger.info(f"User signed in: {request.email}")
    return _token_response(result)


@router.post("/signup", response_model=TokenResponse)
async def signup(request: SignupRequest) -> TokenResponse:
    """
    Create an account.

    When the project requires e-mail confirmation the response has a user
    but no access token.
    """
    client = SupabaseClient.create_auth_client()
    try:
        result = client.auth.sign_up({"email": request.email, "password": request.password})
    except Exception as e:
        logger.warning(f"Signup failed for {request.email}: {e}")
        raise AuthenticationError(str(e))

    logger.info(f"User signed up: {request.email}")
    return _token_response(result)


@router.post("/logout")
async def logout(session: UserSession = Depends(get_current_user)) -> dict:
    """Revoke the caller's refresh tokens."""
    client = SupabaseClient.get_client()
    try:
        client.auth.admin.sign_out(session.access_token)
    except Exception as e:
        logger.warning(f"Logout failed for user {session.user_id}: {e}")
        raise AuthenticationError(str(e))

    return {"success": True}


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(session: UserSession = Depends(get_current_user)) -> UserResponse:
    """The authenticated user, as carried by the token."""
    return UserResponse(id=session.user_id, email=session.email)


@router.get("/verify")
async def verify_token(session: UserSession = Depends(get_current_user)) -> dict:
    """
    Check that the current token is still valid.

    Raises:
        401: If the token is invalid or expired
    """
    return {"valid": True, "user_id": session.user_id, "email": session.email}
