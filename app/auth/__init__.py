# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT-based authentication using Supabase Auth.
#
# Usage:
#   from app.auth import get_current_user
#
#   @router.get("/protected")
#   async def protected(session: UserSession = Depends(get_current_user)):
#       return {"user_id": session.user_id}
# =============================================================================

from app.auth.dependencies import get_current_user, get_current_user_optional
from app.auth.models import LoginRequest, SignupRequest, TokenResponse, UserResponse

__all__ = [
    "get_current_user",
    "get_current_user_optional",
    "LoginRequest",
    "SignupRequest",
    "TokenResponse",
    "UserResponse",
]
