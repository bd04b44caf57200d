# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Request/response bodies of the /auth routes. The authenticated context
# itself is core.models.UserSession.
# =============================================================================

from typing import Optional

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """E-mail/password sign-in."""
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class SignupRequest(BaseModel):
    """
    New account. Supabase may require e-mail confirmation before the
    first login, in which case no session is returned.
    """
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)


class UserResponse(BaseModel):
    id: str
    email: Optional[str] = None


class TokenResponse(BaseModel):
    """Session issued by Supabase Auth."""
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    user: Optional[UserResponse] = None
