# =============================================================================
# core/models/session.py - User Session Context
# =============================================================================
# The authenticated user, passed explicitly to every service call.
# Built by app.auth from the verified bearer token; nothing in core/ reads
# the current user from global state.
# =============================================================================

from pydantic import BaseModel, Field


class UserSession(BaseModel):
    """
    Who is acting, for the lifetime of one request.

    Example:
        session = UserSession(user_id="0f6a...", email="ana@ex.com")
        ClientService.list_clients(session)
    """

    user_id: str = Field(..., description="Supabase auth user id")
    email: str | None = Field(default=None, description="User e-mail, if present in the token")
    access_token: str | None = Field(
        default=None,
        description="Raw bearer token, kept for calls made on the user's behalf"
    )

    model_config = {"frozen": True}
