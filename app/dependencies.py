# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
# =============================================================================

from typing import Annotated

from fastapi import Depends

from app.auth.dependencies import get_current_user
from core.models.session import UserSession

# Type alias for the authenticated session of the caller
SessionDep = Annotated[UserSession, Depends(get_current_user)]
