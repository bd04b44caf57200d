# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Turns the bearer token into a UserSession, which routes then pass
# explicitly to every service call.
#
# Token verification supports both:
# - ES256 (Supabase JWT signing keys) via the project's JWKS
# - HS256 (legacy Supabase JWT secret)
#
# Usage:
#   @router.get("/clients")
#   async def list_clients(session: UserSession = Depends(get_current_user)):
#       ...
# =============================================================================

import logging
import time
from typing import Optional

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from app.config import settings
from core.models.session import UserSession

logger = logging.getLogger(__name__)

security = HTTPBearer()
security_optional = HTTPBearer(auto_error=False)

JWT_AUDIENCE = "authenticated"

_jwks_cache: dict = {}
_jwks_cache_time: float = 0
JWKS_CACHE_TTL = 3600  # 1 hour


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _get_jwks_url() -> str:
    return f"{settings.SUPABASE_URL.rstrip('/')}/auth/v1/.well-known/jwks.json"


def _fetch_jwks() -> dict:
    """Fetch the project's JWKS, cached for JWKS_CACHE_TTL seconds."""
    global _jwks_cache, _jwks_cache_time

    now = time.time()
    if _jwks_cache and (now - _jwks_cache_time) < JWKS_CACHE_TTL:
        return _jwks_cache

    try:
        response = httpx.get(_get_jwks_url(), timeout=10)
        response.raise_for_status()
        _jwks_cache = response.json()
        _jwks_cache_time = now
        logger.debug("Fetched JWKS")
        return _jwks_cache
    except Exception as e:
        logger.warning(f"Failed to fetch JWKS: {e}")
        # A stale key set is better than none
        return _jwks_cache or {"keys": []}


def _get_signing_key(token: str) -> tuple[str | dict, str]:
    """
    Pick the verification key for a token from its header.

    Returns:
        (key, algorithm); HS256 with the project secret when nothing better fits
    """
    try:
        header = jwt.get_unverified_header(token)
    except JWTError:
        return settings.SUPABASE_JWT_SECRET, "HS256"

    alg = header.get("alg", "HS256")
    kid = header.get("kid")

    if alg == "HS256":
        return settings.SUPABASE_JWT_SECRET, "HS256"

    if kid:
        for key in _fetch_jwks().get("keys", []):
            if key.get("kid") == kid:
                return key, alg

    logger.warning(f"No key for alg={alg}, kid={kid}; falling back to HS256")
    return settings.SUPABASE_JWT_SECRET, "HS256"


def decode_token(token: str) -> UserSession:
    """
    Verify a Supabase access token and build the session it stands for.

    Raises:
        HTTPException: 401 if the token is invalid, expired or has no subject
    """
    try:
        key, algorithm = _get_signing_key(token)
        payload = jwt.decode(token, key, algorithms=[algorithm], audience=JWT_AUDIENCE)
    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise _unauthorized("Token has expired")
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise _unauthorized(f"Invalid token: {e}")

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("JWT token missing 'sub' claim")
        raise _unauthorized("Invalid token: missing user ID")

    logger.debug(f"Authenticated user: {user_id}")
    return UserSession(user_id=user_id, email=payload.get("email"), access_token=token)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> UserSession:
    """
    Session of the caller, from the Authorization header.

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    return decode_token(credentials.credentials)


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_optional),
) -> Optional[UserSession]:
    """Like get_current_user, but None instead of 401 for anonymous callers."""
    if credentials is None:
        return None

    try:
        return decode_token(credentials.credentials)
    except HTTPException:
        return None
