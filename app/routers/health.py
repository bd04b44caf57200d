# =============================================================================
# app/routers/health.py - Health Endpoints
# =============================================================================
# /health       process is up, with version and environment
# /health/live  bare liveness for container restarts
# /health/ready every Supabase dependency the registry needs:
#               the clients and contacts tables and the photo bucket.
#               Answers 503 while any of them is unreachable.
# =============================================================================

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Literal

from fastapi import APIRouter, Response
from pydantic import BaseModel

from app.config import settings
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter()

API_VERSION = "1.0.0"

REGISTRY_TABLES = ("clients", "contacts")


class ServiceInfo(BaseModel):
    service: str = "cadastro-api"
    status: Literal["up"] = "up"
    version: str = API_VERSION
    environment: str
    checked_at: datetime


class DependencyStatus(BaseModel):
    """One Supabase resource and whether it answered."""
    name: str
    kind: Literal["table", "bucket"]
    ok: bool
    error: str | None = None


class Readiness(BaseModel):
    ready: bool
    dependencies: list[DependencyStatus]
    checked_at: datetime


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _ping_table(table: str) -> None:
    SupabaseClient.get_client().table(table).select("id").limit(1).execute()


def _ping_bucket(bucket: str) -> None:
    SupabaseClient.get_client().storage.get_bucket(bucket)


async def _check(
    name: str,
    kind: Literal["table", "bucket"],
    ping: Callable[[str], None],
) -> DependencyStatus:
    try:
        await asyncio.to_thread(ping, name)
    except Exception as e:
        logger.warning(f"Readiness: {kind} {name} unavailable: {e}")
        return DependencyStatus(name=name, kind=kind, ok=False, error=str(e)[:120])
    return DependencyStatus(name=name, kind=kind, ok=True)


@router.get("/health", response_model=ServiceInfo)
async def health():
    return ServiceInfo(environment=settings.ENVIRONMENT, checked_at=_now())


@router.get("/health/live")
async def liveness() -> dict[str, bool]:
    """Always answers while the process serves requests."""
    return {"alive": True}


@router.get("/health/ready", response_model=Readiness)
async def readiness(response: Response):
    """
    Check the registry tables and the client photo bucket concurrently.

    A failed check is reported in its own entry; the endpoint itself
    never raises.
    """
    dependencies = await asyncio.gather(
        *(_check(table, "table", _ping_table) for table in REGISTRY_TABLES),
        _check(settings.CLIENTS_BUCKET, "bucket", _ping_bucket),
    )
    ready = all(d.ok for d in dependencies)
    if not ready:
        response.status_code = 503

    return Readiness(ready=ready, dependencies=list(dependencies), checked_at=_now())
