"""Lifespan wiring for a FastAPI host app.

Builds the backing cache store, the durable permission store, one
PermissionCache, and one AuthorizationService and stores them on
app.state; no business logic here.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from warden.application.services.authorization_service import AuthorizationService
from warden.application.services.permission_cache import PermissionCache
from warden.application.services.policies import default_policies
from warden.core.config import get_settings
from warden.core.logging import setup_logging
from warden.infrastructure.cache import CacheService, build_cache_store, permissions_key
from warden.infrastructure.persistence import database
from warden.infrastructure.persistence.repositories import SqlPermissionStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Wire the engine at startup; disconnect cache and dispose the engine at shutdown."""
    settings = get_settings()
    setup_logging()

    # ---- Startup ----
    cache_store = build_cache_store(settings)
    if isinstance(cache_store, CacheService):
        await cache_store.connect()
    app.state.cache = cache_store

    permission_cache = PermissionCache(
        SqlPermissionStore(database.get_session_factory()),
        cache_store,
        cache_key=permissions_key(settings.cache_prefix),
        ttl=settings.permission_cache_ttl,
        timeout=settings.permission_store_timeout_seconds,
    )
    # Long-running workers must not keep a view from a previous boot.
    permission_cache.clear_class_permissions()
    app.state.permission_cache = permission_cache
    app.state.authorization_service = AuthorizationService(
        permission_cache,
        default_policies(settings.super_admin_role_names),
        teams_enabled=settings.teams_enabled,
    )
    logger.info("Permission cache ready (key %s)", permission_cache.cache_key)

    yield

    # ---- Shutdown ----
    if isinstance(app.state.cache, CacheService):
        await app.state.cache.disconnect()
        logger.info("Cache disconnected")
    await database.dispose_engine()
