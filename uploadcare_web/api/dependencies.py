"""
FastAPI dependency injection.

Dependencies provide the group client, cache, resolver and registry to
route handlers. Routes never build their own collaborators, so tests
can override any of these with app.dependency_overrides.

The cache and mock client are process-wide: resolution reads the same
cache the store job writes.
"""

import logging
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import APIKeyHeader

from ..config.settings import Settings, get_settings
from ..core.groups.mount import FileGroupRegistry, MountOptions, StoreGroupHook
from ..core.groups.resolver import GroupResolver
from ..infrastructure.cache.client import GroupCache, create_group_cache
from ..infrastructure.jobs.store_group import StoreGroupJob
from ..infrastructure.uploadcare.client import (
    GroupApiClient,
    UploadcareConfig,
    create_group_api_client,
)
from ..views.uploader_tags import UploaderTags

logger = logging.getLogger(__name__)

# API Key security scheme
api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)

# Process-wide instances
_group_cache: Optional[GroupCache] = None
_mock_group_client: Optional[GroupApiClient] = None
_registry: Optional[FileGroupRegistry] = None


def reset_dependencies() -> None:
    """Drop shared instances. Used by tests after changing settings."""
    global _group_cache, _mock_group_client, _registry
    _group_cache = None
    _mock_group_client = None
    _registry = None


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------

async def verify_api_key(
    settings: Annotated[Settings, Depends(get_settings)],
    api_key: str = Security(api_key_header),
) -> str:
    """
    Validate API key from request header.

    Only endpoints that call Uploadcare with our secret key need this.
    Raises 403 if key is invalid or missing.
    """
    if not api_key:
        logger.warning("Request missing API key")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="API key required. Provide X-API-Key header.",
        )

    if api_key not in settings.api_keys_list:
        logger.warning(
            "Invalid API key attempt",
            extra={"key_prefix": api_key[:8]}
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid API key",
        )

    return api_key


# ---------------------------------------------------------------------------
# Service Dependencies
# ---------------------------------------------------------------------------

def get_group_cache(
    settings: Annotated[Settings, Depends(get_settings)],
) -> GroupCache:
    """Provide the shared group cache."""
    global _group_cache

    if _group_cache is None:
        _group_cache = create_group_cache(default_expires_in=settings.cache_expires_in)
        logger.info("Created shared group cache")
    return _group_cache


def get_group_client(
    settings: Annotated[Settings, Depends(get_settings)],
) -> GroupApiClient:
    """
    Provide the Uploadcare group client.

    In mock mode, the same in-memory client is reused across requests
    so stored groups persist during the session.
    """
    global _mock_group_client

    if settings.api_mock_mode:
        if _mock_group_client is None:
            _mock_group_client = create_group_api_client(mock_mode=True)
            logger.info("Created shared mock group client for session")
        return _mock_group_client

    config = UploadcareConfig(
        public_key=settings.public_key,
        secret_key=settings.secret_key,
        base_url=settings.api_base_url,
        timeout=settings.api_timeout,
    )
    return create_group_api_client(config=config)


def get_group_resolver(
    settings: Annotated[Settings, Depends(get_settings)],
    cache: Annotated[GroupCache, Depends(get_group_cache)],
) -> GroupResolver:
    return GroupResolver(cache=cache, cache_namespace=settings.cache_namespace)


def get_store_group_job(
    settings: Annotated[Settings, Depends(get_settings)],
    client: Annotated[GroupApiClient, Depends(get_group_client)],
    cache: Annotated[GroupCache, Depends(get_group_cache)],
) -> StoreGroupJob:
    return StoreGroupJob.from_settings(client, cache, settings)


def get_registry(
    settings: Annotated[Settings, Depends(get_settings)],
    resolver: Annotated[GroupResolver, Depends(get_group_resolver)],
    cache: Annotated[GroupCache, Depends(get_group_cache)],
) -> FileGroupRegistry:
    """
    Provide the process-wide mount registry.

    Applications mount their model fields on this registry at startup.
    Rendering uploaders does not need REST credentials, so a missing
    secret key only disables the store hook.
    """
    global _registry

    if _registry is None:
        try:
            client = get_group_client(settings)
        except ValueError as e:
            logger.warning(
                "Group client unavailable, store hook disabled",
                extra={"error": str(e)}
            )
            client = None
        _registry = build_registry(settings, resolver, client, cache)
    return _registry


def build_registry(
    settings: Settings,
    resolver: GroupResolver,
    client: Optional[GroupApiClient],
    cache: Optional[GroupCache] = None,
) -> FileGroupRegistry:
    options = MountOptions.from_settings(settings)
    hook = None
    if client is not None:
        job = StoreGroupJob.from_settings(client, cache, settings)
        hook = StoreGroupHook(job, options)
    return FileGroupRegistry(resolver, store_hook=hook, options=options)


def get_uploader_tags(
    settings: Annotated[Settings, Depends(get_settings)],
    registry: Annotated[FileGroupRegistry, Depends(get_registry)],
) -> UploaderTags:
    return UploaderTags(settings, registry)


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

AuthenticatedUser = Annotated[str, Depends(verify_api_key)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
GroupClientDep = Annotated[GroupApiClient, Depends(get_group_client)]
GroupResolverDep = Annotated[GroupResolver, Depends(get_group_resolver)]
StoreGroupJobDep = Annotated[StoreGroupJob, Depends(get_store_group_job)]
RegistryDep = Annotated[FileGroupRegistry, Depends(get_registry)]
UploaderTagsDep = Annotated[UploaderTags, Depends(get_uploader_tags)]
