"""
File group endpoints.

Resolve a stored field value the same way the mount registry does, and
store a group on Uploadcare either inline or as a background task.
"""

import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, HTTPException, Query, Response, status
from pydantic import BaseModel, Field

from ...core.groups.parser import GROUP_ID_PATTERN, classify
from ...infrastructure.uploadcare.client import UploadcareApiError
from ..dependencies import (
    AuthenticatedUser,
    GroupResolverDep,
    SettingsDep,
    StoreGroupJobDep,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Response Models
# ---------------------------------------------------------------------------

class FileGroupResponse(BaseModel):
    """A resolved group value."""
    kind: str = Field(description="canonical_group, url_list, single_url or empty")
    id: Optional[str] = Field(None, description="Group id, only for canonical groups")
    cdn_url: Optional[str] = Field(None, description="Stored value or group CDN URL")
    files_count: int = Field(0, description="Number of files in the group")
    file_urls: list[str] = Field(default_factory=list, description="Member URLs when known")


class StoreGroupResponse(BaseModel):
    group_id: str
    status: str = Field(description="stored or queued")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get(
    "/resolve",
    response_model=FileGroupResponse,
    summary="Resolve a stored group value",
)
async def resolve_group(
    resolver: GroupResolverDep,
    value: str = Query("", description="Raw field value"),
) -> FileGroupResponse:
    """Never fails on odd input; unrecognized values resolve as URLs."""
    reference = classify(value)
    group = resolver.resolve(reference)

    if group is None:
        return FileGroupResponse(kind=reference.kind.value)

    return FileGroupResponse(
        kind=reference.kind.value,
        id=group.id,
        cdn_url=group.cdn_url,
        files_count=group.files_count,
        file_urls=list(group.file_urls),
    )


@router.post(
    "/{group_id}/store",
    response_model=StoreGroupResponse,
    summary="Store a file group",
    description="Stores inline (200) or queues a background task (202) depending on store_files_async.",
)
def store_group(
    group_id: str,
    response: Response,
    background_tasks: BackgroundTasks,
    settings: SettingsDep,
    job: StoreGroupJobDep,
    api_key: AuthenticatedUser,
) -> StoreGroupResponse:
    if not GROUP_ID_PATTERN.fullmatch(group_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="group_id must look like <uuid>~<count>",
        )

    if settings.store_files_async:
        background_tasks.add_task(job.perform, group_id)
        response.status_code = status.HTTP_202_ACCEPTED
        logger.info("Queued group store", extra={"group_id": group_id})
        return StoreGroupResponse(group_id=group_id, status="queued")

    try:
        job.perform(group_id)
    except UploadcareApiError as e:
        logger.error(
            "Failed to store group",
            extra={"group_id": group_id, "error": str(e)}
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Uploadcare rejected the store request: {e}",
        )

    return StoreGroupResponse(group_id=group_id, status="stored")
