from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from wipshare.core.db import get_session
from wipshare.core.errors import Forbidden
from wipshare.core.validation import validated
from wipshare.modules.uploads.keys import is_public_key, key_owner
from wipshare.modules.uploads.schemas import (
    PresignUploadRequest, PresignDownloadRequest, PresignUploadOut, PresignDownloadOut
)
from wipshare.modules.uploads.service import UploadService
from wipshare.modules.users.models import User
from wipshare.modules.users.router import current_user
from wipshare.platform.ports.object_storage import ObjectStoragePort
from wipshare.platform.provider_registry import get_object_storage

router = APIRouter()

def svc(
    session: AsyncSession = Depends(get_session),
    storage: ObjectStoragePort = Depends(get_object_storage),
) -> UploadService:
    return UploadService(session, storage)

def _require_owner(key: str, user: User) -> None:
    if key_owner(key) != user.id:
        raise Forbidden("You do not have access to this object")

@router.post("/presign", response_model=PresignUploadOut)
async def presign_upload(
    payload: PresignUploadRequest = Depends(validated(PresignUploadRequest)),
    user: User = Depends(current_user),
    service: UploadService = Depends(svc),
):
    grant = await service.issue_upload_url(
        user, payload.filename, payload.is_public,
        size_bytes=payload.file_size, duration_seconds=payload.duration_seconds,
    )
    return {"url": grant.url, "key": grant.key, "expires_at": grant.expires_at}

@router.post("/download-url", response_model=PresignDownloadOut)
async def presign_download(
    payload: PresignDownloadRequest = Depends(validated(PresignDownloadRequest)),
    user: User = Depends(current_user),
    service: UploadService = Depends(svc),
):
    if not is_public_key(payload.key):
        _require_owner(payload.key, user)
    grant = service.issue_download_url(payload.key)
    return {"url": grant.url, "expires_at": grant.expires_at}

@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def delete_object(
    key: str = Query(..., min_length=1, max_length=512),
    user: User = Depends(current_user),
    service: UploadService = Depends(svc),
):
    _require_owner(key, user)
    await service.delete_object(key)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
