import uuid
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from wipshare.core.db import get_session
from wipshare.core.validation import validated
from wipshare.modules.tracks.schemas import (
    TrackConfirm, TrackUpdate, TrackOut, TrackStreamOut,
    CommentCreate, CommentOut,
)
from wipshare.modules.tracks.service import TrackService
from wipshare.modules.users.models import User
from wipshare.modules.users.router import current_user
from wipshare.platform.ports.object_storage import ObjectStoragePort
from wipshare.platform.provider_registry import get_object_storage

router = APIRouter()

def svc(
    session: AsyncSession = Depends(get_session),
    storage: ObjectStoragePort = Depends(get_object_storage),
) -> TrackService:
    return TrackService(session, storage)

# ---- Tracks ----

@router.post("", response_model=TrackOut, status_code=status.HTTP_201_CREATED)
async def confirm_track(
    payload: TrackConfirm = Depends(validated(TrackConfirm)),
    user: User = Depends(current_user),
    service: TrackService = Depends(svc),
):
    return await service.confirm_upload(user, payload)

@router.get("", response_model=list[TrackOut])
async def list_tracks(
    limit: int = 50, offset: int = 0,
    user: User = Depends(current_user),
    service: TrackService = Depends(svc),
):
    return await service.list_tracks(user, limit=limit, offset=offset)

@router.get("/{track_id}", response_model=TrackOut)
async def get_track(
    track_id: uuid.UUID,
    user: User = Depends(current_user),
    service: TrackService = Depends(svc),
):
    return await service.get_track(user, track_id)

@router.patch("/{track_id}", response_model=TrackOut)
async def update_track(
    track_id: uuid.UUID,
    payload: TrackUpdate = Depends(validated(TrackUpdate)),
    user: User = Depends(current_user),
    service: TrackService = Depends(svc),
):
    return await service.update_track(user, track_id, payload)

@router.delete("/{track_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_track(
    track_id: uuid.UUID,
    user: User = Depends(current_user),
    service: TrackService = Depends(svc),
):
    await service.delete_track(user, track_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.post("/{track_id}/play", response_model=TrackStreamOut)
async def play_track(
    track_id: uuid.UUID,
    user: User = Depends(current_user),
    service: TrackService = Depends(svc),
):
    obj, grant = await service.stream_track(user, track_id)
    return {"track": obj, "download_url": grant.url, "expires_at": grant.expires_at}

# ---- Comments ----

@router.post("/{track_id}/comments", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
async def add_comment(
    track_id: uuid.UUID,
    payload: CommentCreate = Depends(validated(CommentCreate)),
    user: User = Depends(current_user),
    service: TrackService = Depends(svc),
):
    return await service.add_comment(user, track_id, payload)

@router.get("/{track_id}/comments", response_model=list[CommentOut])
async def list_comments(
    track_id: uuid.UUID,
    user: User = Depends(current_user),
    service: TrackService = Depends(svc),
):
    return await service.list_comments(user, track_id)
