from fastapi import APIRouter
from wipshare.modules.tiers.router import router as tiers_router
from wipshare.modules.users.router import router as users_router
from wipshare.modules.usage.router import router as usage_router
from wipshare.modules.uploads.router import router as uploads_router
from wipshare.modules.tracks.router import router as tracks_router

api_router = APIRouter()
api_router.include_router(tiers_router, prefix="/tiers", tags=["tiers"])
api_router.include_router(users_router, prefix="/users", tags=["users"])
api_router.include_router(usage_router, prefix="/usage", tags=["usage"])
api_router.include_router(uploads_router, prefix="/uploads", tags=["uploads"])
api_router.include_router(tracks_router, prefix="/tracks", tags=["tracks"])

@api_router.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}
