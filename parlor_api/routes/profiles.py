"""Profile API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from config import config
from parlor import achievements
from parlor.records import RecordStore
from parlor_api.schemas import (
    AchievementResponse,
    ProfileListResponse,
    ProfileResponse,
    ResetResponse,
)

router = APIRouter()


def get_store() -> RecordStore:
    """Open the configured stats file fresh for each request."""
    return RecordStore(config.game.stats_file)


Store = Annotated[RecordStore, Depends(get_store)]


@router.get("/profiles")
async def list_profiles(store: Store) -> ProfileListResponse:
    """List every stored profile."""
    return ProfileListResponse(
        profiles=[
            ProfileResponse.from_record(name, record)
            for name, record in sorted(store.all().items())
        ]
    )


@router.get("/profiles/{name}")
async def get_profile(name: str, store: Store) -> ProfileResponse:
    """Get one profile by display name."""
    record = store.find(name)
    if record is None:
        raise HTTPException(status_code=404, detail=f"No profile named '{name}'")
    return ProfileResponse.from_record(name, record)


@router.post("/profiles/reset")
async def reset_all_profiles(store: Store) -> ResetResponse:
    """Reset every profile's statistics."""
    store.reset_all()
    return ResetResponse(reset=sorted(store.all()))


@router.post("/profiles/{name}/reset")
async def reset_profile(name: str, store: Store) -> ResetResponse:
    """Reset one profile's statistics."""
    if not store.reset(name):
        raise HTTPException(status_code=404, detail=f"No profile named '{name}'")
    return ResetResponse(reset=[name])


@router.get("/achievements")
async def list_achievements() -> list[AchievementResponse]:
    """List the achievement catalog."""
    return [
        AchievementResponse(key=key, description=description)
        for key, description in achievements.CATALOG.items()
    ]
