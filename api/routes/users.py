"""User profile routes"""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends
from sqlalchemy.engine import Engine
import logging

from api.dependencies import get_engine
from app.exceptions import NotFoundError
from domain.schemas import Profile, WeightHistoryEntry
from services import ProfileService

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger("nutrilog.api.users")


@router.get("", response_model=List[Profile])
def get_all_users(engine: Engine = Depends(get_engine)):
    """Return all profiles."""
    return ProfileService.get_all_profiles(engine)


@router.get("/{user_id}/weight-history", response_model=List[WeightHistoryEntry])
def get_weight_history(user_id: str, engine: Engine = Depends(get_engine)):
    """Weight measurements for a user, newest first."""
    return ProfileService.get_weight_history(engine, user_id)


@router.get("/{user_id}", response_model=Profile)
def get_user(user_id: str, engine: Engine = Depends(get_engine)):
    profile = ProfileService.get_profile(engine, user_id)
    if profile is None:
        raise NotFoundError(f"User {user_id} not found")
    return profile


@router.post("", response_model=Profile)
def sync_user(payload: Dict[str, Any] = Body(...), engine: Engine = Depends(get_engine)):
    """
    Create or merge a profile.

    Empty or invalid optional values never overwrite what is already stored.
    Requires id, email and name.
    """
    return ProfileService.upsert_profile(engine, payload)


@router.put("/{user_id}", response_model=Profile)
def update_user(
    user_id: str, payload: Dict[str, Any] = Body(...), engine: Engine = Depends(get_engine)
):
    """Apply the supplied fields to an existing profile."""
    profile = ProfileService.update_profile(engine, user_id, payload)
    if profile is None:
        raise NotFoundError(f"User {user_id} not found")
    return profile


@router.delete("/{user_id}")
def delete_user(user_id: str, engine: Engine = Depends(get_engine)):
    """Delete a user together with their meals and weight history."""
    if not ProfileService.delete_profile(engine, user_id):
        raise NotFoundError(f"User {user_id} not found")
    return {"success": True}
