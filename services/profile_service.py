from typing import Any, List, Mapping, Optional, Union
import logging

from sqlalchemy.engine import Engine

from app.config import settings
from domain.mappers import ProfileMapper
from domain.schemas import Profile, ProfileSync, ProfileUpdate, WeightHistoryEntry, validate_payload
from repositories import UserRepository
from services.sanitizer import (
    MERGE_ON_CONFLICT,
    OVERWRITE_ON_CONFLICT,
    REQUIRED_PROFILE_FIELDS,
    require_profile_fields,
    sanitize_profile_fields,
)
from services.weight_history_service import WeightHistoryService

logger = logging.getLogger("nutrilog.profile")


class ProfileService:
    """Business logic for profile management"""

    @staticmethod
    def get_all_profiles(engine: Engine) -> List[Profile]:
        """Return all profiles (no pagination)."""
        repo = UserRepository(engine)
        return [ProfileMapper.from_row(row) for row in repo.find_all()]

    @staticmethod
    def get_profile(engine: Engine, user_id: str) -> Optional[Profile]:
        """Profile by id, or None"""
        row = UserRepository(engine).find_by_id(user_id)
        if row is None:
            logger.warning(f"profile_not_found user_id={user_id}")
            return None

        logger.info(f"profile_fetched user_id={user_id}")
        return ProfileMapper.from_row(row)

    @staticmethod
    def get_profile_by_email(engine: Engine, email: str) -> Optional[Profile]:
        row = UserRepository(engine).find_by_email(email)
        return ProfileMapper.from_row(row) if row is not None else None

    @staticmethod
    def upsert_profile(
        engine: Engine,
        payload: Union[ProfileSync, Mapping[str, Any]],
        record_weight: bool = True,
    ) -> Profile:
        """
        Create a profile, or merge the payload into the stored one.

        Optional fields are sanitized first, so empty strings, zeros and
        unparseable numbers arrive as NULL and never replace a stored value.
        Name and email are always taken from the payload.

        Args:
            engine: storage engine
            payload: ProfileSync or a mapping accepted by it
            record_weight: append a weight-history point when the payload
                carries a valid weight

        Returns:
            The profile as stored after the merge

        Raises:
            ServiceValidationError: if id, email or name is missing or invalid
            StorageError: if the statement fails
        """
        profile = validate_payload(ProfileSync, payload)
        values = profile.model_dump()
        require_profile_fields(values)

        sanitized = sanitize_profile_fields(values)
        args = ProfileMapper.to_write_args(
            profile.id, {"email": values["email"], "name": values["name"], **sanitized}
        )

        repo = UserRepository(engine)
        row = repo.upsert(args, overwrite=OVERWRITE_ON_CONFLICT, merge=MERGE_ON_CONFLICT)
        result = ProfileMapper.from_row(row)

        logger.info(
            f"profile_upserted user_id={profile.id} "
            f"fields={sorted(k for k, v in sanitized.items() if v is not None)}"
        )

        if record_weight and sanitized["weight"] is not None:
            WeightHistoryService.on_weight_change(engine, profile.id, sanitized["weight"])

        return result

    @staticmethod
    def update_profile(
        engine: Engine,
        user_id: str,
        payload: Union[ProfileUpdate, Mapping[str, Any]],
        record_weight: bool = True,
    ) -> Optional[Profile]:
        """
        Apply only the supplied fields to an existing profile.

        Unlike the upsert, a supplied optional field that sanitizes to nothing
        clears the stored value.

        Returns:
            The updated profile, or None if no profile has that id

        Raises:
            ServiceValidationError: if a supplied email or name is blank
            EmptyUpdateError: if the payload supplies no field
        """
        changes = validate_payload(ProfileUpdate, payload).model_dump(exclude_unset=True)

        required = [field for field in REQUIRED_PROFILE_FIELDS if field in changes]
        if required:
            require_profile_fields(changes, fields=required)

        sanitized = sanitize_profile_fields(changes, only_present=True)
        sanitized.update({field: changes[field] for field in required})

        repo = UserRepository(engine)
        row = repo.update_by_id(user_id, ProfileMapper.to_update_pairs(sanitized))
        if row is None:
            logger.warning(f"profile_update_missing user_id={user_id}")
            return None

        result = ProfileMapper.from_row(row)
        logger.info(f"profile_updated user_id={user_id} fields={sorted(sanitized)}")

        if record_weight and sanitized.get("weight") is not None:
            WeightHistoryService.on_weight_change(engine, user_id, sanitized["weight"])

        return result

    @staticmethod
    def delete_profile(engine: Engine, user_id: str) -> bool:
        """Delete a profile; meals and weight history go with it."""
        deleted = UserRepository(engine).delete_by_id(user_id)
        logger.info(f"profile_deleted user_id={user_id} deleted={deleted}")
        return deleted

    @staticmethod
    def ensure_profile_exists(engine: Engine, user_id: str) -> Profile:
        """
        Return the profile for ``user_id``, creating a placeholder if needed.

        Used when a meal is logged for an identity that never synced a profile.
        """
        repo = UserRepository(engine)
        row = repo.find_by_id(user_id)
        if row is None:
            placeholder = {
                "email": f"{user_id}@{settings.placeholder_email_domain}",
                "name": settings.placeholder_profile_name,
            }
            row = repo.create_if_absent(ProfileMapper.to_write_args(user_id, placeholder))
            logger.info(f"profile_placeholder_created user_id={user_id}")
        return ProfileMapper.from_row(row)

    @staticmethod
    def get_weight_history(engine: Engine, user_id: str) -> List[WeightHistoryEntry]:
        return WeightHistoryService.get_history(engine, user_id)
