from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.orm import Session
from typing import Optional

from lifelog.auth import get_current_user
from lifelog.clock import Clock, get_clock
from lifelog.database import get_db
from lifelog.services.profile_service import ProfileService

router = APIRouter(prefix="/api/v1/profile", tags=["Profile"])

IMAGE_PREFIXES = ("data:image/", "http://", "https://")


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    image: Optional[str] = None

    @field_validator("image")
    @classmethod
    def _image_url(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.startswith(IMAGE_PREFIXES):
            raise ValueError("Must be a valid image URL or data URL")
        return value


@router.get("")
async def get_profile(
    user_id: int = Depends(get_current_user),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Account details with entry count, expense total and current streak."""
    return ProfileService.get_profile(db, user_id, clock)


@router.put("")
async def update_profile(profile_data: ProfileUpdate, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    data = profile_data.model_dump(exclude_unset=True)
    return ProfileService.update(db, user_id, data).to_dict()
