# app/api/endpoints/users.py

from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app import schemas
from app.api import deps
from app.core.exceptions import ForbiddenError
from app.core.security import Caller
from app.services import Services

router = APIRouter()


@router.get("/suggested", response_model=List[schemas.UserProfile])
def suggested_users(
    user_id: int = Depends(deps.get_current_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    return services.profiles.get_suggested_users(db, user_id)


@router.put("/me", response_model=schemas.UserProfile)
def update_my_profile(
    profile: schemas.ProfileUpdate,
    user_id: int = Depends(deps.get_current_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    return services.profiles.update_profile(db, user_id, profile)


@router.put("/me/picture")
def update_my_picture(
    image: schemas.ProfileImageUpdate,
    user_id: int = Depends(deps.get_current_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    url = services.profiles.update_profile_picture(db, user_id, image.image_url)
    return {"profile_picture_url": url}


@router.put("/me/cover")
def update_my_cover(
    image: schemas.ProfileImageUpdate,
    user_id: int = Depends(deps.get_current_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    url = services.profiles.update_cover_photo(db, user_id, image.image_url)
    return {"cover_photo_url": url}


@router.get("/username/{username}", response_model=schemas.UserProfile)
def read_profile_by_username(
    username: str,
    caller_id: Optional[int] = Depends(deps.get_optional_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    return services.profiles.get_profile_by_username(db, username, caller_id)


@router.get("/{user_id}", response_model=schemas.UserProfile)
def read_profile(
    user_id: int,
    caller_id: Optional[int] = Depends(deps.get_optional_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    return services.profiles.get_profile(db, user_id, caller_id)


@router.post("/{user_id}/follow", response_model=schemas.ToggleResult)
def toggle_follow(
    user_id: int,
    follower_id: int = Depends(deps.get_current_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    return schemas.ToggleResult(active=services.engagement.toggle_follow(db, follower_id, user_id))


@router.get("/{user_id}/followers", response_model=schemas.Page[schemas.UserProfile])
def list_followers(
    user_id: int,
    pagination: schemas.PaginationParams = Depends(deps.get_pagination),
    caller_id: Optional[int] = Depends(deps.get_optional_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    return services.profiles.get_followers(db, user_id, pagination, caller_id)


@router.get("/{user_id}/following", response_model=schemas.Page[schemas.UserProfile])
def list_following(
    user_id: int,
    pagination: schemas.PaginationParams = Depends(deps.get_pagination),
    caller_id: Optional[int] = Depends(deps.get_optional_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    return services.profiles.get_following(db, user_id, pagination, caller_id)


@router.get("/{user_id}/analytics", response_model=schemas.CreatorAnalytics)
def creator_analytics(
    user_id: int,
    caller: Caller = Depends(deps.get_current_user),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    if caller.id != user_id and not caller.is_admin:
        raise ForbiddenError("You can only view your own analytics.")
    return services.profiles.get_creator_analytics(db, user_id)
