# app/api/endpoints/feed.py

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app import schemas
from app.api import deps
from app.services import Services

router = APIRouter()


@router.get("/home", response_model=schemas.Page[schemas.BlogPost])
def home_feed(
    pagination: schemas.PaginationParams = Depends(deps.get_pagination),
    user_id: int = Depends(deps.get_current_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    """Published posts from the people the caller follows, newest first"""
    return services.feed.get_home_feed(db, user_id, pagination)


@router.get("/trending", response_model=schemas.Page[schemas.BlogPost])
def trending_feed(
    pagination: schemas.PaginationParams = Depends(deps.get_pagination),
    caller_id: Optional[int] = Depends(deps.get_optional_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    return services.feed.get_trending(db, pagination, caller_id)


@router.get("/latest", response_model=schemas.Page[schemas.BlogPost])
def latest_feed(
    pagination: schemas.PaginationParams = Depends(deps.get_pagination),
    caller_id: Optional[int] = Depends(deps.get_optional_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    return services.feed.get_latest(db, pagination, caller_id)
