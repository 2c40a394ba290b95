# app/api/endpoints/notifications.py

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app import schemas
from app.api import deps
from app.services import Services

router = APIRouter()


@router.get("/", response_model=schemas.Page[schemas.Notification])
def list_notifications(
    pagination: schemas.PaginationParams = Depends(deps.get_pagination),
    user_id: int = Depends(deps.get_current_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    return services.notifications.list_notifications(db, user_id, pagination)


@router.get("/unread-count", response_model=schemas.UnreadCount)
def unread_count(
    user_id: int = Depends(deps.get_current_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    return schemas.UnreadCount(count=services.notifications.unread_count(db, user_id))


@router.put("/read-all", status_code=204)
def mark_all_read(
    user_id: int = Depends(deps.get_current_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    services.notifications.mark_all_read(db, user_id)
    return Response(status_code=204)


@router.put("/{notification_id}/read", status_code=204)
def mark_read(
    notification_id: int,
    user_id: int = Depends(deps.get_current_user_id),
    db: Session = Depends(deps.get_db),
    services: Services = Depends(deps.get_services),
):
    services.notifications.mark_read(db, user_id, notification_id)
    return Response(status_code=204)
