# app/api/deps.py

from typing import Optional

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import UnauthenticatedError
from app.core.security import Caller, decode_access_token
from app.crud import crud_user
from app.db.session import get_db
from app.schemas.common import PaginationParams
from app.services import Services

bearer_scheme = HTTPBearer(auto_error=False)


def get_services(request: Request) -> Services:
    return request.app.state.services


def _resolve_caller(db: Session, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[Caller]:
    if credentials is None:
        return None
    payload = decode_access_token(credentials.credentials)
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise UnauthenticatedError("Invalid token: malformed subject")

    # Role comes from the stored user so a demotion takes effect immediately
    user = crud_user.get_user(db, user_id)
    if user is None or not user.is_active:
        raise UnauthenticatedError("User not found or inactive")
    return Caller(id=user.id, role=user.role.value)


def get_current_user(
    db: Session = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Caller:
    caller = _resolve_caller(db, credentials)
    if caller is None:
        raise UnauthenticatedError("Not authenticated")
    return caller


def get_optional_user(
    db: Session = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Caller]:
    return _resolve_caller(db, credentials)


def get_current_user_id(caller: Caller = Depends(get_current_user)) -> int:
    return caller.id


def get_optional_user_id(caller: Optional[Caller] = Depends(get_optional_user)) -> Optional[int]:
    return caller.id if caller else None


def get_pagination(
    page: int = Query(1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE),
) -> PaginationParams:
    return PaginationParams(page=page, page_size=page_size)
