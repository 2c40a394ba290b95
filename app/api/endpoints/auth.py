# app/api/endpoints/auth.py

import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app import crud, schemas
from app.api import deps
from app.core.exceptions import UnauthenticatedError
from app.core.security import create_access_token, verify_password

logger = logging.getLogger(__name__)

router = APIRouter()


def issue_token(user) -> schemas.Token:
    return schemas.Token(
        access_token=create_access_token(user.id, user.role.value),
        user=schemas.User.model_validate(user),
    )


@router.post("/register", response_model=schemas.Token, status_code=201)
def register(user: schemas.UserCreate, db: Session = Depends(deps.get_db)):
    logger.info(f"Registration attempt for username: {user.username}")
    if crud.get_user_by_email(db, email=user.email):
        raise HTTPException(status_code=400, detail="Email already registered")
    if crud.get_user_by_username(db, username=user.username):
        raise HTTPException(status_code=400, detail="Username already taken")
    db_user = crud.create_user(db=db, user=user)
    return issue_token(db_user)


@router.post("/login", response_model=schemas.Token)
def login(credentials: schemas.UserLogin, db: Session = Depends(deps.get_db)):
    user = crud.get_user_by_email(db, email=credentials.email)
    if user is None or not verify_password(credentials.password, user.hashed_password):
        logger.warning(f"Failed login for email: {credentials.email}")
        raise UnauthenticatedError("Invalid email or password")
    if not user.is_active:
        raise UnauthenticatedError("Account is disabled")
    logger.info(f"User {user.id} logged in")
    return issue_token(user)
