# issuetracker/routers/auth.py
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from issuetracker.database import get_db
from issuetracker.models.user import User
from issuetracker.schemas.user import UserRegister, UserLogin
from issuetracker.schemas.tokens import LoginResponse
from issuetracker.utils.errors import Unauthorized, ValidationError
from issuetracker.utils.security import hash_password, verify_password, create_access_token
from issuetracker.utils.validation import check_write, is_blank

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/api/register", status_code=status.HTTP_201_CREATED)
def register(user: UserRegister, db: Session = Depends(get_db)):
    """Self-service registration; the role must be one of the fixed roles"""
    check_write("register", user.model_dump())

    new_user = User(
        tenant_id=user.tenant_id if user.tenant_id is not None else 0,
        username=user.username,
        email=user.email,
        password=hash_password(user.password),
        user_role=user.role,
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    logger.info(f"Registered user {new_user.username} (ID: {new_user.id})")
    return {
        "status": "ok",
        "userId": new_user.id,
        "username": new_user.username,
        "user_role": new_user.user_role,
    }

@router.post("/login", response_model=LoginResponse)
def login(user: UserLogin, db: Session = Depends(get_db)):
    if is_blank(user.username) or is_blank(user.password):
        raise ValidationError("Username and password required")

    db_user = (
        db.query(User)
        .filter(User.username == user.username)
        .order_by(User.id)
        .first()
    )
    if not db_user or not verify_password(user.password, db_user.password):
        raise Unauthorized("Invalid credentials")

    token = create_access_token(data={"sub": str(db_user.id)})
    return LoginResponse(
        userId=db_user.id,
        username=db_user.username,
        role=db_user.user_role,
        user_role=db_user.user_role,
        access_token=token,
    )
