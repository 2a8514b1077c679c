# issuetracker/routers/user.py
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from issuetracker.database import get_db
from issuetracker.models.conversation import Conversation
from issuetracker.models.issue import Issue
from issuetracker.models.user import User
from issuetracker.schemas.user import UserBasic, UserCreate, UserOut, UserUpdate
from issuetracker.utils.errors import NotFound, ServerError
from issuetracker.utils.security import hash_password
from issuetracker.utils.validation import check_write, is_blank

logger = logging.getLogger(__name__)

router = APIRouter()


def serialize_user(user: User) -> dict:
    return UserOut(
        id=user.id,
        tenant_id=user.tenant_id,
        username=user.username,
        email=user.email,
        role=user.user_role,
        created_at=user.created_at,
        updated_at=user.updated_at,
    ).model_dump(mode="json")


@router.get("")
def get_all_users(db: Session = Depends(get_db)):
    """All users, without password"""
    users = db.query(User).order_by(User.id).all()
    return {"status": "ok", "data": [serialize_user(u) for u in users]}

@router.post("", status_code=status.HTTP_201_CREATED)
def create_user(user: UserCreate, db: Session = Depends(get_db)):
    """Administrative create; any role string is stored as given"""
    check_write("user_create", user.model_dump())

    db_user = User(
        tenant_id=user.tenant_id,
        username=user.username,
        email=user.email,
        password=hash_password(user.password),
        user_role=user.role,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info(f"Created user {db_user.username} (ID: {db_user.id})")
    return {"status": "ok", "userId": db_user.id}

@router.put("/{user_id}")
def update_user(user_id: int, user_update: UserUpdate, db: Session = Depends(get_db)):
    check_write("user_update", user_update.model_dump())

    db_user = db.query(User).filter(User.id == user_id).first()
    if not db_user:
        raise NotFound("User not found")

    db_user.tenant_id = user_update.tenant_id
    db_user.username = user_update.username
    db_user.email = user_update.email
    db_user.user_role = user_update.role
    # Only re-hash when a new password is actually supplied
    if not is_blank(user_update.password):
        db_user.password = hash_password(user_update.password)

    db.commit()
    return {"status": "ok", "message": "User updated"}

@router.delete("/{user_id}")
def delete_user(user_id: int, db: Session = Depends(get_db)):
    """
    Delete a user together with the messages they sent and the issues they
    reported, in one transaction. Nothing is removed if the user is absent.
    """
    try:
        db.query(Conversation).filter(
            Conversation.sender_id == user_id
        ).delete(synchronize_session=False)
        db.query(Issue).filter(
            Issue.user_id == user_id
        ).delete(synchronize_session=False)
        deleted = db.query(User).filter(
            User.id == user_id
        ).delete(synchronize_session=False)

        if deleted != 1:
            db.rollback()
            raise NotFound("User not found")

        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Delete user {user_id} transaction failed: {str(e)}")
        raise ServerError("Database error")

    logger.info(f"Deleted user {user_id} and related data")
    return {"status": "ok", "message": "User and related data deleted"}

@router.get("/{user_id}")
def get_user(user_id: int, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User not found")
    return {
        "status": "ok",
        "data": UserBasic(id=user.id, username=user.username, role=user.user_role).model_dump(),
    }
