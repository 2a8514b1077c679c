# issuetracker/routers/issue.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import FileResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from issuetracker.database import get_db
from issuetracker.models.issue import Issue
from issuetracker.models.user import User
from issuetracker.schemas.issue import IssueAssign, IssueOut, IssuePatch
from issuetracker.services.file_storage import file_storage
from issuetracker.utils.errors import NotFound, ServerError, ValidationError
from issuetracker.utils.forms import read_payload
from issuetracker.utils.validation import (
    STATUS_ALLOCATED,
    STATUS_CLOSED,
    check_write,
    is_blank,
    parse_int,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/issues", tags=["issues"])


def serialize_issues(issues):
    return [IssueOut.model_validate(issue).model_dump(mode="json") for issue in issues]


def get_issue_or_404(db: Session, issue_id: int) -> Issue:
    issue = db.query(Issue).filter(Issue.id == issue_id).first()
    if not issue:
        raise NotFound("Issue not found")
    return issue


@router.get("")
def get_issues(username: Optional[str] = None, db: Session = Depends(get_db)):
    """All issues newest first, or only those reported by ``username``"""
    query = db.query(Issue)
    if username:
        query = query.join(User, Issue.user_id == User.id).filter(User.username == username)
    issues = query.order_by(Issue.created_at.desc(), Issue.id.desc()).all()
    return {"status": "ok", "data": serialize_issues(issues)}

@router.get("/user/{user_id}")
def get_issues_by_reporter(user_id: int, db: Session = Depends(get_db)):
    issues = (
        db.query(Issue)
        .filter(Issue.user_id == user_id)
        .order_by(Issue.created_at.desc(), Issue.id.desc())
        .all()
    )
    return {"status": "ok", "data": serialize_issues(issues)}

@router.get("/assigned/username/{username}")
def get_issues_by_assignee_username(username: str, db: Session = Depends(get_db)):
    issues = (
        db.query(Issue)
        .join(User, Issue.assignee_id == User.id)
        .filter(User.username == username)
        .order_by(Issue.created_at.desc(), Issue.id.desc())
        .all()
    )
    return {"status": "ok", "data": serialize_issues(issues)}

@router.get("/assigned/{user_id}")
def get_issues_by_assignee(user_id: int, db: Session = Depends(get_db)):
    issues = (
        db.query(Issue)
        .filter(Issue.assignee_id == user_id)
        .order_by(Issue.created_at.desc(), Issue.id.desc())
        .all()
    )
    return {"status": "ok", "data": serialize_issues(issues)}

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_issue(request: Request, db: Session = Depends(get_db)):
    """Create an issue from JSON or multipart form data with an optional attachment"""
    fields, upload = await read_payload(request)
    check_write("issue_create", fields)
    user_id = parse_int(fields.get("user_id"), "user_id must be a number")

    attachment = file_storage.save_file(upload, "issue") if upload else None

    db_issue = Issue(
        user_id=user_id,
        title=str(fields["title"]).strip(),
        description=str(fields["description"]).strip(),
        issue_type=fields["issue_type"],
        status=fields["status"],
        attachment=attachment,
    )
    try:
        db.add(db_issue)
        db.commit()
        db.refresh(db_issue)
    except SQLAlchemyError as e:
        db.rollback()
        if attachment:
            file_storage.delete_file(attachment)
        logger.error(f"Insert issue error: {str(e)}")
        raise ServerError("Database error")

    logger.info(f"Issue {db_issue.id} created by user {user_id}")
    return {"status": "ok", "data": IssueOut.model_validate(db_issue).model_dump(mode="json")}

@router.put("/{issue_id}/assign")
def assign_issue(issue_id: int, payload: IssueAssign, db: Session = Depends(get_db)):
    """Assign to a user by username; the status becomes 'allocated'"""
    if is_blank(payload.username):
        raise ValidationError("username is required")

    assignee = db.query(User).filter(User.username == payload.username).order_by(User.id).first()
    if not assignee:
        raise NotFound("User not found")

    issue = get_issue_or_404(db, issue_id)
    issue.assignee_id = assignee.id
    issue.status = STATUS_ALLOCATED
    db.commit()

    logger.info(f"Issue {issue_id} assigned to user {assignee.id}")
    return {"status": "ok", "message": "Issue assigned"}

@router.put("/{issue_id}/close")
def close_issue(issue_id: int, db: Session = Depends(get_db)):
    # Closing is unconditional regardless of the current status
    issue = get_issue_or_404(db, issue_id)
    issue.status = STATUS_CLOSED
    db.commit()
    return {"status": "ok", "message": "Issue closed"}

@router.put("/{issue_id}/update")
async def update_issue(issue_id: int, request: Request, db: Session = Depends(get_db)):
    """Replace the description and/or attachment of an issue"""
    fields, upload = await read_payload(request)
    description = fields.get("description")
    has_description = isinstance(description, str) and not is_blank(description)

    if not has_description and upload is None:
        raise ValidationError("Nothing to update")

    issue = get_issue_or_404(db, issue_id)
    previous = issue.attachment
    attachment = file_storage.save_file(upload, "issue") if upload is not None else None

    if has_description:
        issue.description = description.strip()
    if attachment:
        issue.attachment = attachment

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        if attachment:
            file_storage.delete_file(attachment)
        logger.error(f"Update issue {issue_id} error: {str(e)}")
        raise ServerError("Database error")

    # The replaced file is only removed once nothing references it
    if attachment and previous and previous != attachment:
        file_storage.delete_file(previous)

    return {"status": "ok", "message": "Issue updated"}

@router.patch("/{issue_id}")
def patch_issue(issue_id: int, payload: IssuePatch, db: Session = Depends(get_db)):
    """Generic partial update; supplied values, including null, are written as given"""
    update_data = payload.model_dump(exclude_unset=True)
    if not update_data:
        raise ValidationError("No fields to update")
    check_write("issue_patch", update_data)

    issue = get_issue_or_404(db, issue_id)
    for field, value in update_data.items():
        setattr(issue, field, value)

    db.commit()
    db.refresh(issue)
    return {"status": "ok", "data": IssueOut.model_validate(issue).model_dump(mode="json")}

@router.get("/{issue_id}/attachment")
def get_issue_attachment(issue_id: int, db: Session = Depends(get_db)):
    issue = db.query(Issue).filter(Issue.id == issue_id).first()
    if not issue or not issue.attachment:
        raise NotFound("Attachment not found")

    file_path = file_storage.get_file_path(issue.attachment)
    if not file_path:
        logger.error(f"Error sending attachment for issue {issue_id}: {issue.attachment} missing on disk")
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return FileResponse(path=file_path, filename=issue.attachment)
