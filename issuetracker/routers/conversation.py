# issuetracker/routers/conversation.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request, Response, status
from fastapi.responses import FileResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, aliased

from issuetracker.database import get_db
from issuetracker.models.conversation import Conversation
from issuetracker.models.issue import Issue
from issuetracker.models.user import User
from issuetracker.schemas.conversation import ConversationOut, ConversationThreadOut
from issuetracker.services.file_storage import file_storage
from issuetracker.utils.auth import get_caller_id, resolve_user_id
from issuetracker.utils.errors import Forbidden, NotFound, ServerError, ValidationError
from issuetracker.utils.forms import read_payload
from issuetracker.utils.validation import is_blank, parse_int

logger = logging.getLogger(__name__)

router = APIRouter(tags=["conversations"])


def attachment_url(request: Request, conv: Conversation) -> Optional[str]:
    """Absolute URL of the participant-gated download for a message attachment"""
    if not conv.attachment:
        return None
    return str(request.url_for("get_conversation_attachment", conv_id=conv.id))


def is_participant(user_id: int, issue_reporter_id: int, issue_assignee_id: Optional[int]) -> bool:
    return user_id == issue_reporter_id or (issue_assignee_id is not None and user_id == issue_assignee_id)


@router.get("/issues/{issue_id}/conversations")
def get_conversations(issue_id: int, request: Request, db: Session = Depends(get_db)):
    """Messages of an issue, oldest first, with sender and participant details"""
    sender = aliased(User)
    assignee = aliased(User)

    rows = (
        db.query(
            Conversation,
            Issue.user_id,
            Issue.assignee_id,
            sender.username,
            assignee.username,
        )
        .join(Issue, Conversation.issue_id == Issue.id)
        .outerjoin(sender, Conversation.sender_id == sender.id)
        .outerjoin(assignee, Issue.assignee_id == assignee.id)
        .filter(Conversation.issue_id == issue_id)
        .order_by(Conversation.created_at.asc(), Conversation.id.asc())
        .all()
    )

    data = [
        ConversationThreadOut(
            id=conv.id,
            issue_id=conv.issue_id,
            reporter_id=reporter_id,
            assignee_id=assignee_id,
            sender_id=conv.sender_id,
            sender_name=sender_name,
            assignee_name=assignee_name,
            message_type=conv.message_type,
            message_text=conv.message_text,
            attachment=conv.attachment,
            attachment_url=attachment_url(request, conv),
            created_at=conv.created_at,
        ).model_dump(mode="json")
        for conv, reporter_id, assignee_id, sender_name, assignee_name in rows
    ]
    return {"status": "ok", "data": data}

@router.post("/issues/{issue_id}/conversations", status_code=status.HTTP_201_CREATED)
async def create_conversation(
    issue_id: int,
    request: Request,
    x_user_id: Optional[str] = Header(default=None),
    authorization: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
):
    """Post a message on an issue. Only the reporter or the assignee may post."""
    fields, upload = await read_payload(request)

    # x-user-id header, then the form's sender_id, then a bearer token
    raw_sender = x_user_id if not is_blank(x_user_id) else fields.get("sender_id")
    if is_blank(raw_sender):
        raw_sender = resolve_user_id(None, authorization)

    message_text = fields.get("message_text")
    text_value = message_text.strip() if isinstance(message_text, str) else ""
    invalid = ValidationError("issue ID, sender_id and either message_text or attachment are required")
    if not text_value and upload is None:
        raise invalid
    sender_id = parse_int(raw_sender, invalid.message)

    issue = db.query(Issue).filter(Issue.id == issue_id).first()
    if not issue:
        raise NotFound("Issue not found")

    if not is_participant(sender_id, issue.user_id, issue.assignee_id):
        raise Forbidden("Not authorized")

    attachment = file_storage.save_file(upload, "conversation") if upload else None

    conv = Conversation(
        issue_id=issue_id,
        sender_id=sender_id,
        message_type=fields.get("message_type"),
        message_text=text_value,
        attachment=attachment,
    )
    try:
        db.add(conv)
        db.commit()
        db.refresh(conv)
    except SQLAlchemyError as e:
        db.rollback()
        if attachment:
            file_storage.delete_file(attachment)
        logger.error(f"Create conversation error: {str(e)}")
        raise ServerError("Database error")

    # Re-read with the sender's name; not transactional with the insert
    sender_name = (
        db.query(User.username)
        .filter(User.id == conv.sender_id)
        .scalar()
    )

    logger.info(f"Message {conv.id} posted on issue {issue_id} by user {sender_id}")
    message = ConversationOut(
        id=conv.id,
        issue_id=conv.issue_id,
        sender_id=conv.sender_id,
        sender_name=sender_name,
        message_type=conv.message_type,
        message_text=conv.message_text,
        attachment=conv.attachment,
        attachment_url=attachment_url(request, conv),
        created_at=conv.created_at,
    )
    return {"status": "ok", "data": message.model_dump(mode="json")}

@router.get("/conversations/{conv_id}/attachment")
def get_conversation_attachment(
    conv_id: int,
    viewer: Optional[str] = Depends(get_caller_id),
    db: Session = Depends(get_db),
):
    """Download a message attachment; restricted to the issue's participants"""
    viewer_id = parse_int(viewer, "Invalid conv ID or user ID")

    row = (
        db.query(Conversation.attachment, Issue.user_id, Issue.assignee_id)
        .join(Issue, Conversation.issue_id == Issue.id)
        .filter(Conversation.id == conv_id)
        .first()
    )
    if not row or not row.attachment:
        raise NotFound("Attachment not found")

    attachment, reporter_id, assignee_id = row
    if not is_participant(viewer_id, reporter_id, assignee_id):
        raise Forbidden("Not authorized")

    file_path = file_storage.get_file_path(attachment)
    if not file_path:
        logger.error(f"Error sending file for conversation {conv_id}: {attachment} missing on disk")
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return FileResponse(path=file_path, filename=attachment)
