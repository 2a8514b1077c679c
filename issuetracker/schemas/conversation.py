from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class ConversationOut(BaseModel):
    id: int
    issue_id: int
    sender_id: int
    sender_name: Optional[str] = None
    message_type: Optional[str] = None
    message_text: str
    attachment: Optional[str] = None
    attachment_url: Optional[str] = None
    created_at: datetime

class ConversationThreadOut(ConversationOut):
    """Message as listed in an issue thread, with the issue's participants"""
    reporter_id: int
    assignee_id: Optional[int] = None
    assignee_name: Optional[str] = None
