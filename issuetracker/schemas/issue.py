from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class IssueAssign(BaseModel):
    username: Optional[str] = None

class IssuePatch(BaseModel):
    description: Optional[str] = None
    status: Optional[str] = None
    assignee_id: Optional[int] = None

class IssueOut(BaseModel):
    id: int
    user_id: int
    assignee_id: Optional[int] = None
    title: str
    description: str
    issue_type: str
    status: str
    attachment: Optional[str] = None
    created_at: datetime

    model_config = {
        "from_attributes": True
    }
