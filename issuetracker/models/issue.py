# issuetracker/models/issue.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from datetime import datetime
from issuetracker.database import Base

class Issue(Base):
    __tablename__ = "issues"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)  # reporter
    assignee_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    issue_type = Column(String, nullable=False)
    status = Column(String, nullable=False, default="open")
    attachment = Column(String(255), nullable=True)  # stored filename
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    reporter = relationship("User", foreign_keys=[user_id], back_populates="reported_issues")
    assignee = relationship("User", foreign_keys=[assignee_id], back_populates="assigned_issues")
    conversations = relationship(
        "Conversation",
        back_populates="issue",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Conversation.created_at",
    )

