# issuetracker/models/conversation.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from datetime import datetime
from issuetracker.database import Base

class Conversation(Base):
    __tablename__ = "issue_conversations"

    id = Column(Integer, primary_key=True, index=True)
    issue_id = Column(Integer, ForeignKey("issues.id", ondelete="CASCADE"), nullable=False, index=True)
    # Must be the issue's reporter or assignee; checked at write time
    sender_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    message_type = Column(String, nullable=True)
    message_text = Column(Text, nullable=False, default="")
    attachment = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    issue = relationship("Issue", back_populates="conversations")
    sender = relationship("User", back_populates="sent_messages")
