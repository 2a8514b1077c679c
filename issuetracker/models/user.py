# issuetracker/models/user.py
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from issuetracker.database import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, nullable=False, default=0)
    username = Column(String, index=True, nullable=False)  # not unique at this layer
    email = Column(String, nullable=False)
    password = Column(String, nullable=False)  # bcrypt hash; legacy rows may be plaintext
    user_role = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    reported_issues = relationship("Issue", back_populates="reporter", foreign_keys="Issue.user_id")
    assigned_issues = relationship("Issue", back_populates="assignee", foreign_keys="Issue.assignee_id")
    sent_messages = relationship("Conversation", back_populates="sender")
