# app/models/action_log.py
"""
Action log table — append-only audit trail of user actions.
Rows are never updated or deleted. user_id is a plain reference (no FK) so
audit history survives user deletion.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Text
from app.database import Base


class ActionLog(Base):
    __tablename__ = "action_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)   # users.id, not enforced
    action = Column(String(100), nullable=False, index=True)
    details = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<ActionLog {self.id} user={self.user_id} action={self.action}>"
