# app/models/user.py
"""
Users table — application accounts.
Role decides what the authorization gate lets the account do (USER | ADMIN).
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.enums import Role


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200))
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)     # werkzeug hash, never plain text
    role = Column(Enum(Role, native_enum=False), default=Role.USER, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    vehicles = relationship("Vehicle", back_populates="owner")
    slot_requests = relationship("SlotRequest", back_populates="user")

    def __repr__(self):
        return f"<User {self.id} email={self.email} role={self.role}>"
