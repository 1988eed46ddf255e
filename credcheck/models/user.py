from sqlalchemy import Column, String, Enum
from sqlalchemy.orm import relationship
import enum
from .base import BaseModel


class UserRole(enum.Enum):
    EMPLOYER = "employer"
    CANDIDATE = "candidate"
    ADMIN = "admin"


class User(BaseModel):
    __tablename__ = 'users'

    # Basic Info
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    # Set once at registration, never updated
    role = Column(Enum(UserRole), nullable=False)
    name = Column(String(255), nullable=False)
    phone = Column(String(30))
    language = Column(String(10), default='en')

    # Relationships
    employer = relationship("Employer", back_populates="user", uselist=False)
    candidate = relationship("Candidate", back_populates="user", uselist=False)
    notifications = relationship("Notification", back_populates="user", lazy='dynamic')
