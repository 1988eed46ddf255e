from sqlalchemy import Column, String, ForeignKey, Enum
from sqlalchemy.orm import relationship
import enum
from .base import BaseModel


class EmployerStatus(enum.Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"


class Employer(BaseModel):
    __tablename__ = 'employers'

    user_id = Column(String(36), ForeignKey('users.id'), nullable=False)
    company_name = Column(String(255), nullable=False)
    company_size = Column(String(50))
    industry = Column(String(100))
    location = Column(String(255))
    status = Column(Enum(EmployerStatus), default=EmployerStatus.ACTIVE, nullable=False)

    # Relationships
    user = relationship("User", back_populates="employer")
    verifications = relationship("Verification", back_populates="employer", lazy='dynamic')
