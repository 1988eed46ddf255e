from sqlalchemy import Column, String, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from .base import BaseModel


class Notification(BaseModel):
    __tablename__ = 'notifications'

    user_id = Column(String(36), ForeignKey('users.id'), nullable=False, index=True)
    type = Column(String(50), nullable=False)  # verification_invited, credential_issued, ...
    title = Column(String(255), nullable=False)
    message = Column(String(1000), nullable=False)
    read = Column(Boolean, default=False, nullable=False)

    user = relationship("User", back_populates="notifications")
