from sqlalchemy import Column, String, ForeignKey, DateTime, Enum
from sqlalchemy.orm import relationship
import enum
from .base import BaseModel


class ReviewPriority(enum.Enum):
    HIGH = "high"
    NORMAL = "normal"
    LOW = "low"


# Display order for the review queue
PRIORITY_RANK = {
    ReviewPriority.HIGH: 1,
    ReviewPriority.NORMAL: 2,
    ReviewPriority.LOW: 3,
}


class ReviewStatus(enum.Enum):
    PENDING = "pending"
    RESOLVED = "resolved"


REVIEW_TRANSITIONS = {
    ReviewStatus.PENDING: {ReviewStatus.RESOLVED},
    ReviewStatus.RESOLVED: set(),
}


class ReviewQueueItem(BaseModel):
    __tablename__ = 'review_queue'

    verification_id = Column(String(36), ForeignKey('verifications.id'), nullable=False)
    item_type = Column(String(50), nullable=False)
    issue_description = Column(String(2000))
    priority = Column(Enum(ReviewPriority), default=ReviewPriority.NORMAL, nullable=False)
    status = Column(Enum(ReviewStatus), default=ReviewStatus.PENDING, nullable=False, index=True)

    # Resolution
    assigned_to = Column(String(36), ForeignKey('users.id'))
    resolved_date = Column(DateTime)
    resolution_notes = Column(String(2000))

    # Relationships
    verification = relationship("Verification", back_populates="review_items")
