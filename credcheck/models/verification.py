from datetime import datetime
from sqlalchemy import Column, String, Float, ForeignKey, DateTime, JSON, Enum
from sqlalchemy.orm import relationship
import enum
from .base import BaseModel


class VerificationStatus(enum.Enum):
    INVITED = "invited"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    REVIEW_NEEDED = "review_needed"


# Legal next states; completed is terminal
VERIFICATION_TRANSITIONS = {
    VerificationStatus.INVITED: {
        VerificationStatus.IN_PROGRESS,
        VerificationStatus.REVIEW_NEEDED,
    },
    VerificationStatus.IN_PROGRESS: {
        VerificationStatus.IN_PROGRESS,
        VerificationStatus.COMPLETED,
        VerificationStatus.REVIEW_NEEDED,
    },
    VerificationStatus.REVIEW_NEEDED: {
        VerificationStatus.IN_PROGRESS,
        VerificationStatus.COMPLETED,
    },
    VerificationStatus.COMPLETED: set(),
}


class ItemType(enum.Enum):
    IDENTITY = "identity"
    EDUCATION = "education"
    EMPLOYMENT = "employment"
    CRIMINAL = "criminal"
    REFERENCE = "reference"


class ItemStatus(enum.Enum):
    PENDING = "pending"
    VERIFYING = "verifying"
    VERIFIED = "verified"


ITEM_TRANSITIONS = {
    ItemStatus.PENDING: {ItemStatus.VERIFYING, ItemStatus.VERIFIED},
    ItemStatus.VERIFYING: {ItemStatus.VERIFIED},
    ItemStatus.VERIFIED: set(),
}


class ItemResult(enum.Enum):
    VERIFIED = "verified"
    WARNING = "warning"
    FAILED = "failed"


# Items seeded for every package, plus extras by tier
BASE_ITEM_TYPES = [ItemType.IDENTITY, ItemType.EDUCATION, ItemType.EMPLOYMENT]
EXTENDED_PACKAGES = ('standard', 'comprehensive')
EXTENDED_ITEM_TYPES = [ItemType.CRIMINAL, ItemType.REFERENCE]


class Verification(BaseModel):
    __tablename__ = 'verifications'

    employer_id = Column(String(36), ForeignKey('employers.id'), nullable=False)
    candidate_id = Column(String(36), ForeignKey('candidates.id'), nullable=False)
    position = Column(String(255))
    # Free-form tier name; unknown tiers get the default price and base items
    package_type = Column(String(50), nullable=False)
    status = Column(Enum(VerificationStatus), default=VerificationStatus.INVITED, nullable=False, index=True)
    price = Column(Float, nullable=False)
    special_instructions = Column(String(2000))

    initiated_date = Column(DateTime, default=datetime.utcnow, nullable=False)
    completion_date = Column(DateTime)

    # Relationships
    employer = relationship("Employer", back_populates="verifications")
    candidate = relationship("Candidate", back_populates="verifications")
    items = relationship("VerificationItem", back_populates="verification",
                         order_by="VerificationItem.created_at")
    review_items = relationship("ReviewQueueItem", back_populates="verification", lazy='dynamic')


class VerificationItem(BaseModel):
    __tablename__ = 'verification_items'

    verification_id = Column(String(36), ForeignKey('verifications.id'), nullable=False)
    type = Column(Enum(ItemType), nullable=False)
    status = Column(Enum(ItemStatus), default=ItemStatus.PENDING, nullable=False)
    result = Column(Enum(ItemResult))
    details = Column(JSON)
    verified_date = Column(DateTime)

    verification = relationship("Verification", back_populates="items")
