from datetime import datetime
from sqlalchemy import Column, String, Integer, ForeignKey, DateTime, JSON, Enum, Text
from sqlalchemy.orm import relationship
import enum
from .base import BaseModel


class CredentialStatus(enum.Enum):
    ACTIVE = "active"
    REVOKED = "revoked"


class Credential(BaseModel):
    __tablename__ = 'credentials'

    candidate_id = Column(String(36), ForeignKey('candidates.id'), nullable=False)
    type = Column(String(100), nullable=False)
    title = Column(String(255), nullable=False)
    # Outcome snapshot; the originating verification_id lives in here
    details = Column(JSON)

    issued_date = Column(DateTime, default=datetime.utcnow, nullable=False)
    expiry_date = Column(DateTime)
    status = Column(Enum(CredentialStatus), default=CredentialStatus.ACTIVE, nullable=False)
    revoked_date = Column(DateTime)
    revocation_reason = Column(String(500))

    verification_url = Column(String(500))
    qr_code = Column(Text)
    signature = Column(String(64))

    # Relationships
    candidate = relationship("Candidate", back_populates="credentials")
    shares = relationship("CredentialShare", back_populates="credential", lazy='dynamic')


class CredentialShare(BaseModel):
    __tablename__ = 'credential_shares'

    credential_id = Column(String(36), ForeignKey('credentials.id'), nullable=False)
    shared_with_email = Column(String(255))
    share_link = Column(String(500), nullable=False)
    expires_date = Column(DateTime)
    access_count = Column(Integer, default=0, nullable=False)
    last_accessed = Column(DateTime)

    credential = relationship("Credential", back_populates="shares")
