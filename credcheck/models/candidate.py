from sqlalchemy import Column, String, Boolean, ForeignKey, Enum
from sqlalchemy.orm import relationship
import enum
from .base import BaseModel


class CandidateStatus(enum.Enum):
    INVITED = "invited"
    ACTIVE = "active"


class Candidate(BaseModel):
    __tablename__ = 'candidates'

    # Null until an invited candidate registers
    user_id = Column(String(36), ForeignKey('users.id'), nullable=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(30))
    status = Column(Enum(CandidateStatus), default=CandidateStatus.INVITED, nullable=False)

    # Relationships
    user = relationship("User", back_populates="candidate")
    verifications = relationship("Verification", back_populates="candidate", lazy='dynamic')
    education_records = relationship("EducationRecord", back_populates="candidate", lazy='dynamic')
    employment_records = relationship("EmploymentRecord", back_populates="candidate", lazy='dynamic')
    references = relationship("CandidateReference", back_populates="candidate", lazy='dynamic')
    credentials = relationship("Credential", back_populates="candidate", lazy='dynamic')


class EducationRecord(BaseModel):
    __tablename__ = 'education_records'

    candidate_id = Column(String(36), ForeignKey('candidates.id'), nullable=False)
    institution = Column(String(255), nullable=False)
    degree = Column(String(255), nullable=False)
    field_of_study = Column(String(255))
    start_date = Column(String(20))
    end_date = Column(String(20))
    document_url = Column(String(500))
    verification_status = Column(String(20), default='pending')

    candidate = relationship("Candidate", back_populates="education_records")


class EmploymentRecord(BaseModel):
    __tablename__ = 'employment_records'

    candidate_id = Column(String(36), ForeignKey('candidates.id'), nullable=False)
    company_name = Column(String(255), nullable=False)
    job_title = Column(String(255), nullable=False)
    start_date = Column(String(20))
    end_date = Column(String(20))
    supervisor_name = Column(String(255))
    supervisor_contact = Column(String(255))
    can_contact = Column(Boolean, default=True)
    document_url = Column(String(500))
    verification_status = Column(String(20), default='pending')

    candidate = relationship("Candidate", back_populates="employment_records")


class CandidateReference(BaseModel):
    __tablename__ = 'candidate_references'

    candidate_id = Column(String(36), ForeignKey('candidates.id'), nullable=False)
    name = Column(String(255), nullable=False)
    relationship_to_candidate = Column('relationship', String(100), nullable=False)
    company = Column(String(255))
    email = Column(String(255))
    phone = Column(String(30))
    preferred_time = Column(String(100))
    language = Column(String(10), default='en')
    verification_status = Column(String(20), default='pending')
    feedback = Column(String(2000))
    sentiment = Column(String(50))

    candidate = relationship("Candidate", back_populates="references")
