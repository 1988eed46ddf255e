from .user import User
from .employer import Employer
from .candidate import Candidate, EducationRecord, EmploymentRecord, CandidateReference
from .verification import Verification, VerificationItem
from .credential import Credential, CredentialShare
from .review import ReviewQueueItem
from .notification import Notification

__all__ = [
    'User', 'Employer', 'Candidate', 'EducationRecord', 'EmploymentRecord',
    'CandidateReference', 'Verification', 'VerificationItem', 'Credential',
    'CredentialShare', 'ReviewQueueItem', 'Notification'
]
