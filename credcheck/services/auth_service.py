from typing import Dict, Optional
from credcheck.database import get_db, DatabaseManager
from credcheck.exceptions import AuthError, ValidationError
from credcheck.models import User, Employer, Candidate
from credcheck.models.user import UserRole
from credcheck.models.candidate import CandidateStatus
from credcheck.utils.security import hash_password, verify_password, generate_user_token
from credcheck.utils.validators import validate_email, validate_password, require_fields
from credcheck.utils.logger import get_logger

logger = get_logger(__name__)


def employer_to_dict(employer: Optional[Employer]) -> Optional[Dict]:
    if not employer:
        return None
    return {
        'id': employer.id,
        'company_name': employer.company_name,
        'company_size': employer.company_size,
        'industry': employer.industry,
        'location': employer.location,
        'status': employer.status.value
    }


def candidate_to_dict(candidate: Optional[Candidate]) -> Optional[Dict]:
    if not candidate:
        return None
    return {
        'id': candidate.id,
        'user_id': candidate.user_id,
        'name': candidate.name,
        'email': candidate.email,
        'phone': candidate.phone,
        'status': candidate.status.value
    }


def user_to_dict(user: User) -> Dict:
    data = {
        'id': user.id,
        'email': user.email,
        'role': user.role.value,
        'name': user.name,
        'phone': user.phone,
        'language': user.language
    }
    if user.role == UserRole.EMPLOYER:
        data['employer'] = employer_to_dict(user.employer)
    elif user.role == UserRole.CANDIDATE:
        data['candidate'] = candidate_to_dict(user.candidate)
        data['candidateId'] = user.candidate.id if user.candidate else None
    return data


class AuthService:
    """Service for handling authentication"""

    def __init__(self):
        self.user_db = DatabaseManager(User)

    def _validate_registration(self, data: Dict, required_fields):
        require_fields(data, required_fields)

        valid, error = validate_email(data['email'])
        if not valid:
            raise ValidationError(error)

        valid, error = validate_password(data['password'])
        if not valid:
            raise ValidationError(error)

        if self.user_db.exists(email=data['email']):
            raise ValidationError('Email already registered')

    def _create_user(self, db, data: Dict, role: UserRole) -> User:
        user = User(
            email=data['email'],
            password_hash=hash_password(data['password']),
            role=role,
            name=data['name'],
            phone=data.get('phone'),
            language=data.get('language') or 'en'
        )
        db.add(user)
        db.flush()
        return user

    def register_employer(self, data: Dict) -> Dict:
        """Register an employer user and company profile"""
        self._validate_registration(data, ['email', 'password', 'name', 'companyName'])

        with get_db() as db:
            user = self._create_user(db, data, UserRole.EMPLOYER)

            db.add(Employer(
                user_id=user.id,
                company_name=data['companyName'],
                company_size=data.get('companySize'),
                industry=data.get('industry'),
                location=data.get('location')
            ))
            db.flush()
            db.refresh(user)

            result = {'token': generate_user_token(user), 'user': user_to_dict(user)}

        logger.info(f"Registered employer {result['user']['id']}")
        return result

    def register_candidate(self, data: Dict) -> Dict:
        """Register a candidate, claiming an invitation when one exists"""
        self._validate_registration(data, ['email', 'password', 'name'])

        with get_db() as db:
            user = self._create_user(db, data, UserRole.CANDIDATE)

            candidate = None
            if data.get('candidateId'):
                candidate = db.query(Candidate).filter_by(id=data['candidateId']).first()
                if not candidate:
                    raise ValidationError('Invitation not found')
                if candidate.user_id:
                    raise ValidationError('Invitation already claimed')
            else:
                # Employer invitations are keyed by email
                candidate = db.query(Candidate).filter(
                    Candidate.email == data['email'],
                    Candidate.user_id.is_(None)
                ).first()

            if candidate:
                candidate.user_id = user.id
                candidate.status = CandidateStatus.ACTIVE
            else:
                db.add(Candidate(
                    user_id=user.id,
                    name=data['name'],
                    email=data['email'],
                    phone=data.get('phone'),
                    status=CandidateStatus.ACTIVE
                ))
            db.flush()
            db.refresh(user)

            result = {'token': generate_user_token(user), 'user': user_to_dict(user)}

        logger.info(f"Registered candidate {result['user']['id']}")
        return result

    def authenticate_user(self, email: str, password: str) -> Dict:
        """Authenticate user and return token"""
        with get_db() as db:
            user = db.query(User).filter(User.email == email).first()

            if not user or not verify_password(password, user.password_hash):
                logger.warning(f"Failed login for {email}")
                raise AuthError('Invalid credentials')

            return {'token': generate_user_token(user), 'user': user_to_dict(user)}
