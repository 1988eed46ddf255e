from datetime import datetime
from typing import Dict, List, Optional
from sqlalchemy import func
from config.config import Config
from credcheck.database import get_db
from credcheck.exceptions import AuthError, NotFoundError, StateError, ValidationError
from credcheck.models import (
    Candidate, Employer, Verification, VerificationItem,
    EducationRecord, EmploymentRecord, CandidateReference
)
from credcheck.models.candidate import CandidateStatus
from credcheck.models.review import ReviewPriority
from credcheck.models.verification import (
    VerificationStatus, ItemStatus, ItemResult, ItemType,
    VERIFICATION_TRANSITIONS, ITEM_TRANSITIONS,
    BASE_ITEM_TYPES, EXTENDED_PACKAGES, EXTENDED_ITEM_TYPES
)
from credcheck.services.notification_service import NotificationService
from credcheck.services.review_service import ReviewService
from credcheck.utils.transitions import parse_enum, ensure_transition
from credcheck.utils.validators import validate_email, require_fields
from credcheck.utils.logger import get_logger

logger = get_logger(__name__)


def package_price(package_type: str) -> float:
    """Price for a package tier; unknown tiers get the default"""
    return Config.PACKAGE_PRICES.get(package_type, Config.DEFAULT_PACKAGE_PRICE)


def seed_item_types(package_type: str) -> List[ItemType]:
    """Checks included in a package tier"""
    item_types = list(BASE_ITEM_TYPES)
    if package_type in EXTENDED_PACKAGES:
        item_types.extend(EXTENDED_ITEM_TYPES)
    return item_types


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def item_to_dict(item: VerificationItem) -> Dict:
    return {
        'id': item.id,
        'verification_id': item.verification_id,
        'type': item.type.value,
        'status': item.status.value,
        'result': item.result.value if item.result else None,
        'details': item.details,
        'verified_date': _iso(item.verified_date)
    }


def verification_to_dict(verification: Verification, include_items: bool = False) -> Dict:
    data = {
        'id': verification.id,
        'employer_id': verification.employer_id,
        'candidate_id': verification.candidate_id,
        'position': verification.position,
        'package_type': verification.package_type,
        'status': verification.status.value,
        'price': verification.price,
        'special_instructions': verification.special_instructions,
        'initiated_date': _iso(verification.initiated_date),
        'completion_date': _iso(verification.completion_date)
    }
    if include_items:
        data['items'] = [item_to_dict(item) for item in verification.items]
    return data


def _list_of_dicts(data: Dict, key: str) -> List[Dict]:
    value = data.get(key) or []
    if not isinstance(value, list) or not all(isinstance(entry, dict) for entry in value):
        raise ValidationError(f"{key} must be a list of objects")
    return value


class VerificationService:
    """Service for verification requests and their items"""

    def __init__(self):
        self.notification_service = NotificationService()
        self.review_service = ReviewService()

    def _employer_for_user(self, db, user_id: str) -> Employer:
        employer = db.query(Employer).filter_by(user_id=user_id).first()
        if not employer:
            raise NotFoundError('Employer not found')
        return employer

    def _candidate_for_user(self, db, user_id: str) -> Candidate:
        candidate = db.query(Candidate).filter_by(user_id=user_id).first()
        if not candidate:
            raise NotFoundError('Candidate not found')
        return candidate

    def _get_verification(self, db, verification_id: str) -> Verification:
        verification = db.query(Verification).filter_by(id=verification_id).first()
        if not verification:
            raise NotFoundError('Verification not found')
        return verification

    def _check_access(self, verification: Verification, current_user: Dict, allow_candidate: bool = True):
        role = current_user.get('role')
        user_id = current_user.get('user_id')

        if role == 'admin':
            return
        if role == 'employer' and verification.employer.user_id == user_id:
            return
        if allow_candidate and role == 'candidate' and verification.candidate.user_id == user_id:
            return

        logger.warning(f"User {user_id} denied access to verification {verification.id}")
        raise AuthError('Access denied', status_code=403)

    def create_verification(self, user_id: str, data: Dict) -> Dict:
        """Create a verification request and seed its items"""
        require_fields(data, ['candidateName', 'candidateEmail', 'packageType'])
        if not isinstance(data['packageType'], str):
            raise ValidationError('packageType must be a string')

        valid, error = validate_email(data['candidateEmail'])
        if not valid:
            raise ValidationError(error)

        package_type = data['packageType']
        position = data.get('position')
        price = package_price(package_type)

        # Candidate, verification, items and notification commit together
        with get_db() as db:
            employer = self._employer_for_user(db, user_id)

            candidate = db.query(Candidate).filter_by(email=data['candidateEmail']).first()
            if not candidate:
                candidate = Candidate(
                    name=data['candidateName'],
                    email=data['candidateEmail'],
                    phone=data.get('candidatePhone'),
                    status=CandidateStatus.INVITED
                )
                db.add(candidate)
                db.flush()

            verification = Verification(
                employer_id=employer.id,
                candidate_id=candidate.id,
                position=position,
                package_type=package_type,
                status=VerificationStatus.INVITED,
                price=price,
                special_instructions=data.get('specialInstructions')
            )
            db.add(verification)
            db.flush()

            item_types = seed_item_types(package_type)
            for item_type in item_types:
                db.add(VerificationItem(
                    verification_id=verification.id,
                    type=item_type,
                    status=ItemStatus.PENDING
                ))

            if candidate.user_id:
                self.notification_service.notify(
                    db,
                    candidate.user_id,
                    'verification_invited',
                    'New Background Check Request',
                    f"{employer.company_name} has requested a background check for the position of {position}."
                )

            result = {
                'id': verification.id,
                'candidateId': candidate.id,
                'price': price,
                'items': [item_type.value for item_type in item_types],
                'message': 'Verification created successfully. Invitation email sent to candidate.'
            }
            invitation = (candidate.email, candidate.name, employer.company_name, position, candidate.id)

        self.notification_service.send_invitation_email(*invitation)
        logger.info(f"Created verification {result['id']} ({package_type}) with {len(result['items'])} items")

        return result

    def submit_candidate_records(self, verification_id: str, user_id: str, data: Dict) -> Dict:
        """Store candidate-supplied records and start processing"""
        education = _list_of_dicts(data, 'education')
        employment = _list_of_dicts(data, 'employment')
        references = _list_of_dicts(data, 'references')

        for entry in education:
            require_fields(entry, ['institution', 'degree'])
        for entry in employment:
            require_fields(entry, ['companyName', 'jobTitle'])
        for entry in references:
            require_fields(entry, ['name', 'relationship'])

        with get_db() as db:
            verification = self._get_verification(db, verification_id)
            candidate = self._candidate_for_user(db, user_id)
            if verification.candidate_id != candidate.id:
                raise AuthError('Access denied', status_code=403)

            ensure_transition(
                VERIFICATION_TRANSITIONS, verification.status, VerificationStatus.IN_PROGRESS, 'verification'
            )

            for edu in education:
                db.add(EducationRecord(
                    candidate_id=candidate.id,
                    institution=edu['institution'],
                    degree=edu['degree'],
                    field_of_study=edu.get('fieldOfStudy'),
                    start_date=edu.get('startDate'),
                    end_date=edu.get('endDate'),
                    document_url=edu.get('documentUrl')
                ))

            for emp in employment:
                db.add(EmploymentRecord(
                    candidate_id=candidate.id,
                    company_name=emp['companyName'],
                    job_title=emp['jobTitle'],
                    start_date=emp.get('startDate'),
                    end_date=emp.get('endDate'),
                    supervisor_name=emp.get('supervisorName'),
                    supervisor_contact=emp.get('supervisorContact'),
                    can_contact=bool(emp.get('canContact', True)),
                    document_url=emp.get('documentUrl')
                ))

            for ref in references:
                db.add(CandidateReference(
                    candidate_id=candidate.id,
                    name=ref['name'],
                    relationship_to_candidate=ref['relationship'],
                    company=ref.get('company'),
                    email=ref.get('email'),
                    phone=ref.get('phone'),
                    preferred_time=ref.get('preferredTime'),
                    language=ref.get('language') or 'en'
                ))

            verification.status = VerificationStatus.IN_PROGRESS

            # Pending checks are picked up for processing
            for item in verification.items:
                if item.status == ItemStatus.PENDING:
                    item.status = ItemStatus.VERIFYING

        logger.info(
            f"Verification {verification_id} received {len(education)} education, "
            f"{len(employment)} employment and {len(references)} reference records"
        )

        return {
            'message': 'Information submitted successfully. Verification in progress.',
            'submitted': {
                'education': len(education),
                'employment': len(employment),
                'references': len(references)
            }
        }

    def get_verification(self, verification_id: str, current_user: Dict) -> Dict:
        """Verification with nested items"""
        with get_db() as db:
            verification = self._get_verification(db, verification_id)
            self._check_access(verification, current_user)

            data = verification_to_dict(verification, include_items=True)
            data.update({
                'candidate_name': verification.candidate.name,
                'candidate_email': verification.candidate.email,
                'candidate_phone': verification.candidate.phone,
                'employer_name': verification.employer.company_name
            })
            return data

    def update_verification_status(self, verification_id: str, status: str, current_user: Dict) -> Dict:
        """Move a verification to a new status"""
        target = parse_enum(VerificationStatus, status)

        with get_db() as db:
            verification = self._get_verification(db, verification_id)
            self._check_access(verification, current_user, allow_candidate=False)

            if target == VerificationStatus.COMPLETED:
                # Completion also issues the credential
                raise StateError(
                    f"Verifications are completed through /api/admin/verifications/{verification_id}/complete"
                )

            ensure_transition(VERIFICATION_TRANSITIONS, verification.status, target, 'verification')

            previous = verification.status
            verification.status = target

        logger.info(f"Verification {verification_id} moved from {previous.value} to {target.value}")
        return {'message': 'Status updated successfully', 'status': target.value}

    def update_item_status(self, verification_id: str, item_id: str, data: Dict) -> Dict:
        """Record progress or an outcome on a single check"""
        if all(data.get(key) is None for key in ('status', 'result', 'details')):
            raise ValidationError('One of status, result or details is required')

        target = parse_enum(ItemStatus, data['status']) if data.get('status') else None
        result = parse_enum(ItemResult, data['result'], 'result') if data.get('result') else None
        details = data.get('details')
        if details is not None and not isinstance(details, (dict, list)):
            raise ValidationError('details must be an object or a list')

        with get_db() as db:
            item = db.query(VerificationItem).filter_by(id=item_id, verification_id=verification_id).first()
            if not item:
                raise NotFoundError('Verification item not found')

            if target is not None:
                ensure_transition(ITEM_TRANSITIONS, item.status, target, f"{item.type.value} check")
                item.status = target
                if target == ItemStatus.VERIFIED:
                    item.verified_date = datetime.utcnow()

            if details is not None:
                item.details = details

            if result is not None:
                item.result = result
                if result in (ItemResult.WARNING, ItemResult.FAILED):
                    issue = None
                    if isinstance(details, dict):
                        issue = details.get('issue') or details.get('description')
                    self.review_service.enqueue(
                        db,
                        verification_id,
                        item.type.value,
                        issue or f"{item.type.value.title()} check returned {result.value}",
                        ReviewPriority.HIGH if result == ItemResult.FAILED else ReviewPriority.NORMAL
                    )

            db.flush()
            updated = item_to_dict(item)

        logger.info(f"Item {item_id} on verification {verification_id} updated: {updated['status']}/{updated['result']}")
        return updated

    def list_for_employer(self, user_id: str) -> List[Dict]:
        """Verifications requested by the caller's company, newest first"""
        with get_db() as db:
            employer = self._employer_for_user(db, user_id)

            rows = db.query(Verification, Candidate).join(
                Candidate, Verification.candidate_id == Candidate.id
            ).filter(
                Verification.employer_id == employer.id
            ).order_by(
                Verification.initiated_date.desc()
            ).all()

            results = []
            for verification, candidate in rows:
                data = verification_to_dict(verification)
                data.update({
                    'candidate_name': candidate.name,
                    'candidate_email': candidate.email,
                    'candidate_phone': candidate.phone
                })
                results.append(data)
            return results

    def list_for_candidate(self, user_id: str) -> List[Dict]:
        """Verifications of the calling candidate, newest first"""
        with get_db() as db:
            candidate = self._candidate_for_user(db, user_id)

            rows = db.query(Verification, Employer).join(
                Employer, Verification.employer_id == Employer.id
            ).filter(
                Verification.candidate_id == candidate.id
            ).order_by(
                Verification.initiated_date.desc()
            ).all()

            results = []
            for verification, employer in rows:
                data = verification_to_dict(verification)
                data['employer_name'] = employer.company_name
                results.append(data)
            return results

    def get_employer_stats(self, user_id: str) -> Dict:
        """Counts by status for the caller's company"""
        with get_db() as db:
            employer = self._employer_for_user(db, user_id)

            counts = dict(db.query(Verification.status, func.count(Verification.id)).filter(
                Verification.employer_id == employer.id
            ).group_by(Verification.status).all())

            completed = db.query(Verification.initiated_date, Verification.completion_date).filter(
                Verification.employer_id == employer.id,
                Verification.status == VerificationStatus.COMPLETED,
                Verification.completion_date.isnot(None)
            ).all()

        stats = {'total': sum(counts.values())}
        for status in VerificationStatus:
            stats[status.value] = counts.get(status, 0)

        if completed:
            hours = [(done - started).total_seconds() / 3600 for started, done in completed]
            stats['avgCompletionHours'] = round(sum(hours) / len(hours), 1)
        else:
            stats['avgCompletionHours'] = None

        return stats
