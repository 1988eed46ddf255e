from datetime import datetime, timedelta
from typing import Dict, List
from sqlalchemy import func
from config.config import Config
from credcheck.database import get_db, DatabaseManager
from credcheck.exceptions import NotFoundError
from credcheck.models import User, Employer, Candidate, Verification, Credential, ReviewQueueItem
from credcheck.models.employer import EmployerStatus
from credcheck.models.verification import (
    VerificationStatus, ItemStatus, ItemResult, VERIFICATION_TRANSITIONS
)
from credcheck.models.credential import CredentialStatus
from credcheck.models.review import ReviewStatus
from credcheck.models.base import generate_id
from credcheck.services.auth_service import employer_to_dict, candidate_to_dict
from credcheck.services.credential_service import CredentialService, compute_expiry
from credcheck.services.notification_service import NotificationService
from credcheck.utils.credentials import background_check_document
from credcheck.utils.transitions import parse_enum, ensure_transition
from credcheck.utils.logger import get_logger

logger = get_logger(__name__)

CHECK_LABELS = {
    'identity': 'Identity Verification',
    'education': 'Education Verification',
    'employment': 'Employment Verification',
    'criminal': 'Criminal Record Check',
    'reference': 'Reference Checks'
}

RESULT_LABELS = {
    ItemResult.VERIFIED: 'Pass',
    ItemResult.WARNING: 'Pass (with warning)',
    ItemResult.FAILED: 'Fail'
}


def summarize_outcome(verification: Verification) -> Dict:
    """Snapshot of a completed verification for its credential"""
    checks = {}
    warnings = 0
    failures = 0
    for item in verification.items:
        result = item.result or ItemResult.VERIFIED
        checks[CHECK_LABELS.get(item.type.value, item.type.value)] = RESULT_LABELS[result]
        if result == ItemResult.WARNING:
            warnings += 1
        elif result == ItemResult.FAILED:
            failures += 1

    return {
        'verification_id': verification.id,
        'candidate_name': verification.candidate.name,
        'position': verification.position,
        'employer': verification.employer.company_name,
        'package_type': verification.package_type,
        'completion_date': verification.completion_date.isoformat(),
        'checks_completed': checks,
        'warnings': warnings,
        'overall_result': 'NOT VERIFIED' if failures else 'VERIFIED'
    }


class AdminService:
    """Service for admin operations"""

    def __init__(self):
        self.credential_service = CredentialService()
        self.notification_service = NotificationService()
        self.employer_db = DatabaseManager(Employer)
        self.candidate_db = DatabaseManager(Candidate)
        self.credential_db = DatabaseManager(Credential)
        self.review_db = DatabaseManager(ReviewQueueItem)

    def complete_verification(self, verification_id: str) -> Dict:
        """Finish every check, close the verification and issue its credential"""
        now = datetime.utcnow().replace(microsecond=0)

        # Completion and issuance commit together
        with get_db() as db:
            verification = db.query(Verification).filter_by(id=verification_id).first()
            if not verification:
                raise NotFoundError('Verification not found')

            ensure_transition(
                VERIFICATION_TRANSITIONS, verification.status, VerificationStatus.COMPLETED, 'verification'
            )

            for item in verification.items:
                if item.status != ItemStatus.VERIFIED:
                    item.status = ItemStatus.VERIFIED
                    item.verified_date = now
                if item.result is None:
                    item.result = ItemResult.VERIFIED

            verification.status = VerificationStatus.COMPLETED
            verification.completion_date = now

            candidate = verification.candidate
            outcome = summarize_outcome(verification)

            credential_id = generate_id()
            expiry_months = Config.DEFAULT_CREDENTIAL_EXPIRY_MONTHS
            outcome['document'] = background_check_document(
                credential_id,
                candidate.id,
                candidate.name,
                outcome,
                now,
                compute_expiry(now, expiry_months)
            )

            title = f"Background Check Certificate - {verification.position or verification.package_type}"
            credential = self.credential_service.issue(
                db, candidate, 'background_check', title, outcome,
                expiry_months=expiry_months, credential_id=credential_id, issued=now
            )

            result = {
                'message': 'Verification completed successfully',
                'credentialId': credential.id,
                'verificationUrl': credential.verification_url,
                'overallResult': outcome['overall_result']
            }
            recipient = candidate.user.email if candidate.user else candidate.email
            candidate_name = candidate.name

        self.notification_service.send_credential_email(
            recipient, candidate_name, title, result['verificationUrl']
        )
        logger.info(f"Verification {verification_id} completed, credential {result['credentialId']} issued")
        return result

    def get_analytics(self) -> Dict:
        """Platform-wide dashboard figures"""
        with get_db() as db:
            total_verifications = db.query(Verification).count()

            status_counts = db.query(Verification.status, func.count(Verification.id)).group_by(
                Verification.status
            ).all()

            since = datetime.utcnow() - timedelta(days=7)
            recent_dates = db.query(Verification.initiated_date).filter(
                Verification.initiated_date >= since
            ).all()

        total_employers = self.employer_db.count()
        total_candidates = self.candidate_db.count()
        active_credentials = self.credential_db.count(status=CredentialStatus.ACTIVE)
        pending_reviews = self.review_db.count(status=ReviewStatus.PENDING)

        per_day = {}
        for (initiated,) in recent_dates:
            day = initiated.date().isoformat()
            per_day[day] = per_day.get(day, 0) + 1

        return {
            'totalVerifications': total_verifications,
            'totalEmployers': total_employers,
            'totalCandidates': total_candidates,
            'activeCredentials': active_credentials,
            'pendingReviews': pending_reviews,
            'verificationsByStatus': [
                {'status': status.value, 'count': count} for status, count in status_counts
            ],
            'recentVerifications': [
                {'date': day, 'count': per_day[day]} for day in sorted(per_day, reverse=True)
            ]
        }

    def list_employers(self) -> List[Dict]:
        """All employers with their contact user"""
        with get_db() as db:
            rows = db.query(Employer, User).join(
                User, Employer.user_id == User.id
            ).order_by(Employer.company_name).all()

            results = []
            for employer, user in rows:
                data = employer_to_dict(employer)
                data.update({
                    'user_id': user.id,
                    'email': user.email,
                    'contact_name': user.name,
                    'phone': user.phone
                })
                results.append(data)
            return results

    def list_candidates(self) -> List[Dict]:
        """All candidates, registered or only invited"""
        with get_db() as db:
            rows = db.query(Candidate, User.email).outerjoin(
                User, Candidate.user_id == User.id
            ).order_by(Candidate.name).all()

            results = []
            for candidate, user_email in rows:
                data = candidate_to_dict(candidate)
                data['user_email'] = user_email
                results.append(data)
            return results

    def update_employer_status(self, employer_id: str, status: str) -> Dict:
        """Activate or suspend an employer"""
        target = parse_enum(EmployerStatus, status)

        if not self.employer_db.update(employer_id, status=target):
            raise NotFoundError('Employer not found')

        logger.info(f"Employer {employer_id} status set to {target.value}")
        return {'message': 'Status updated successfully', 'status': target.value}
