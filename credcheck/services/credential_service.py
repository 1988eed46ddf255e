from datetime import datetime
from typing import Dict, List, Optional
from dateutil.relativedelta import relativedelta
from config.config import Config
from credcheck.database import get_db
from credcheck.exceptions import NotFoundError
from credcheck.models import Candidate, Credential
from credcheck.models.base import generate_id
from credcheck.models.credential import CredentialStatus
from credcheck.services.notification_service import NotificationService
from credcheck.utils.credentials import content_fingerprint
from credcheck.utils.qr import qr_data_url
from credcheck.utils.validators import require_fields, positive_int
from credcheck.utils.logger import get_logger

logger = get_logger(__name__)


def compute_expiry(issued: datetime, expiry_months: Optional[int]) -> Optional[datetime]:
    """Calendar-month expiry, or None for credentials that never expire"""
    if not expiry_months:
        return None
    return issued + relativedelta(months=expiry_months)


def verification_url_for(credential_id: str) -> str:
    return f"{Config.APP_URL}/verify/{credential_id}"


def credential_to_dict(credential: Credential) -> Dict:
    return {
        'id': credential.id,
        'candidate_id': credential.candidate_id,
        'type': credential.type,
        'title': credential.title,
        'details': credential.details,
        'issued_date': credential.issued_date.isoformat() if credential.issued_date else None,
        'expiry_date': credential.expiry_date.isoformat() if credential.expiry_date else None,
        'status': credential.status.value,
        'verification_url': credential.verification_url,
        'qr_code': credential.qr_code,
        'signature': credential.signature
    }


class CredentialService:
    """Service for issuing, verifying and revoking credentials"""

    def __init__(self):
        self.notification_service = NotificationService()

    def issue(self, db, candidate: Candidate, credential_type: str, title: str, details,
              expiry_months: Optional[int] = None, credential_id: Optional[str] = None,
              issued: Optional[datetime] = None) -> Credential:
        """Create a credential inside the caller's transaction"""
        credential_id = credential_id or generate_id()
        issued = issued or datetime.utcnow().replace(microsecond=0)
        verification_url = verification_url_for(credential_id)

        credential = Credential(
            id=credential_id,
            candidate_id=candidate.id,
            type=credential_type,
            title=title,
            details=details,
            issued_date=issued,
            expiry_date=compute_expiry(issued, expiry_months),
            status=CredentialStatus.ACTIVE,
            verification_url=verification_url,
            qr_code=qr_data_url(verification_url),
            signature=content_fingerprint(credential_id, credential_type, title, details, issued)
        )
        db.add(credential)

        if candidate.user_id:
            self.notification_service.notify(
                db,
                candidate.user_id,
                'credential_issued',
                'New Credential Issued',
                f"Your {title} credential has been issued and is ready to share."
            )

        logger.info(f"Issued credential {credential_id} ({credential_type}) to candidate {candidate.id}")
        return credential

    def issue_credential(self, data: Dict) -> Dict:
        """Issue a credential to a candidate"""
        require_fields(data, ['candidateId', 'type', 'title'])
        expiry_months = positive_int(data.get('expiryMonths'), 'expiryMonths', Config.MAX_CREDENTIAL_EXPIRY_MONTHS)

        with get_db() as db:
            candidate = db.query(Candidate).filter_by(id=data['candidateId']).first()
            if not candidate:
                raise NotFoundError('Candidate not found')

            credential = self.issue(
                db, candidate, data['type'], data['title'], data.get('details'), expiry_months
            )
            db.flush()
            result = {
                'id': credential.id,
                'verificationUrl': credential.verification_url,
                'qrCode': credential.qr_code,
                'signature': credential.signature,
                'expiryDate': credential.expiry_date.isoformat() if credential.expiry_date else None,
                'message': 'Credential issued successfully'
            }
            recipient = candidate.user.email if candidate.user else candidate.email
            candidate_name = candidate.name

        self.notification_service.send_credential_email(
            recipient, candidate_name, data['title'], result['verificationUrl']
        )
        return result

    def verify_credential(self, credential_id: str) -> Dict:
        """Public validity check for a credential"""
        with get_db() as db:
            row = db.query(Credential, Candidate).join(
                Candidate, Credential.candidate_id == Candidate.id
            ).filter(Credential.id == credential_id).first()

            if not row:
                raise NotFoundError('Credential not found')

            credential, candidate = row
            now = datetime.utcnow()
            is_expired = credential.expiry_date is not None and credential.expiry_date < now
            is_revoked = credential.status == CredentialStatus.REVOKED

            if is_revoked:
                status = 'revoked'
            elif is_expired:
                status = 'expired'
            else:
                status = 'active'

            # Informational only; validity depends on status and expiry
            fingerprint_matches = credential.signature == content_fingerprint(
                credential.id, credential.type, credential.title, credential.details, credential.issued_date
            )

            return {
                'valid': not is_expired and not is_revoked,
                'status': status,
                'credential': {
                    'id': credential.id,
                    'type': credential.type,
                    'title': credential.title,
                    'candidateName': candidate.name,
                    'details': credential.details,
                    'issuedDate': credential.issued_date.isoformat(),
                    'expiryDate': credential.expiry_date.isoformat() if credential.expiry_date else None,
                    'signature': credential.signature,
                    'fingerprintMatches': fingerprint_matches
                }
            }

    def revoke_credential(self, credential_id: str, reason: Optional[str] = None) -> Dict:
        """Revoke a credential; revoking twice is a no-op"""
        with get_db() as db:
            credential = db.query(Credential).filter_by(id=credential_id).first()
            if not credential:
                raise NotFoundError('Credential not found')

            if credential.status == CredentialStatus.REVOKED:
                logger.info(f"Credential {credential_id} already revoked")
                return {'message': 'Credential revoked successfully'}

            credential.status = CredentialStatus.REVOKED
            credential.revoked_date = datetime.utcnow()
            credential.revocation_reason = reason

        logger.info(f"Credential {credential_id} revoked: {reason or 'no reason given'}")
        return {'message': 'Credential revoked successfully'}

    def list_for_candidate(self, user_id: str) -> List[Dict]:
        """Credentials held by the calling candidate, newest first"""
        with get_db() as db:
            candidate = db.query(Candidate).filter_by(user_id=user_id).first()
            if not candidate:
                raise NotFoundError('Candidate not found')

            credentials = db.query(Credential).filter(
                Credential.candidate_id == candidate.id
            ).order_by(Credential.issued_date.desc()).all()

            return [credential_to_dict(c) for c in credentials]
