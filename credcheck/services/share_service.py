from datetime import datetime, timedelta
from typing import Dict, List, Optional
from config.config import Config
from credcheck.database import get_db
from credcheck.exceptions import GoneError, NotFoundError, ValidationError
from credcheck.models import Candidate, Credential, CredentialShare
from credcheck.models.base import generate_id
from credcheck.services.credential_service import CredentialService
from credcheck.services.notification_service import NotificationService
from credcheck.utils.validators import validate_email, positive_int
from credcheck.utils.logger import get_logger

logger = get_logger(__name__)


def share_to_dict(share: CredentialShare) -> Dict:
    return {
        'id': share.id,
        'credential_id': share.credential_id,
        'shared_with_email': share.shared_with_email,
        'share_link': share.share_link,
        'created_date': share.created_at.isoformat() if share.created_at else None,
        'expires_date': share.expires_date.isoformat() if share.expires_date else None,
        'access_count': share.access_count,
        'last_accessed': share.last_accessed.isoformat() if share.last_accessed else None
    }


class ShareService:
    """Service for credential share links"""

    def __init__(self):
        self.credential_service = CredentialService()
        self.notification_service = NotificationService()

    def create_share(self, credential_id: str, data: Dict, sharer_name: Optional[str] = None) -> Dict:
        """Create a share link, optionally emailed and time-limited"""
        email = data.get('sharedWithEmail')
        if email:
            valid, error = validate_email(email)
            if not valid:
                raise ValidationError(error)
        expiry_days = positive_int(data.get('expiryDays'), 'expiryDays', Config.MAX_SHARE_EXPIRY_DAYS)

        share_id = generate_id()
        share_link = f"{Config.APP_URL}/shared/{share_id}"
        expires_date = datetime.utcnow() + timedelta(days=expiry_days) if expiry_days else None

        # Credential existence is not checked here
        with get_db() as db:
            db.add(CredentialShare(
                id=share_id,
                credential_id=credential_id,
                shared_with_email=email,
                share_link=share_link,
                expires_date=expires_date,
                access_count=0
            ))

        expires_iso = expires_date.isoformat() if expires_date else None
        if email:
            self.notification_service.send_share_email(
                email, sharer_name or 'A candidate', share_link, expires_iso
            )

        logger.info(f"Created share {share_id} for credential {credential_id}")
        return {
            'id': share_id,
            'shareLink': share_link,
            'expiresDate': expires_iso,
            'message': 'Share link created successfully'
        }

    def track_access(self, share_id: str) -> Dict:
        """Count a view of a share link; unknown ids are ignored"""
        with get_db() as db:
            updated = self._increment(db, share_id)

        if updated == 0:
            logger.info(f"Access tracked for unknown share {share_id}")
        return {'message': 'Access tracked'}

    def _increment(self, db, share_id: str) -> int:
        return db.query(CredentialShare).filter(
            CredentialShare.id == share_id
        ).update({
            CredentialShare.access_count: CredentialShare.access_count + 1,
            CredentialShare.last_accessed: datetime.utcnow()
        }, synchronize_session=False)

    def resolve_share(self, share_id: str) -> Dict:
        """Open a share link: count the view and return the credential's validity"""
        with get_db() as db:
            share = db.query(CredentialShare).filter_by(id=share_id).first()
            if not share:
                raise NotFoundError('Share link not found')
            if share.expires_date and share.expires_date < datetime.utcnow():
                raise GoneError('Share link expired')

            # Views of a dangling share are not counted
            if not db.query(Credential.id).filter(Credential.id == share.credential_id).first():
                raise NotFoundError('Credential not found')

            self._increment(db, share_id)
            credential_id = share.credential_id

        return self.credential_service.verify_credential(credential_id)

    def list_shares(self, credential_id: str, user_id: str) -> List[Dict]:
        """Shares of one of the caller's credentials, newest first"""
        with get_db() as db:
            owned = db.query(Credential.id).join(
                Candidate, Credential.candidate_id == Candidate.id
            ).filter(
                Credential.id == credential_id,
                Candidate.user_id == user_id
            ).first()
            if not owned:
                raise NotFoundError('Credential not found')

            shares = db.query(CredentialShare).filter(
                CredentialShare.credential_id == credential_id
            ).order_by(CredentialShare.created_at.desc()).all()

            return [share_to_dict(s) for s in shares]
