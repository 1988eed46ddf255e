from typing import Dict, List, Optional
from config.config import Config
from credcheck.database import get_db
from credcheck.exceptions import NotFoundError
from credcheck.integrations import SendGridClient
from credcheck.models import Notification
from credcheck.utils.logger import get_logger

logger = get_logger(__name__)


def notification_to_dict(notification: Notification) -> Dict:
    return {
        'id': notification.id,
        'user_id': notification.user_id,
        'type': notification.type,
        'title': notification.title,
        'message': notification.message,
        'read': notification.read,
        'created_at': notification.created_at.isoformat() if notification.created_at else None
    }


class NotificationService:
    """Service for in-app notifications and outbound email"""

    def __init__(self):
        self.sendgrid = SendGridClient()

    def notify(self, db, user_id: str, notification_type: str, title: str, message: str) -> Notification:
        """Record an in-app notification inside the caller's transaction"""
        notification = Notification(
            user_id=user_id,
            type=notification_type,
            title=title,
            message=message,
            read=False
        )
        db.add(notification)
        logger.info(f"Queued {notification_type} notification for user {user_id}")
        return notification

    def list_notifications(self, user_id: str) -> List[Dict]:
        """Most recent notifications for a user"""
        with get_db() as db:
            notifications = db.query(Notification).filter(
                Notification.user_id == user_id
            ).order_by(
                Notification.created_at.desc()
            ).limit(Config.NOTIFICATION_LIST_LIMIT).all()

            return [notification_to_dict(n) for n in notifications]

    def mark_read(self, notification_id: str, user_id: str) -> Dict:
        """Mark one of the user's notifications as read"""
        with get_db() as db:
            updated = db.query(Notification).filter(
                Notification.id == notification_id,
                Notification.user_id == user_id
            ).update({Notification.read: True}, synchronize_session=False)

            if updated == 0:
                raise NotFoundError('Notification not found')

        return {'message': 'Notification marked as read'}

    def send_invitation_email(self, email: str, candidate_name: str, employer_name: str,
                              position: Optional[str], candidate_id: str):
        """Email a candidate their background check invitation"""
        try:
            register_link = f"{Config.APP_URL}/register?candidateId={candidate_id}"
            self.sendgrid.send_verification_invitation(
                email, candidate_name, employer_name, position, register_link
            )
        except Exception as e:
            logger.error(f"Error sending invitation email: {str(e)}")

    def send_credential_email(self, email: str, candidate_name: str, title: str, verification_url: str):
        """Email a candidate that a credential was issued"""
        try:
            self.sendgrid.send_credential_issued(email, candidate_name, title, verification_url)
        except Exception as e:
            logger.error(f"Error sending credential email: {str(e)}")

    def send_share_email(self, email: str, sharer_name: str, share_link: str,
                         expires_date: Optional[str] = None):
        """Email a share link to its recipient"""
        try:
            self.sendgrid.send_credential_share(email, sharer_name, share_link, expires_date)
        except Exception as e:
            logger.error(f"Error sending share email: {str(e)}")
