from datetime import datetime
from typing import Dict, List, Optional
from sqlalchemy import case
from credcheck.database import get_db
from credcheck.exceptions import NotFoundError
from credcheck.models import ReviewQueueItem, Verification, Candidate, Employer
from credcheck.models.review import ReviewPriority, ReviewStatus, PRIORITY_RANK, REVIEW_TRANSITIONS
from credcheck.utils.transitions import parse_enum, ensure_transition
from credcheck.utils.validators import require_fields
from credcheck.utils.logger import get_logger

logger = get_logger(__name__)


def review_item_to_dict(item: ReviewQueueItem, verification: Verification = None,
                        candidate_name: str = None, employer_name: str = None) -> Dict:
    data = {
        'id': item.id,
        'verification_id': item.verification_id,
        'item_type': item.item_type,
        'issue_description': item.issue_description,
        'priority': item.priority.value,
        'status': item.status.value,
        'assigned_to': item.assigned_to,
        'created_date': item.created_at.isoformat() if item.created_at else None,
        'resolved_date': item.resolved_date.isoformat() if item.resolved_date else None,
        'resolution_notes': item.resolution_notes
    }
    if verification is not None:
        data['position'] = verification.position
    if candidate_name is not None:
        data['candidate_name'] = candidate_name
    if employer_name is not None:
        data['employer_name'] = employer_name
    return data


class ReviewService:
    """Service for the manual review queue"""

    def enqueue(self, db, verification_id: str, item_type: str, issue_description: Optional[str],
                priority: ReviewPriority = ReviewPriority.NORMAL) -> ReviewQueueItem:
        """Add a review item inside the caller's transaction"""
        item = ReviewQueueItem(
            verification_id=verification_id,
            item_type=item_type,
            issue_description=issue_description,
            priority=priority,
            status=ReviewStatus.PENDING
        )
        db.add(item)
        logger.info(f"Flagged {item_type} on verification {verification_id} for review ({priority.value})")
        return item

    def flag_for_review(self, data: Dict) -> Dict:
        """Manually flag a verification for review"""
        require_fields(data, ['verificationId', 'itemType'])
        priority = parse_enum(ReviewPriority, data.get('priority', 'normal'), 'priority')

        with get_db() as db:
            verification = db.query(Verification).filter_by(id=data['verificationId']).first()
            if not verification:
                raise NotFoundError('Verification not found')

            item = self.enqueue(
                db,
                verification.id,
                data['itemType'],
                data.get('issueDescription'),
                priority
            )
            db.flush()
            return review_item_to_dict(item)

    def list_queue(self, status: str = 'pending') -> List[Dict]:
        """Review items by priority (high first), oldest first within a priority"""
        status_filter = parse_enum(ReviewStatus, status)
        priority_order = case(
            *[(ReviewQueueItem.priority == priority, rank) for priority, rank in PRIORITY_RANK.items()],
            else_=len(PRIORITY_RANK) + 1
        )

        with get_db() as db:
            rows = db.query(ReviewQueueItem, Verification, Candidate, Employer).join(
                Verification, ReviewQueueItem.verification_id == Verification.id
            ).join(
                Candidate, Verification.candidate_id == Candidate.id
            ).join(
                Employer, Verification.employer_id == Employer.id
            ).filter(
                ReviewQueueItem.status == status_filter
            ).order_by(
                priority_order,
                ReviewQueueItem.created_at.asc()
            ).all()

            return [
                review_item_to_dict(item, verification, candidate.name, employer.company_name)
                for item, verification, candidate, employer in rows
            ]

    def resolve(self, item_id: str, admin_user_id: str, notes: Optional[str] = None) -> Dict:
        """Resolve a pending review item"""
        with get_db() as db:
            item = db.query(ReviewQueueItem).filter_by(id=item_id).first()
            if not item:
                raise NotFoundError('Review item not found')

            ensure_transition(REVIEW_TRANSITIONS, item.status, ReviewStatus.RESOLVED, 'review item')

            item.status = ReviewStatus.RESOLVED
            item.resolved_date = datetime.utcnow()
            item.resolution_notes = notes
            item.assigned_to = admin_user_id

        logger.info(f"Review item {item_id} resolved by {admin_user_id}")
        return {'message': 'Review item resolved successfully'}
