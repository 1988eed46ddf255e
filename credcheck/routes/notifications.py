from flask import Blueprint, jsonify
from credcheck.middleware.auth import require_auth
from credcheck.services.notification_service import NotificationService

bp = Blueprint('notifications', __name__)
notification_service = NotificationService()


@bp.route('', methods=['GET'])
@require_auth
def list_notifications(current_user):
    """Get the caller's notifications"""
    return jsonify(notification_service.list_notifications(current_user['user_id'])), 200


@bp.route('/<notification_id>/read', methods=['PATCH'])
@require_auth
def mark_read(notification_id, current_user):
    """Mark a notification as read"""
    return jsonify(notification_service.mark_read(notification_id, current_user['user_id'])), 200
