from flask import Blueprint, request, jsonify
from credcheck.exceptions import ValidationError
from credcheck.middleware.auth import require_auth, require_admin
from credcheck.services.admin_service import AdminService
from credcheck.services.review_service import ReviewService

bp = Blueprint('admin', __name__)
admin_service = AdminService()
review_service = ReviewService()


@bp.route('/review-queue', methods=['GET'])
@require_auth
@require_admin
def review_queue(current_user):
    """Get items awaiting manual review"""
    status = request.args.get('status', 'pending')
    return jsonify(review_service.list_queue(status)), 200


@bp.route('/review-queue', methods=['POST'])
@require_auth
@require_admin
def flag_for_review(current_user):
    """Flag a check for manual review"""
    data = request.get_json(silent=True) or {}
    return jsonify(review_service.flag_for_review(data)), 201


@bp.route('/review-queue/<item_id>/resolve', methods=['POST'])
@require_auth
@require_admin
def resolve_review(item_id, current_user):
    """Resolve a review item"""
    data = request.get_json(silent=True) or {}
    return jsonify(review_service.resolve(item_id, current_user['user_id'], data.get('notes'))), 200


@bp.route('/analytics', methods=['GET'])
@require_auth
@require_admin
def analytics(current_user):
    """Platform dashboard figures"""
    return jsonify(admin_service.get_analytics()), 200


@bp.route('/employers', methods=['GET'])
@require_auth
@require_admin
def list_employers(current_user):
    """List all employers"""
    return jsonify(admin_service.list_employers()), 200


@bp.route('/candidates', methods=['GET'])
@require_auth
@require_admin
def list_candidates(current_user):
    """List all candidates"""
    return jsonify(admin_service.list_candidates()), 200


@bp.route('/employers/<employer_id>/status', methods=['PATCH'])
@require_auth
@require_admin
def update_employer_status(employer_id, current_user):
    """Activate or suspend an employer"""
    data = request.get_json(silent=True) or {}
    if not data.get('status'):
        raise ValidationError('status is required')

    return jsonify(admin_service.update_employer_status(employer_id, data['status'])), 200


@bp.route('/verifications/<verification_id>/complete', methods=['POST'])
@require_auth
@require_admin
def complete_verification(verification_id, current_user):
    """Complete a verification and issue its credential"""
    return jsonify(admin_service.complete_verification(verification_id)), 200
