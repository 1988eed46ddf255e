from flask import Blueprint, request, jsonify
from credcheck.exceptions import ValidationError
from credcheck.middleware.auth import require_auth, require_admin, require_employer, require_candidate
from credcheck.services.verification_service import VerificationService

bp = Blueprint('verifications', __name__)
verification_service = VerificationService()


@bp.route('/employer', methods=['GET'])
@require_auth
@require_employer
def employer_verifications(current_user):
    """List the employer's verification requests"""
    return jsonify(verification_service.list_for_employer(current_user['user_id'])), 200


@bp.route('/employer/stats', methods=['GET'])
@require_auth
@require_employer
def employer_stats(current_user):
    """Verification counts for the employer dashboard"""
    return jsonify(verification_service.get_employer_stats(current_user['user_id'])), 200


@bp.route('/candidate/my-verifications', methods=['GET'])
@require_auth
@require_candidate
def candidate_verifications(current_user):
    """List verifications of the logged-in candidate"""
    return jsonify(verification_service.list_for_candidate(current_user['user_id'])), 200


@bp.route('', methods=['POST'])
@require_auth
@require_employer
def create_verification(current_user):
    """Request a background check on a candidate"""
    data = request.get_json(silent=True) or {}
    return jsonify(verification_service.create_verification(current_user['user_id'], data)), 201


@bp.route('/<verification_id>', methods=['GET'])
@require_auth
def get_verification(verification_id, current_user):
    """Get a verification with its items"""
    return jsonify(verification_service.get_verification(verification_id, current_user)), 200


@bp.route('/<verification_id>/submit', methods=['POST'])
@require_auth
@require_candidate
def submit_records(verification_id, current_user):
    """Candidate submits education, employment and references"""
    data = request.get_json(silent=True) or {}
    result = verification_service.submit_candidate_records(verification_id, current_user['user_id'], data)
    return jsonify(result), 200


@bp.route('/<verification_id>/status', methods=['PATCH'])
@require_auth
def update_status(verification_id, current_user):
    """Move a verification to a new status"""
    data = request.get_json(silent=True) or {}
    if not data.get('status'):
        raise ValidationError('status is required')

    result = verification_service.update_verification_status(verification_id, data['status'], current_user)
    return jsonify(result), 200


@bp.route('/<verification_id>/items/<item_id>', methods=['PATCH'])
@require_auth
@require_admin
def update_item(verification_id, item_id, current_user):
    """Record progress or an outcome on a check"""
    data = request.get_json(silent=True) or {}
    return jsonify(verification_service.update_item_status(verification_id, item_id, data)), 200
