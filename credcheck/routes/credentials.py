from flask import Blueprint, request, jsonify
from credcheck.middleware.auth import require_auth, require_admin, require_candidate
from credcheck.services.credential_service import CredentialService
from credcheck.services.share_service import ShareService

bp = Blueprint('credentials', __name__)
credential_service = CredentialService()
share_service = ShareService()


@bp.route('/my-credentials', methods=['GET'])
@require_auth
@require_candidate
def my_credentials(current_user):
    """List credentials held by the logged-in candidate"""
    return jsonify(credential_service.list_for_candidate(current_user['user_id'])), 200


@bp.route('/issue', methods=['POST'])
@require_auth
@require_admin
def issue_credential(current_user):
    """Issue a credential to a candidate"""
    data = request.get_json(silent=True) or {}
    return jsonify(credential_service.issue_credential(data)), 201


@bp.route('/verify/<credential_id>', methods=['GET'])
def verify_credential(credential_id):
    """Public credential validity check"""
    return jsonify(credential_service.verify_credential(credential_id)), 200


@bp.route('/<credential_id>/revoke', methods=['POST'])
@require_auth
@require_admin
def revoke_credential(credential_id, current_user):
    """Revoke a credential"""
    data = request.get_json(silent=True) or {}
    return jsonify(credential_service.revoke_credential(credential_id, data.get('reason'))), 200


@bp.route('/<credential_id>/share', methods=['POST'])
@require_auth
@require_candidate
def share_credential(credential_id, current_user):
    """Create a share link for a credential"""
    data = request.get_json(silent=True) or {}
    result = share_service.create_share(credential_id, data, sharer_name=current_user.get('name'))
    return jsonify(result), 201


@bp.route('/<credential_id>/shares', methods=['GET'])
@require_auth
@require_candidate
def list_shares(credential_id, current_user):
    """List share links of a credential"""
    return jsonify(share_service.list_shares(credential_id, current_user['user_id'])), 200


@bp.route('/shared/<share_id>/track', methods=['POST'])
def track_share(share_id):
    """Count a view of a share link"""
    return jsonify(share_service.track_access(share_id)), 200


@bp.route('/shared/<share_id>', methods=['GET'])
def open_share(share_id):
    """Open a share link"""
    return jsonify(share_service.resolve_share(share_id)), 200
