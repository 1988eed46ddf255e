from flask import Blueprint, request, jsonify
from credcheck.exceptions import ValidationError
from credcheck.services.auth_service import AuthService
from credcheck.utils.logger import get_logger

bp = Blueprint('auth', __name__)
logger = get_logger(__name__)
auth_service = AuthService()


@bp.route('/login', methods=['POST'])
def login():
    """Login user"""
    data = request.get_json(silent=True) or {}

    if not data.get('email') or not data.get('password'):
        raise ValidationError('Email and password are required')

    result = auth_service.authenticate_user(data['email'], data['password'])
    logger.info(f"User {result['user']['id']} logged in")
    return jsonify(result), 200


@bp.route('/register/employer', methods=['POST'])
def register_employer():
    """Register a new employer"""
    data = request.get_json(silent=True) or {}
    return jsonify(auth_service.register_employer(data)), 201


@bp.route('/register/candidate', methods=['POST'])
def register_candidate():
    """Register a new candidate"""
    data = request.get_json(silent=True) or {}
    return jsonify(auth_service.register_candidate(data)), 201
