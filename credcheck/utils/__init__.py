from .logger import setup_logger, get_logger
from .security import hash_password, verify_password, generate_token, verify_token, generate_user_token
from .validators import validate_email, validate_password, require_fields

__all__ = [
    'setup_logger', 'get_logger',
    'hash_password', 'verify_password', 'generate_token', 'verify_token', 'generate_user_token',
    'validate_email', 'validate_password', 'require_fields'
]
