from functools import wraps
from flask import request
from credcheck.exceptions import AuthError
from credcheck.utils.security import bearer_token, verify_token
from credcheck.utils.logger import get_logger

logger = get_logger(__name__)


def require_auth(f):
    """Decorator to require a valid bearer token; passes its claims as ``current_user``"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        auth_header = request.headers.get('Authorization')
        if not auth_header:
            raise AuthError('Authorization header missing')

        token = bearer_token(auth_header)
        if not token:
            raise AuthError('Invalid authorization header format')

        payload = verify_token(token)
        if not payload:
            raise AuthError('Invalid or expired token')

        return f(current_user=payload, *args, **kwargs)

    return decorated_function


def require_role(allowed_roles):
    """Decorator to require specific roles"""
    def decorator(f):
        @wraps(f)
        def decorated_function(current_user, *args, **kwargs):
            if current_user.get('role') not in allowed_roles:
                logger.warning(
                    f"User {current_user.get('user_id')} with role {current_user.get('role')} "
                    f"denied access to {request.path}"
                )
                raise AuthError('Insufficient permissions', status_code=403)
            return f(current_user=current_user, *args, **kwargs)
        return decorated_function
    return decorator


def require_admin(f):
    """Decorator to require admin role"""
    return require_role(['admin'])(f)


def require_employer(f):
    """Decorator to require employer role"""
    return require_role(['employer'])(f)


def require_candidate(f):
    """Decorator to require candidate role"""
    return require_role(['candidate'])(f)
