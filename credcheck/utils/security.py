from datetime import datetime, timedelta
from typing import Optional
from passlib.context import CryptContext
from jose import jwt, JWTError
from config.config import Config

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    """Hash a password using bcrypt"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against hash"""
    return pwd_context.verify(plain_password, hashed_password)


def generate_token(data: dict, expires_delta: timedelta = None) -> str:
    """Sign claims into a JWT"""
    now = datetime.utcnow()
    claims = dict(data)
    claims['iat'] = now
    claims['exp'] = now + (expires_delta or timedelta(minutes=Config.ACCESS_TOKEN_EXPIRE_MINUTES))
    return jwt.encode(claims, Config.SECRET_KEY, algorithm=ALGORITHM)


def verify_token(token: str) -> Optional[dict]:
    """Decode a JWT; None when the signature or expiry is bad"""
    try:
        return jwt.decode(token, Config.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None


def generate_user_token(user) -> str:
    """Access token for a user row"""
    return generate_token({
        'user_id': user.id,
        'email': user.email,
        'role': user.role.value,
        'name': user.name
    })


def bearer_token(auth_header: Optional[str]) -> Optional[str]:
    """Token part of an ``Authorization: Bearer <token>`` header"""
    if not auth_header:
        return None
    parts = auth_header.split()
    if len(parts) != 2 or parts[0] != 'Bearer':
        return None
    return parts[1]
