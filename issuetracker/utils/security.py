# issuetracker/utils/security.py
from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from issuetracker.config.security import SecurityConfig

pwd_context = CryptContext(
    schemes=[SecurityConfig.PASSWORD['scheme']],
    deprecated="auto",
    bcrypt__rounds=SecurityConfig.PASSWORD['salt_rounds'],
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, stored_password: Optional[str]) -> bool:
    """Check a submitted password against the stored value.

    Rows written before hashing was introduced hold the plaintext password, so
    anything that is not a recognised hash falls back to direct comparison.
    """
    if not stored_password:
        return False
    try:
        if pwd_context.verify(plain_password, stored_password):
            return True
    except (ValueError, TypeError):
        # Not a hash passlib recognises
        pass
    return plain_password == stored_password


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=SecurityConfig.TOKEN['expire_minutes']))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SecurityConfig.TOKEN['secret_key'], algorithm=SecurityConfig.TOKEN['algorithm'])


def verify_token(token: str) -> Optional[dict]:
    """Verify JWT token and return payload without raising exceptions"""
    try:
        return jwt.decode(token, SecurityConfig.TOKEN['secret_key'], algorithms=[SecurityConfig.TOKEN['algorithm']])
    except JWTError:
        return None
