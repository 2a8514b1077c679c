# issuetracker/config/security.py
# Security configuration for passwords, tokens and file uploads

import logging
import os
import secrets
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def token_secret() -> str:
    """Signing key for login tokens; a random per-process key when SECRET_KEY is unset"""
    secret = os.getenv('SECRET_KEY')
    if secret:
        return secret
    logger.warning("SECRET_KEY is not set; using a random key, tokens will not survive a restart")
    return secrets.token_urlsafe(32)


class SecurityConfig:
    """Security configuration for the application"""

    # Password hashing
    PASSWORD = {
        'scheme': 'bcrypt',
        'salt_rounds': int(os.getenv('SALT_ROUNDS', 10)),
    }

    # Access tokens issued on login
    TOKEN = {
        'secret_key': token_secret(),
        'algorithm': os.getenv('ALGORITHM', 'HS256'),
        'expire_minutes': int(os.getenv('ACCESS_TOKEN_EXPIRE_MINUTES', 60 * 24)),
    }

    # File upload settings
    FILE_UPLOAD = {
        'field_name': 'attachment',
        'max_file_size': int(os.getenv('MAX_FILE_SIZE', 10 * 1024 * 1024)),  # 10MB
        'image_mime_types': {
            'image/jpeg',
            'image/jpg',
            'image/png',
            'image/gif',
        },
    }

    # File storage
    STORAGE = {
        'upload_dir': os.getenv('UPLOAD_DIR', os.path.join(os.getcwd(), 'uploads')),
    }
