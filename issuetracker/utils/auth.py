# issuetracker/utils/auth.py
from typing import Optional

from fastapi import Header

from issuetracker.utils.security import verify_token


def resolve_user_id(x_user_id: Optional[str], authorization: Optional[str]) -> Optional[str]:
    """Return the caller's user id as sent by the client, or None.

    The ``x-user-id`` header wins; otherwise the ``sub`` claim of a bearer
    token issued by /login is used. The value is returned unparsed so callers
    can report a non-numeric id as a validation error.
    """
    if x_user_id is not None and x_user_id.strip():
        return x_user_id
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            payload = verify_token(parts[1])
            if payload and payload.get("sub") is not None:
                return str(payload["sub"])
    return None


def get_caller_id(
    x_user_id: Optional[str] = Header(default=None),
    authorization: Optional[str] = Header(default=None),
) -> Optional[str]:
    return resolve_user_id(x_user_id, authorization)
